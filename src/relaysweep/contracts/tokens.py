"""Token and fee contracts.

A Token is an immutable snapshot of one balance reported by the
``owner-tokens`` service. Entries are validated here, at the ingestion
boundary, so the sweep engine only ever sees well-formed values.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Token(BaseModel):
    """A wallet balance on one chain, in base units."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    symbol: str = Field(default="", description="Ticker symbol (ETH, USDC, ...)")
    address: Optional[str] = Field(
        default=None, description="Token contract address (None = chain's native asset)"
    )
    balance: str = Field(default="0", description="Unsigned integer amount in base units")
    decimals: int = Field(default=18, ge=0, description="Decimal places of the asset")
    chain: int = Field(..., description="EVM chain ID")

    @field_validator("symbol", mode="before")
    @classmethod
    def validate_symbol(cls, v: Optional[str]) -> str:
        """Treat a missing symbol as empty."""
        return "" if v is None else v

    @field_validator("address", mode="before")
    @classmethod
    def validate_address(cls, v: Optional[str]) -> Optional[str]:
        """Normalize empty addresses to None so they read as native."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("balance", mode="before")
    @classmethod
    def validate_balance(cls, v) -> str:
        """Accept ints or digit strings; reject signs, decimals and floats."""
        if v is None:
            return "0"
        if isinstance(v, bool) or isinstance(v, float):
            raise ValueError("Balance must be an integer amount in base units")
        if isinstance(v, int):
            if v < 0:
                raise ValueError("Balance must not be negative")
            return str(v)
        v = str(v).strip()
        if not v.isdigit():
            raise ValueError(f"Invalid balance {v!r}: expected base-unit digits")
        return str(int(v))

    @property
    def is_native(self) -> bool:
        """Check if this is the chain's native asset."""
        return self.address is None

    @property
    def balance_units(self) -> int:
        """Balance as an integer in base units."""
        return int(self.balance)

    def wrapped(self) -> "Token":
        """Copy annotated with the wrapped-asset symbol (ETH -> WETH)."""
        return self.model_copy(update={"symbol": f"W{self.symbol}"})


class FeeQuote(BaseModel):
    """Current network fee as reported by the chain client."""

    model_config = ConfigDict(frozen=True)

    gas_price: int = Field(..., ge=0, description="Gas price in wei")
