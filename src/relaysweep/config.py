"""Application configuration using pydantic-settings.

Every value can be supplied through the environment or a local ``.env`` file.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfirmationMode(str, Enum):
    """Where confirmation prompts are routed."""

    LOCAL = "local"  # Interactive terminal prompt
    BRIDGE = "bridge"  # Embedding host over a message channel


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Backend relay API
    # ======================
    backend_url: str = Field(default="", description="Base URL of the relay backend")
    backend_timeout_seconds: float = Field(
        default=30.0, description="HTTP timeout for backend calls"
    )

    # ======================
    # Wallet
    # ======================
    owner_address: Optional[str] = Field(
        default=None, description="Wallet whose tokens are swept (derived from signer if unset)"
    )
    private_key: Optional[str] = Field(default=None, description="Hex private key of the wallet")
    wallet_seed_phrase: Optional[str] = Field(
        default=None, description="BIP39 seed phrase used when no private key is set"
    )
    wallet_account_index: int = Field(
        default=0, ge=0, description="BIP44 address index derived from the seed phrase"
    )

    # ======================
    # Chain
    # ======================
    rpc_url: str = Field(default="", description="JSON-RPC endpoint of the connected chain")
    chain_id: Optional[int] = Field(
        default=None, description="Chain ID override (queried from the node if unset)"
    )
    default_gas_price_wei: int = Field(
        default=20_000_000_000, ge=0, description="Gas price used when no fee quote is available"
    )
    receipt_timeout_seconds: Optional[float] = Field(
        default=None, description="Give up waiting for a receipt after this long (None = wait forever)"
    )
    receipt_poll_interval_seconds: float = Field(
        default=2.0, gt=0, description="Delay between receipt polls"
    )

    # ======================
    # Confirmation
    # ======================
    confirmation_mode: ConfirmationMode = Field(
        default=ConfirmationMode.LOCAL, description="local prompt or host bridge"
    )
    confirm_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Bridged confirmations resolve to 'no' after this long"
    )

    # ======================
    # Safety Guards
    # ======================
    dry_run: bool = Field(default=True, description="Simulate chain submissions")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def has_signer(self) -> bool:
        """Check if a private key or a usable seed phrase is configured."""
        if self.private_key:
            return True
        return bool(self.wallet_seed_phrase and len(self.wallet_seed_phrase.split()) >= 12)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "dry_run": self.dry_run,
            "backend_url": self.backend_url or "(not set)",
            "owner_address": self.owner_address or "(from signer)",
            "signer": "***" if self.has_signer else "(not set)",
            "chain": {
                "rpc": self.rpc_url or "(not set)",
                "chain_id": self.chain_id,
                "default_gas_price_wei": self.default_gas_price_wei,
                "receipt_timeout_seconds": self.receipt_timeout_seconds,
            },
            "confirmation": {
                "mode": self.confirmation_mode.value,
                "timeout_seconds": self.confirm_timeout_seconds,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
