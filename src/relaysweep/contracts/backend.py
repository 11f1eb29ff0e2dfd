"""Response contracts for the relay backend API.

The backend speaks camelCase JSON; fields are aliased so Python code uses
snake_case. Unknown fields are ignored.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _BackendModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class OwnerTokensResponse(_BackendModel):
    """Raw ``/owner-tokens`` payload (entries validated separately)."""

    tokens: list[Any] = Field(default_factory=list)


class WrapInfo(_BackendModel):
    """``/wrap-info`` payload."""

    wrapped_address: Optional[str] = Field(None, alias="wrappedAddress")


class TransferRequestResponse(_BackendModel):
    """``/create-transfer-request`` payload."""

    ok: bool = False
    job_id: Optional[str] = Field(None, alias="jobId")
    error: Optional[str] = None


class NativeTransferInstructions(_BackendModel):
    """Where the wallet should send the native funds."""

    relayer_address: Optional[str] = Field(None, alias="relayerAddress")


class NativeTransferResponse(_BackendModel):
    """``/create-native-transfer-request`` payload."""

    ok: bool = False
    instructions: Optional[NativeTransferInstructions] = None
    job_id: Optional[str] = Field(None, alias="jobId")
    error: Optional[str] = None

    @property
    def relayer_address(self) -> Optional[str]:
        """Relayer destination, if the backend supplied one."""
        if self.instructions is None:
            return None
        return self.instructions.relayer_address


__all__ = [
    "NativeTransferInstructions",
    "NativeTransferResponse",
    "OwnerTokensResponse",
    "TransferRequestResponse",
    "WrapInfo",
]
