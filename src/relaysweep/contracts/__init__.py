"""Typed contracts for tokens and backend responses."""

from relaysweep.contracts.backend import (
    NativeTransferInstructions,
    NativeTransferResponse,
    OwnerTokensResponse,
    TransferRequestResponse,
    WrapInfo,
)
from relaysweep.contracts.tokens import FeeQuote, Token

__all__ = [
    "FeeQuote",
    "NativeTransferInstructions",
    "NativeTransferResponse",
    "OwnerTokensResponse",
    "Token",
    "TransferRequestResponse",
    "WrapInfo",
]
