"""Exception types shared across the sweep engine."""

import re
from typing import Optional

# Phrases wallets and nodes use when the account holder refuses to sign.
_USER_REJECTION = re.compile(r"user denied|user rejected|rejected by user", re.IGNORECASE)


class SweepError(Exception):
    """Base class for all relaysweep errors."""


class ConfigurationError(SweepError):
    """Raised when a required setting or collaborator is missing."""


class WalletNotConnectedError(SweepError):
    """Raised when no owner address or chain client is available."""

    def __init__(self, message: str = "wallet not connected"):
        super().__init__(message)


class ChainResolutionError(SweepError):
    """Raised when neither the client nor the token names a chain."""

    def __init__(self, message: str = "cannot determine chain"):
        super().__init__(message)


class BackendError(SweepError):
    """Raised on transport or server failures from the relay backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ChainRpcError(SweepError):
    """Raised when a JSON-RPC node returns an error object."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class TransactionFailedError(SweepError):
    """Raised when a mined transaction reports a failed status."""

    def __init__(self, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"transaction {tx_hash} reverted")


class ReceiptTimeoutError(SweepError):
    """Raised when a receipt does not appear within the configured wait."""

    def __init__(self, tx_hash: str, timeout: float):
        self.tx_hash = tx_hash
        self.timeout = timeout
        super().__init__(f"no receipt for {tx_hash} after {timeout:g}s")


def is_user_rejected(error: Optional[BaseException]) -> bool:
    """Check whether an error means the user refused to sign."""
    if error is None:
        return False
    return bool(_USER_REJECTION.search(str(error)))
