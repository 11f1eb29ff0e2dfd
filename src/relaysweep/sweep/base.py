"""Outcome types and the processor interface for the sweep engine.

Sweep flow per token:
1. Orchestrator picks a processor (native or fungible)
2. Processor computes what can be moved and asks the user
3. Funds are wrapped on-chain or handed to the relayer
4. Exactly one outcome (Sent or Failed) is returned
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from relaysweep.contracts.tokens import Token

logger = logging.getLogger(__name__)


class SweepKind(str, Enum):
    """How a token left the wallet."""

    WRAP = "wrap"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class GasBudget:
    """Largest amounts that can move while leaving room for gas."""

    max_safe_for_wrap: int
    max_safe_for_transfer: int

    @property
    def is_insufficient(self) -> bool:
        """True when neither a wrap nor a transfer is affordable."""
        return self.max_safe_for_wrap <= 0 and self.max_safe_for_transfer <= 0


@dataclass(frozen=True)
class Sent:
    """A token that was wrapped or handed to the relayer."""

    token: Token
    kind: SweepKind
    amount: str  # Base units
    tx_hash: Optional[str] = None
    job_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for display."""
        return {
            "symbol": self.token.symbol,
            "chain": self.token.chain,
            "kind": self.kind.value,
            "amount": self.amount,
            "tx_hash": self.tx_hash,
            "job_id": self.job_id,
        }


@dataclass(frozen=True)
class Failed:
    """A token that could not be swept, with a human-readable reason."""

    token: Token
    reason: str

    def to_dict(self) -> dict:
        """Convert to dictionary for display."""
        return {
            "symbol": self.token.symbol,
            "chain": self.token.chain,
            "reason": self.reason,
        }


SweepOutcome = Union[Sent, Failed]


@dataclass
class Summary:
    """Outcomes of one batch run, in arrival order."""

    sent: list[Sent] = field(default_factory=list)
    failed: list[Failed] = field(default_factory=list)

    def record(self, outcome: SweepOutcome) -> None:
        """Append an outcome to the matching list."""
        if isinstance(outcome, Sent):
            self.sent.append(outcome)
        elif isinstance(outcome, Failed):
            self.failed.append(outcome)
        else:
            raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")

    @property
    def total(self) -> int:
        """Number of outcomes recorded."""
        return len(self.sent) + len(self.failed)

    def format_message(self) -> str:
        """Consolidated notification text for the batch."""
        message = "=== Summary ===\n"
        message += f"Succeeded: {len(self.sent)}\n"
        message += f"Failed: {len(self.failed)}\n"
        if self.failed:
            message += "\nSome tokens were not processed. Review the details."
        return message

    def to_dict(self) -> dict:
        """Convert to dictionary for display."""
        return {
            "sent": [item.to_dict() for item in self.sent],
            "failed": [item.to_dict() for item in self.failed],
        }


class TokenProcessor(ABC):
    """Abstract base class for per-token sweep processors.

    Implementations must never raise: every failure becomes a Failed outcome.
    """

    @abstractmethod
    async def process(self, token: Token) -> SweepOutcome:
        """Sweep one token.

        Args:
            token: Validated token snapshot

        Returns:
            Sent or Failed
        """
        pass
