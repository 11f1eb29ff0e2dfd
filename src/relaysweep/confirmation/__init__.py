"""Human confirmation gates (terminal or host bridge)."""

from relaysweep.confirmation.base import ConfirmationGate
from relaysweep.confirmation.bridge import BridgedConfirmationGate
from relaysweep.confirmation.channel import MessageChannel, StdioMessageChannel
from relaysweep.confirmation.factory import create_confirmation_gate
from relaysweep.confirmation.local import LocalConfirmationGate

__all__ = [
    "BridgedConfirmationGate",
    "ConfirmationGate",
    "LocalConfirmationGate",
    "MessageChannel",
    "StdioMessageChannel",
    "create_confirmation_gate",
]
