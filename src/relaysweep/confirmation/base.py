"""Base interface for human confirmation.

The sweep engine never talks to a terminal or a host app directly; it asks a
ConfirmationGate, chosen once at startup.
"""

from abc import ABC, abstractmethod


class ConfirmationGate(ABC):
    """Abstract base class for confirm/alert prompts."""

    @abstractmethod
    async def ask(self, message: str) -> bool:
        """Ask the user a yes/no question.

        Must always resolve; a missing answer counts as "no".

        Args:
            message: Question shown to the user

        Returns:
            True if the user approved
        """
        pass

    @abstractmethod
    async def notify(self, message: str) -> None:
        """Show an informational message.

        Args:
            message: Text shown to the user
        """
        pass
