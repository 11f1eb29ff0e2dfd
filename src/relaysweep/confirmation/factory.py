"""Select the confirmation gate for this process."""

import logging
from typing import Optional

from relaysweep.config import ConfirmationMode, Settings
from relaysweep.confirmation.base import ConfirmationGate
from relaysweep.confirmation.bridge import BridgedConfirmationGate
from relaysweep.confirmation.channel import MessageChannel, StdioMessageChannel
from relaysweep.confirmation.local import LocalConfirmationGate

logger = logging.getLogger(__name__)


def create_confirmation_gate(
    settings: Settings, channel: Optional[MessageChannel] = None
) -> ConfirmationGate:
    """Build the gate for the configured mode.

    Args:
        settings: Application settings
        channel: Host channel for bridge mode (stdio if not given)

    Returns:
        ConfirmationGate instance
    """
    if settings.confirmation_mode == ConfirmationMode.BRIDGE:
        logger.info(f"Confirmations routed to host bridge (timeout {settings.confirm_timeout_seconds:g}s)")
        return BridgedConfirmationGate(
            channel=channel or StdioMessageChannel(),
            timeout=settings.confirm_timeout_seconds,
        )

    logger.info("Confirmations prompted on the local terminal")
    return LocalConfirmationGate()
