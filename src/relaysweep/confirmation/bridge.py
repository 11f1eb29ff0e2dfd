"""Confirmation prompts answered by an embedding host.

Protocol:
    out: {"type": "confirm" | "alert", "message": str}
    in:  {"type": "confirmResponse", "response": bool}
"""

import asyncio
import json
import logging

from relaysweep.confirmation.base import ConfirmationGate
from relaysweep.confirmation.channel import MessageChannel

logger = logging.getLogger(__name__)

DEFAULT_CONFIRM_TIMEOUT = 30.0


class BridgedConfirmationGate(ConfirmationGate):
    """Posts prompts to the host and waits for a correlated answer.

    An unanswered ``ask`` resolves to False after ``timeout`` seconds. The
    response listener is removed on every path.
    """

    def __init__(self, channel: MessageChannel, timeout: float = DEFAULT_CONFIRM_TIMEOUT):
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.channel = channel
        self.timeout = timeout

    async def ask(self, message: str) -> bool:
        loop = asyncio.get_running_loop()
        answer: asyncio.Future = loop.create_future()

        def on_message(raw: str) -> None:
            try:
                data = json.loads(raw)
            except (TypeError, ValueError):
                return
            if not isinstance(data, dict) or data.get("type") != "confirmResponse":
                return
            if not answer.done():
                answer.set_result(bool(data.get("response")))

        self.channel.add_listener(on_message)
        try:
            self.channel.post(json.dumps({"type": "confirm", "message": message}))
            return await asyncio.wait_for(answer, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"No confirmation from host after {self.timeout:g}s - declining")
            return False
        finally:
            self.channel.remove_listener(on_message)

    async def notify(self, message: str) -> None:
        self.channel.post(json.dumps({"type": "alert", "message": message}))
