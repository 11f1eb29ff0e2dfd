"""Message channels to an embedding host.

A host (for example a mobile app running this engine in a webview or as a
subprocess) exchanges JSON messages with us. Outbound messages are posted;
inbound messages are delivered to every registered listener.
"""

import asyncio
import contextlib
import logging
import sys
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


class MessageChannel:
    """In-process channel; subclasses decide where posted messages go."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self.posted: list[str] = []

    @property
    def listener_count(self) -> int:
        """Number of registered inbound listeners."""
        return len(self._listeners)

    def post(self, raw: str) -> None:
        """Send a raw message to the host."""
        self.posted.append(raw)

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Unregister a listener; unknown listeners are ignored."""
        with contextlib.suppress(ValueError):
            self._listeners.remove(listener)

    def deliver(self, raw: str) -> None:
        """Hand an inbound message to every current listener."""
        for listener in list(self._listeners):
            try:
                listener(raw)
            except Exception as e:
                logger.error(f"Message listener failed: {e}")


class StdioMessageChannel(MessageChannel):
    """JSON lines over stdout (outbound) and stdin (inbound)."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        super().__init__()
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._reader_task: Optional[asyncio.Task] = None

    def post(self, raw: str) -> None:
        self._stdout.write(raw + "\n")
        self._stdout.flush()

    async def start(self) -> None:
        """Start reading inbound lines from stdin."""
        if self._reader_task is not None:
            return
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader()
        await loop.connect_read_pipe(
            lambda: asyncio.StreamReaderProtocol(reader), self._stdin
        )
        self._reader_task = asyncio.create_task(self._read_loop(reader))
        logger.debug("Host bridge reader started")

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        while True:
            line = await reader.readline()
            if not line:
                logger.info("Host bridge closed its input")
                break
            text = line.decode("utf-8").strip()
            if text:
                self.deliver(text)

    async def close(self) -> None:
        """Stop the reader task."""
        if self._reader_task is None:
            return
        self._reader_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._reader_task
        self._reader_task = None
