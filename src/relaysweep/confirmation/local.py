"""Terminal confirmation prompts."""

import logging
import sys
from typing import Callable, Optional, TextIO

from relaysweep.confirmation.base import ConfirmationGate

logger = logging.getLogger(__name__)

_YES = {"y", "yes"}


class LocalConfirmationGate(ConfirmationGate):
    """Blocking confirm/alert on the local terminal.

    The prompt is synchronous; it is exposed through the same async
    contract as the bridged gate.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: Optional[TextIO] = None,
    ):
        self._input = input_func
        self._output = output

    async def ask(self, message: str) -> bool:
        try:
            answer = self._input(f"{message} [y/N]: ")
        except EOFError:
            logger.warning("No interactive input available - treating prompt as declined")
            return False
        return answer.strip().lower() in _YES

    async def notify(self, message: str) -> None:
        print(message, file=self._output or sys.stdout, flush=True)
