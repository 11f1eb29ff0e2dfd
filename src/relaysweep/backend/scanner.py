"""Wallet scan: fetch and validate the owner's token list."""

import logging

from pydantic import ValidationError

from relaysweep.backend.client import RelayBackendClient
from relaysweep.contracts.tokens import Token

logger = logging.getLogger(__name__)


class TokenScanner:
    """Turns the backend's loose token list into validated Tokens.

    Malformed entries are quarantined: logged and left out of the result.
    """

    def __init__(self, backend: RelayBackendClient):
        self.backend = backend
        self.quarantined: list[dict] = []

    async def scan(self, owner: str) -> list[Token]:
        """Fetch the tokens held by ``owner``.

        Raises:
            BackendError: If the backend cannot be reached or answers non-2xx
        """
        response = await self.backend.owner_tokens(owner)
        self.quarantined = []

        tokens = []
        for index, raw in enumerate(response.tokens):
            try:
                tokens.append(Token.model_validate(raw))
            except ValidationError as e:
                self.quarantined.append({"index": index, "entry": raw, "error": str(e)})
                logger.warning(f"Quarantined token entry #{index} ({raw!r}): {e.error_count()} error(s)")

        logger.info(
            f"Scanned {owner}: {len(tokens)} token(s), {len(self.quarantined)} quarantined"
        )
        return tokens
