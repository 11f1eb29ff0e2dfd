"""Wrapped-asset lookup for native coins."""

import logging
from typing import Optional

from relaysweep.backend.client import RelayBackendClient
from relaysweep.errors import BackendError

logger = logging.getLogger(__name__)

# Zero-argument payable deposit() shared by WETH-style contracts
WRAP_ABI = [
    {
        "inputs": [],
        "name": "deposit",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    }
]
WRAP_FUNCTION = "deposit"


class WrapAdvisor:
    """Ask the backend whether a chain's native asset has a wrapped token."""

    def __init__(self, backend: RelayBackendClient):
        self.backend = backend

    async def lookup(self, chain_id: int) -> Optional[str]:
        """Return the wrapped-asset contract for ``chain_id``, or None.

        Lookup failures mean "no wrap available"; they are logged, not raised.
        """
        try:
            info = await self.backend.wrap_info(chain_id)
        except BackendError as e:
            logger.warning(f"Wrap info unavailable for chain {chain_id}: {e}")
            return None

        if not info.wrapped_address:
            logger.debug(f"No wrapped asset for chain {chain_id}")
            return None
        return info.wrapped_address
