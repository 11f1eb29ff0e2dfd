"""Chain client interface and connected-wallet context."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from relaysweep.contracts.tokens import FeeQuote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TxReceipt:
    """Mined transaction receipt."""

    tx_hash: str
    status: int  # 1 = success, 0 = reverted
    block_number: Optional[int] = None
    gas_used: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1


class ChainClient(ABC):
    """Abstract signer-backed client for one EVM chain."""

    @property
    @abstractmethod
    def chain_id(self) -> Optional[int]:
        """Chain ID of the connected network, if known."""
        pass

    async def get_chain_id(self) -> Optional[int]:
        """Chain ID of the connected network, asking the network if needed."""
        return self.chain_id

    @abstractmethod
    async def get_fee_quote(self) -> Optional[FeeQuote]:
        """Current gas price, or None if it cannot be fetched."""
        pass

    @abstractmethod
    async def write_contract(
        self,
        address: str,
        abi: Sequence[dict],
        function_name: str,
        value: int = 0,
        gas: Optional[int] = None,
        args: Sequence[Any] = (),
        gas_price: Optional[int] = None,
    ) -> str:
        """Sign and broadcast a contract call.

        Args:
            address: Contract address
            abi: Contract ABI (at least the called function)
            function_name: Function to call
            value: Wei attached to the call
            gas: Gas limit
            args: Positional function arguments
            gas_price: Price to sign with (current network price if None)

        Returns:
            Transaction hash
        """
        pass

    @abstractmethod
    async def send_transaction(
        self, to: str, value: int, gas: Optional[int] = None, gas_price: Optional[int] = None
    ) -> str:
        """Sign and broadcast a plain value transfer.

        Returns:
            Transaction hash
        """
        pass

    @abstractmethod
    async def wait_for_transaction_receipt(self, tx_hash: str) -> TxReceipt:
        """Block until the transaction is mined and return its receipt."""
        pass


@dataclass(frozen=True)
class WalletContext:
    """The connected wallet, shared read-only during a batch run."""

    address: Optional[str] = None
    client: Optional[ChainClient] = None

    @property
    def is_connected(self) -> bool:
        return bool(self.address) and self.client is not None
