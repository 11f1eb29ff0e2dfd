"""Simulated chain client - nothing is signed or broadcast."""

import logging
import secrets
from typing import Any, Optional, Sequence

from relaysweep.chain.base import ChainClient, TxReceipt
from relaysweep.contracts.tokens import FeeQuote

logger = logging.getLogger(__name__)


class DryRunChainClient(ChainClient):
    """Records submissions and returns fake hashes with successful receipts."""

    def __init__(self, chain_id: Optional[int] = None, gas_price: Optional[int] = None):
        self._chain_id = chain_id
        self._gas_price = gas_price
        self.submitted: list[dict] = []

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    async def get_fee_quote(self) -> Optional[FeeQuote]:
        if self._gas_price is None:
            return None
        return FeeQuote(gas_price=self._gas_price)

    def _record(self, tx: dict) -> str:
        tx_hash = "0x" + secrets.token_hex(32)
        self.submitted.append({**tx, "hash": tx_hash})
        return tx_hash

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
        tx_hash = self._record(
            {
                "to": address,
                "function": function_name,
                "args": list(args),
                "value": value,
                "gas": gas,
                "gas_price": gas_price,
            }
        )
        logger.info(f"[SIMULATED] {function_name}() on {address} value={value} -> {tx_hash}")
        return tx_hash

    async def send_transaction(
        self, to: str, value: int, gas: Optional[int] = None, gas_price: Optional[int] = None
    ) -> str:
        tx_hash = self._record({"to": to, "value": value, "gas": gas, "gas_price": gas_price})
        logger.info(f"[SIMULATED] transfer {value} wei to {to} -> {tx_hash}")
        return tx_hash

    async def wait_for_transaction_receipt(self, tx_hash: str) -> TxReceipt:
        return TxReceipt(tx_hash=tx_hash, status=1, block_number=0, gas_used=0)
