"""JSON-RPC chain client signing with a local account.

Talks to a standard EVM node over HTTP with httpx; transactions are signed
locally with eth-account (legacy gas price transactions).
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

import httpx
from eth_abi import encode as abi_encode
from eth_account.signers.local import LocalAccount
from eth_utils import function_signature_to_4byte_selector, to_checksum_address, to_hex

from relaysweep.chain.base import ChainClient, TxReceipt
from relaysweep.contracts.tokens import FeeQuote
from relaysweep.errors import ChainRpcError, ReceiptTimeoutError

logger = logging.getLogger(__name__)


def encode_function_call(abi: Sequence[dict], function_name: str, args: Sequence[Any] = ()) -> str:
    """ABI-encode a call to ``function_name`` as 0x-prefixed calldata."""
    entry = next(
        (e for e in abi if e.get("type") == "function" and e.get("name") == function_name),
        None,
    )
    if entry is None:
        raise ValueError(f"Function {function_name!r} not found in ABI")

    types = [param["type"] for param in entry.get("inputs", [])]
    if len(types) != len(args):
        raise ValueError(f"{function_name} expects {len(types)} argument(s), got {len(args)}")

    selector = function_signature_to_4byte_selector(f"{function_name}({','.join(types)})")
    return to_hex(selector + abi_encode(types, list(args)))


class RpcChainClient(ChainClient):
    """EVM client for one RPC endpoint and one signing account."""

    def __init__(
        self,
        rpc_url: str,
        account: LocalAccount,
        chain_id: Optional[int] = None,
        receipt_timeout: Optional[float] = None,
        poll_interval: float = 2.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            rpc_url: Node JSON-RPC URL
            account: Local signing account
            chain_id: Chain ID (queried via eth_chainId on first use if None)
            receipt_timeout: Max seconds to wait for a receipt (None = no limit)
            poll_interval: Seconds between receipt polls
            timeout: HTTP timeout per RPC call
            transport: Optional httpx transport (used by tests)
        """
        if not rpc_url:
            raise ValueError("rpc_url is required")
        self.rpc_url = rpc_url
        self.account = account
        self._chain_id = chain_id
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._transport = transport
        self._request_id = 0

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    async def _rpc(self, method: str, params: list) -> Any:
        self._request_id += 1
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                self.rpc_url,
                json={
                    "jsonrpc": "2.0",
                    "method": method,
                    "params": params,
                    "id": self._request_id,
                },
            )
            response.raise_for_status()
            data = response.json()

        if data.get("error"):
            error = data["error"]
            raise ChainRpcError(error.get("message", str(error)), code=error.get("code"))
        return data.get("result")

    async def connect(self) -> int:
        """Resolve the chain ID from the node if it was not configured."""
        if self._chain_id is None:
            self._chain_id = int(await self._rpc("eth_chainId", []), 16)
            logger.info(f"Connected to chain {self._chain_id} via {self.rpc_url}")
        return self._chain_id

    async def get_chain_id(self) -> int:
        return await self.connect()

    async def get_fee_quote(self) -> Optional[FeeQuote]:
        try:
            result = await self._rpc("eth_gasPrice", [])
            return FeeQuote(gas_price=int(result, 16))
        except (ChainRpcError, httpx.HTTPError, TypeError, ValueError) as e:
            logger.warning(f"Failed to get gas price: {e}")
            return None

    async def _send(
        self,
        to: str,
        value: int,
        gas: Optional[int],
        gas_price: Optional[int] = None,
        data: str = "0x",
    ) -> str:
        chain_id = await self.connect()
        nonce = int(await self._rpc("eth_getTransactionCount", [self.address, "pending"]), 16)
        if gas_price is None:
            gas_price = int(await self._rpc("eth_gasPrice", []), 16)

        tx = {
            "nonce": nonce,
            "gasPrice": gas_price,
            "to": to_checksum_address(to),
            "value": value,
            "data": data,
            "chainId": chain_id,
        }
        if gas is None:
            tx["gas"] = int(
                await self._rpc(
                    "eth_estimateGas",
                    [{"from": self.address, "to": tx["to"], "value": hex(value), "data": data}],
                ),
                16,
            )
        else:
            tx["gas"] = gas

        signed = self.account.sign_transaction(tx)
        tx_hash = await self._rpc("eth_sendRawTransaction", [to_hex(signed.raw_transaction)])
        logger.info(f"Broadcast tx {tx_hash} to {tx['to']} (value={value}, nonce={nonce})")
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
        data = encode_function_call(abi, function_name, args)
        return await self._send(address, value, gas, gas_price, data)

    async def send_transaction(
        self, to: str, value: int, gas: Optional[int] = None, gas_price: Optional[int] = None
    ) -> str:
        return await self._send(to, value, gas, gas_price)

    async def wait_for_transaction_receipt(self, tx_hash: str) -> TxReceipt:
        loop = asyncio.get_running_loop()
        started = loop.time()

        while True:
            receipt = await self._rpc("eth_getTransactionReceipt", [tx_hash])
            if receipt:
                return TxReceipt(
                    tx_hash=tx_hash,
                    status=int(receipt.get("status", "0x0"), 16),
                    block_number=_hex_to_int(receipt.get("blockNumber")),
                    gas_used=_hex_to_int(receipt.get("gasUsed")),
                )

            if self.receipt_timeout is not None and loop.time() - started >= self.receipt_timeout:
                raise ReceiptTimeoutError(tx_hash, self.receipt_timeout)

            logger.debug(f"Waiting for receipt of {tx_hash}")
            await asyncio.sleep(self.poll_interval)


def _hex_to_int(value: Optional[str]) -> Optional[int]:
    return int(value, 16) if value else None
