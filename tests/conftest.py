"""Pytest configuration and fixtures."""

import json
import os
from unittest.mock import AsyncMock

import httpx
import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["BACKEND_URL"] = "http://backend.test"
os.environ["DRY_RUN"] = "true"
os.environ["CONFIRMATION_MODE"] = "local"
os.environ.pop("PRIVATE_KEY", None)
os.environ.pop("WALLET_SEED_PHRASE", None)

from relaysweep.backend.client import RelayBackendClient
from relaysweep.chain.base import WalletContext
from relaysweep.chain.dry_run import DryRunChainClient
from relaysweep.config import get_settings
from relaysweep.confirmation.base import ConfirmationGate
from relaysweep.contracts.tokens import Token
from relaysweep.sweep.wrap import WrapAdvisor

OWNER = "0x1111111111111111111111111111111111111111"
RELAYER = "0x2222222222222222222222222222222222222222"
WETH = "0x3333333333333333333333333333333333333333"
USDC = "0x4444444444444444444444444444444444444444"

GWEI = 10**9
ONE_ETH = 10**18

PRIVATE_KEY = "0x" + "11" * 32


class FakeNode:
    """Minimal JSON-RPC node behind an httpx MockTransport."""

    def __init__(self, receipts=None, errors=None, chain_id=137, gas_price=30 * GWEI, mine=True):
        self.calls = []
        self.raw_transactions = []
        self.receipts = list(receipts or [])
        self.errors = errors or {}
        self.chain_id = chain_id
        self.gas_price = gas_price
        self.mine = mine

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        self.calls.append(method)

        if method in self.errors:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": self.errors[method]})

        if method == "eth_chainId":
            result = hex(self.chain_id)
        elif method == "eth_gasPrice":
            result = hex(self.gas_price)
        elif method == "eth_getTransactionCount":
            result = "0x7"
        elif method == "eth_estimateGas":
            result = hex(21000)
        elif method == "eth_sendRawTransaction":
            self.raw_transactions.append(body["params"][0])
            result = "0x" + "ab" * 32
        elif method == "eth_getTransactionReceipt":
            if self.receipts:
                result = self.receipts.pop(0)
            elif self.mine:
                result = {"status": "0x1", "blockNumber": "0x1", "gasUsed": "0x5208"}
            else:
                result = None
        else:
            raise AssertionError(f"unexpected method {method}")

        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; reset between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def eth_token() -> Token:
    """One ETH on mainnet."""
    return Token(symbol="ETH", balance=str(ONE_ETH), decimals=18, chain=1)


@pytest.fixture
def usdc_token() -> Token:
    """250 USDC on mainnet."""
    return Token(symbol="USDC", address=USDC, balance="250000000", decimals=6, chain=1)


@pytest.fixture
def chain_client() -> DryRunChainClient:
    """Simulated mainnet client quoting 20 gwei."""
    return DryRunChainClient(chain_id=1, gas_price=20 * GWEI)


@pytest.fixture
def wallet(chain_client) -> WalletContext:
    return WalletContext(address=OWNER, client=chain_client)


@pytest.fixture
def gate() -> AsyncMock:
    """Confirmation gate that approves everything unless reprogrammed."""
    mock = AsyncMock(spec=ConfirmationGate)
    mock.ask.return_value = True
    return mock


@pytest.fixture
def backend() -> AsyncMock:
    return AsyncMock(spec=RelayBackendClient)


@pytest.fixture
def advisor() -> AsyncMock:
    """Wrap advisor reporting no wrapped asset."""
    mock = AsyncMock(spec=WrapAdvisor)
    mock.lookup.return_value = None
    return mock
