"""Tests for native coin processing."""

from unittest.mock import AsyncMock

import pytest
from eth_account import Account

from relaysweep.chain.base import TxReceipt, WalletContext
from relaysweep.chain.dry_run import DryRunChainClient
from relaysweep.chain.rpc import RpcChainClient
from relaysweep.contracts.backend import NativeTransferResponse
from relaysweep.contracts.tokens import Token
from relaysweep.errors import BackendError, ChainRpcError
from relaysweep.sweep.base import Failed, Sent, SweepKind
from relaysweep.sweep.native import NativeTokenProcessor

from conftest import GWEI, ONE_ETH, OWNER, PRIVATE_KEY, RELAYER, WETH, FakeNode

WRAP_AMOUNT = 997_400_000_000_000_000
TRANSFER_AMOUNT = 998_980_000_000_000_000


def relay_ok(job_id: str = "job-1") -> NativeTransferResponse:
    return NativeTransferResponse.model_validate(
        {"ok": True, "jobId": job_id, "instructions": {"relayerAddress": RELAYER}}
    )


@pytest.fixture
def processor(wallet, backend, advisor, gate) -> NativeTokenProcessor:
    backend.create_native_transfer_request.return_value = relay_ok()
    return NativeTokenProcessor(wallet=wallet, backend=backend, advisor=advisor, gate=gate)


class TestInsufficientFunds:
    """Tests for balances that cannot cover gas."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("wrapped", [None, WETH])
    async def test_zero_balance(self, processor, advisor, gate, chain_client, wrapped):
        """Test that an empty native balance fails regardless of wrap availability."""
        advisor.lookup.return_value = wrapped
        token = Token(symbol="ETH", balance="0", chain=1)

        outcome = await processor.process(token)

        assert outcome == Failed(token=token, reason="insufficient balance to cover gas")
        gate.ask.assert_not_called()
        assert chain_client.submitted == []

    @pytest.mark.asyncio
    async def test_dust_balance(self, processor, gate):
        """Test a balance below transfer gas plus buffer."""
        token = Token(symbol="ETH", balance=str(20 * GWEI * 51000), chain=1)

        outcome = await processor.process(token)

        assert isinstance(outcome, Failed)
        assert outcome.reason.startswith("insufficient balance")
        gate.ask.assert_not_called()


class TestWrapBranch:
    """Tests for wrapping into the chain's wrapped asset."""

    @pytest.mark.asyncio
    async def test_wrap_accepted(self, processor, advisor, gate, backend, chain_client, eth_token):
        """Test that an accepted wrap deposits the wrap budget."""
        advisor.lookup.return_value = WETH

        outcome = await processor.process(eth_token)

        assert isinstance(outcome, Sent)
        assert outcome.kind == SweepKind.WRAP
        assert outcome.amount == str(WRAP_AMOUNT)
        assert outcome.token.symbol == "WETH"
        assert outcome.tx_hash == chain_client.submitted[0]["hash"]
        assert outcome.job_id is None

        tx = chain_client.submitted[0]
        assert tx["to"] == WETH
        assert tx["function"] == "deposit"
        assert tx["value"] == WRAP_AMOUNT
        assert tx["gas"] == 100000
        assert tx["gas_price"] == 20 * GWEI

        assert "0.9974 ETH on chain 1" in gate.ask.call_args.args[0]
        backend.create_native_transfer_request.assert_not_called()
        advisor.lookup.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_wrap_declined_falls_back_to_transfer(self, processor, advisor, gate, backend, chain_client, eth_token):
        """Test that declining the wrap offers the relayer transfer."""
        advisor.lookup.return_value = WETH
        gate.ask.side_effect = [False, True]

        outcome = await processor.process(eth_token)

        assert isinstance(outcome, Sent)
        assert outcome.kind == SweepKind.TRANSFER
        assert outcome.token.symbol == "ETH"
        assert outcome.amount == str(TRANSFER_AMOUNT)
        assert gate.ask.await_count == 2
        assert len(chain_client.submitted) == 1
        assert chain_client.submitted[0]["to"] == RELAYER

    @pytest.mark.asyncio
    async def test_wrap_declined_then_transfer_declined(self, processor, advisor, gate, eth_token):
        advisor.lookup.return_value = WETH
        gate.ask.return_value = False

        outcome = await processor.process(eth_token)

        assert outcome == Failed(token=eth_token, reason="user cancelled transfer")

    @pytest.mark.asyncio
    async def test_wrap_rejected_in_wallet(self, processor, advisor, chain_client, backend, eth_token):
        """Test that a signature rejection during wrap is recorded as such."""
        advisor.lookup.return_value = WETH
        chain_client.write_contract = AsyncMock(
            side_effect=ChainRpcError("MetaMask Tx Signature: User denied transaction signature.")
        )

        outcome = await processor.process(eth_token)

        assert outcome == Failed(token=eth_token, reason="user rejected wrap")
        backend.create_native_transfer_request.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrap_other_error(self, processor, advisor, chain_client, backend, eth_token):
        """Test that a non-rejection wrap error fails without trying a transfer."""
        advisor.lookup.return_value = WETH
        chain_client.write_contract = AsyncMock(side_effect=ChainRpcError("insufficient funds for gas"))

        outcome = await processor.process(eth_token)

        assert outcome == Failed(token=eth_token, reason="error: insufficient funds for gas")
        backend.create_native_transfer_request.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrap_reverted(self, processor, advisor, chain_client, eth_token):
        """Test that a reverted wrap is a failure."""
        advisor.lookup.return_value = WETH
        chain_client.wait_for_transaction_receipt = AsyncMock(
            return_value=TxReceipt(tx_hash="0xdead", status=0)
        )

        outcome = await processor.process(eth_token)

        tx_hash = chain_client.submitted[0]["hash"]
        assert outcome == Failed(token=eth_token, reason=f"error: transaction {tx_hash} reverted")

    @pytest.mark.asyncio
    async def test_wrap_skipped_when_only_transfer_affordable(self, processor, advisor, gate, chain_client):
        """Test that a wrapped asset is ignored when the wrap budget is zero."""
        advisor.lookup.return_value = WETH
        token = Token(symbol="ETH", balance=str(2 * 10**15), chain=1)

        outcome = await processor.process(token)

        assert isinstance(outcome, Sent)
        assert outcome.kind == SweepKind.TRANSFER
        assert outcome.amount == "980000000000000"
        assert gate.ask.await_count == 1
        assert "to the relayer" in gate.ask.call_args.args[0]


class TestTransferBranch:
    """Tests for handing native funds to the relayer."""

    @pytest.mark.asyncio
    async def test_transfer_accepted(self, processor, backend, chain_client, eth_token):
        """Test the full relay path without a wrapped asset."""
        outcome = await processor.process(eth_token)

        assert outcome == Sent(
            token=eth_token,
            kind=SweepKind.TRANSFER,
            amount=str(TRANSFER_AMOUNT),
            tx_hash=chain_client.submitted[0]["hash"],
            job_id="job-1",
        )
        backend.create_native_transfer_request.assert_awaited_once_with(
            owner=OWNER, chain=1, amount=str(TRANSFER_AMOUNT)
        )
        assert chain_client.submitted[0]["value"] == TRANSFER_AMOUNT
        assert chain_client.submitted[0]["gas"] == 21000
        assert chain_client.submitted[0]["gas_price"] == 20 * GWEI

    @pytest.mark.asyncio
    async def test_transfer_declined(self, processor, gate, backend, chain_client, eth_token):
        """Test that declining with no wrap available cancels the token."""
        gate.ask.return_value = False

        outcome = await processor.process(eth_token)

        assert outcome == Failed(token=eth_token, reason="user cancelled transfer")
        backend.create_native_transfer_request.assert_not_called()
        assert chain_client.submitted == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"ok": False, "error": "relayer offline"},
            {"ok": True, "jobId": "job-2"},
            {"ok": True, "instructions": {}},
        ],
    )
    async def test_transfer_request_unusable(self, processor, backend, chain_client, eth_token, payload):
        """Test that a failed or incomplete relay request sends nothing."""
        backend.create_native_transfer_request.return_value = NativeTransferResponse.model_validate(payload)

        outcome = await processor.process(eth_token)

        assert outcome == Failed(token=eth_token, reason="transfer request creation error")
        assert chain_client.submitted == []

    @pytest.mark.asyncio
    async def test_transfer_request_transport_error(self, processor, backend, eth_token):
        backend.create_native_transfer_request.side_effect = BackendError("connection refused")

        outcome = await processor.process(eth_token)

        assert outcome == Failed(token=eth_token, reason="error: connection refused")

    @pytest.mark.asyncio
    async def test_transfer_rejected_in_wallet(self, processor, chain_client, eth_token):
        """Test that a signature rejection on send is classified as rejection."""
        chain_client.send_transaction = AsyncMock(side_effect=ChainRpcError("User rejected the request."))

        outcome = await processor.process(eth_token)

        assert outcome == Failed(token=eth_token, reason="user rejected transaction")


class TestChainResolution:
    """Tests for wallet and chain preconditions."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "wallet",
        [
            WalletContext(address=None, client=DryRunChainClient(chain_id=1)),
            WalletContext(address=OWNER, client=None),
        ],
    )
    async def test_wallet_not_connected(self, backend, advisor, gate, eth_token, wallet):
        processor = NativeTokenProcessor(wallet, backend, advisor, gate)

        outcome = await processor.process(eth_token)

        assert outcome == Failed(token=eth_token, reason="wallet not connected")
        advisor.lookup.assert_not_called()

    @pytest.mark.asyncio
    async def test_token_chain_used_when_client_has_none(self, backend, advisor, gate):
        """Test the per-token chain hint fallback."""
        backend.create_native_transfer_request.return_value = relay_ok()
        wallet = WalletContext(address=OWNER, client=DryRunChainClient(chain_id=None))
        token = Token(symbol="MATIC", balance=str(ONE_ETH), chain=137)

        outcome = await NativeTokenProcessor(wallet, backend, advisor, gate).process(token)

        assert isinstance(outcome, Sent)
        advisor.lookup.assert_awaited_once_with(137)

    @pytest.mark.asyncio
    async def test_client_chain_preferred(self, processor, advisor):
        """Test that the connected chain wins over the token's hint."""
        token = Token(symbol="ETH", balance=str(ONE_ETH), chain=10)

        await processor.process(token)

        advisor.lookup.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_cannot_determine_chain(self, backend, advisor, gate):
        wallet = WalletContext(address=OWNER, client=DryRunChainClient(chain_id=None))
        token = Token(symbol="ETH", balance=str(ONE_ETH), chain=0)

        outcome = await NativeTokenProcessor(wallet, backend, advisor, gate).process(token)

        assert outcome == Failed(token=token, reason="cannot determine chain")

    @pytest.mark.asyncio
    async def test_node_chain_resolved_before_wrap_lookup(self, backend, advisor, gate):
        """Test that an unconfigured RPC client is asked for its chain first."""
        node = FakeNode(chain_id=137)
        client = RpcChainClient(
            "http://node.test", Account.from_key(PRIVATE_KEY), transport=node.transport, poll_interval=0.01
        )
        wallet = WalletContext(address=client.address, client=client)
        advisor.lookup.side_effect = lambda chain_id: WETH if chain_id == 137 else None
        token = Token(symbol="ETH", balance=str(ONE_ETH), chain=1)

        outcome = await NativeTokenProcessor(wallet, backend, advisor, gate).process(token)

        advisor.lookup.assert_awaited_once_with(137)
        assert node.calls[0] == "eth_chainId"
        assert "on chain 137" in gate.ask.call_args.args[0]
        assert isinstance(outcome, Sent)
        assert outcome.kind == SweepKind.WRAP
        # Signed at the quoted price; no second price lookup.
        assert node.calls.count("eth_gasPrice") == 1

    @pytest.mark.asyncio
    async def test_mismatched_chain_named_in_prompt(self, processor, gate, backend):
        """Test that the user sees which chain will actually be used."""
        token = Token(symbol="ETH", balance=str(ONE_ETH), chain=10)
        gate.ask.return_value = False

        await processor.process(token)

        assert "on chain 1 " in gate.ask.call_args.args[0]
        backend.create_native_transfer_request.assert_not_called()


class TestFeeQuote:
    """Tests for gas price sourcing."""

    @pytest.mark.asyncio
    async def test_default_gas_price_without_quote(self, backend, advisor, gate, eth_token):
        """Test that a client without a quote uses the 20 gwei default."""
        backend.create_native_transfer_request.return_value = relay_ok()
        wallet = WalletContext(address=OWNER, client=DryRunChainClient(chain_id=1, gas_price=None))

        outcome = await NativeTokenProcessor(wallet, backend, advisor, gate).process(eth_token)

        assert outcome.amount == str(TRANSFER_AMOUNT)
        assert wallet.client.submitted[0]["gas_price"] == 20 * GWEI

    @pytest.mark.asyncio
    async def test_quoted_gas_price(self, backend, advisor, gate, eth_token):
        backend.create_native_transfer_request.return_value = relay_ok()
        wallet = WalletContext(address=OWNER, client=DryRunChainClient(chain_id=1, gas_price=GWEI))

        outcome = await NativeTokenProcessor(wallet, backend, advisor, gate).process(eth_token)

        assert outcome.amount == str(ONE_ETH - GWEI * 51000)
