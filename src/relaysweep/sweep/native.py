"""Native coin processing: wrap it on-chain or hand it to the relayer.

Decision order for one native balance:
1. Resolve the chain and look up a wrapped counterpart
2. Compute how much can move after gas and the safety buffer
3. If a wrapped asset exists and the wrap budget is positive, offer to wrap
4. Otherwise (or if the wrap is declined) offer a relayer transfer

Wrapping is always offered first when it is affordable, even though it
leaves less behind than a plain transfer would.
"""

import logging
from typing import Optional

from relaysweep.backend.client import RelayBackendClient
from relaysweep.chain.base import ChainClient, WalletContext
from relaysweep.confirmation.base import ConfirmationGate
from relaysweep.contracts.tokens import Token
from relaysweep.errors import (
    ChainResolutionError,
    TransactionFailedError,
    WalletNotConnectedError,
    is_user_rejected,
)
from relaysweep.sweep.base import Failed, Sent, SweepKind, SweepOutcome, TokenProcessor
from relaysweep.sweep.gas import GAS_LIMIT_TRANSFER, GAS_LIMIT_WRAP, GasBudgetCalculator
from relaysweep.sweep.wrap import WRAP_ABI, WRAP_FUNCTION, WrapAdvisor
from relaysweep.utils.units import format_units

logger = logging.getLogger(__name__)

REASON_INSUFFICIENT = "insufficient balance to cover gas"
REASON_WRAP_REJECTED = "user rejected wrap"
REASON_TRANSFER_CANCELLED = "user cancelled transfer"
REASON_TRANSFER_REQUEST = "transfer request creation error"
REASON_TX_REJECTED = "user rejected transaction"


class NativeTokenProcessor(TokenProcessor):
    """Sweeps a chain's native coin from the connected wallet."""

    def __init__(
        self,
        wallet: WalletContext,
        backend: RelayBackendClient,
        advisor: WrapAdvisor,
        gate: ConfirmationGate,
        calculator: Optional[GasBudgetCalculator] = None,
    ):
        self.wallet = wallet
        self.backend = backend
        self.advisor = advisor
        self.gate = gate
        self.calculator = calculator or GasBudgetCalculator()

    async def process(self, token: Token) -> SweepOutcome:
        try:
            return await self._process(token)
        except (WalletNotConnectedError, ChainResolutionError) as e:
            logger.error(f"Cannot process {token.symbol}: {e}")
            return Failed(token=token, reason=str(e))
        except Exception as e:
            logger.error(f"Error processing native {token.symbol} on chain {token.chain}: {e}")
            reason = REASON_TX_REJECTED if is_user_rejected(e) else f"error: {e}"
            return Failed(token=token, reason=reason)

    async def _resolve_chain(self, token: Token) -> int:
        if not self.wallet.is_connected:
            raise WalletNotConnectedError()

        chain_id = await self.wallet.client.get_chain_id() or token.chain
        if not chain_id:
            raise ChainResolutionError()
        if chain_id != token.chain:
            logger.warning(
                f"{token.symbol} is reported on chain {token.chain} "
                f"but the wallet is connected to chain {chain_id}"
            )
        return chain_id

    async def _process(self, token: Token) -> SweepOutcome:
        chain_id = await self._resolve_chain(token)
        client = self.wallet.client

        wrapped_address = await self.advisor.lookup(chain_id)

        fee = await client.get_fee_quote()
        # Submissions are signed at the price the budget was computed with.
        gas_price = fee.gas_price if fee is not None else self.calculator.default_gas_price
        budget = self.calculator.compute(token.balance_units, gas_price)

        if budget.is_insufficient:
            logger.info(f"{token.symbol} balance {token.balance} does not cover gas")
            return Failed(token=token, reason=REASON_INSUFFICIENT)

        if wrapped_address and budget.max_safe_for_wrap > 0:
            outcome = await self._wrap(
                client, token, chain_id, wrapped_address, budget.max_safe_for_wrap, gas_price
            )
            if outcome is not None:
                return outcome

        # A positive wrap budget implies a positive transfer budget.
        return await self._transfer(client, token, chain_id, budget.max_safe_for_transfer, gas_price)

    async def _wrap(
        self,
        client: ChainClient,
        token: Token,
        chain_id: int,
        wrapped_address: str,
        amount: int,
        gas_price: int,
    ) -> Optional[SweepOutcome]:
        """Wrap ``amount``; None means the user declined and transfer should be offered."""
        human = format_units(amount, token.decimals)
        prompt = f"Wrap {human} {token.symbol} on chain {chain_id}? (Recommended for better rates)"
        if not await self.gate.ask(prompt):
            logger.info(f"Wrap of {token.symbol} declined, offering transfer instead")
            return None

        try:
            tx_hash = await client.write_contract(
                address=wrapped_address,
                abi=WRAP_ABI,
                function_name=WRAP_FUNCTION,
                value=amount,
                gas=GAS_LIMIT_WRAP,
                gas_price=gas_price,
            )
            await self._await_success(client, tx_hash)
        except Exception as e:
            if is_user_rejected(e):
                logger.info(f"User rejected wrap of {token.symbol}")
                return Failed(token=token, reason=REASON_WRAP_REJECTED)
            raise

        logger.info(f"Wrapped {human} {token.symbol} (tx {tx_hash})")
        return Sent(
            token=token.wrapped(),
            kind=SweepKind.WRAP,
            amount=str(amount),
            tx_hash=tx_hash,
        )

    async def _transfer(
        self, client: ChainClient, token: Token, chain_id: int, amount: int, gas_price: int
    ) -> SweepOutcome:
        human = format_units(amount, token.decimals)
        if not await self.gate.ask(f"Transfer {human} {token.symbol} on chain {chain_id} to the relayer?"):
            return Failed(token=token, reason=REASON_TRANSFER_CANCELLED)

        response = await self.backend.create_native_transfer_request(
            owner=self.wallet.address,
            chain=token.chain,
            amount=str(amount),
        )
        if not response.ok or not response.relayer_address:
            logger.error(f"Native transfer request for {token.symbol} rejected: {response.error}")
            return Failed(token=token, reason=REASON_TRANSFER_REQUEST)

        tx_hash = await client.send_transaction(
            to=response.relayer_address,
            value=amount,
            gas=GAS_LIMIT_TRANSFER,
            gas_price=gas_price,
        )
        await self._await_success(client, tx_hash)

        logger.info(f"Sent {human} {token.symbol} to relayer (tx {tx_hash}, job {response.job_id})")
        return Sent(
            token=token,
            kind=SweepKind.TRANSFER,
            amount=str(amount),
            tx_hash=tx_hash,
            job_id=response.job_id,
        )

    @staticmethod
    async def _await_success(client: ChainClient, tx_hash: str) -> None:
        receipt = await client.wait_for_transaction_receipt(tx_hash)
        if not receipt.succeeded:
            raise TransactionFailedError(tx_hash)
