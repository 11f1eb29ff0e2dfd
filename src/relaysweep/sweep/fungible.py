"""Fungible token processing: the relayer pulls the full balance."""

import logging

from relaysweep.backend.client import RelayBackendClient
from relaysweep.chain.base import WalletContext
from relaysweep.confirmation.base import ConfirmationGate
from relaysweep.contracts.tokens import Token
from relaysweep.sweep.base import Failed, Sent, SweepKind, SweepOutcome, TokenProcessor

logger = logging.getLogger(__name__)

REASON_TRANSFER_REQUEST = "transfer request creation error"
REASON_NOT_CONNECTED = "wallet not connected"

REQUEST_CREATED_MESSAGE = "Transfer request created. The relayer will process it soon."


class FungibleTokenProcessor(TokenProcessor):
    """Registers a relay job for a contract token; no gas is spent locally."""

    def __init__(self, wallet: WalletContext, backend: RelayBackendClient, gate: ConfirmationGate):
        self.wallet = wallet
        self.backend = backend
        self.gate = gate

    async def process(self, token: Token) -> SweepOutcome:
        if not self.wallet.address:
            return Failed(token=token, reason=REASON_NOT_CONNECTED)

        try:
            response = await self.backend.create_transfer_request(
                owner=self.wallet.address,
                chain=token.chain,
                token=token.address,
                amount=token.balance,
            )
            if not response.ok:
                reason = response.error or REASON_TRANSFER_REQUEST
                logger.error(f"Transfer request for {token.symbol} rejected: {reason}")
                return Failed(token=token, reason=reason)
        except Exception as e:
            logger.error(f"Error processing {token.symbol} ({token.address}): {e}")
            return Failed(token=token, reason=str(e) or "unknown error")

        # The relay job exists from here on; a lost notice does not undo it.
        try:
            await self.gate.notify(REQUEST_CREATED_MESSAGE)
        except Exception as e:
            logger.error(f"Failed to notify about job {response.job_id} for {token.symbol}: {e}")

        return Sent(
            token=token,
            kind=SweepKind.TRANSFER,
            amount=token.balance,
            job_id=response.job_id,
        )
