"""Batch sweep across a wallet's tokens.

Tokens are processed strictly one at a time. A native token may wait on a
confirmation prompt and a receipt, and every submission comes from the same
signing account, so overlapping tokens would interleave prompts and race on
nonces.
"""

import logging
from typing import Callable, Iterable, Optional

from relaysweep.confirmation.base import ConfirmationGate
from relaysweep.contracts.tokens import Token
from relaysweep.sweep.base import Failed, Summary, SweepOutcome, TokenProcessor

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[SweepOutcome], None]


class SweepOrchestrator:
    """Dispatches each token to its processor and collects a Summary."""

    def __init__(
        self,
        native: TokenProcessor,
        fungible: TokenProcessor,
        gate: ConfirmationGate,
        on_outcome: Optional[OutcomeCallback] = None,
    ):
        """Initialize orchestrator.

        Args:
            native: Processor for tokens without an address
            fungible: Processor for contract tokens
            gate: Receives the end-of-batch notification
            on_outcome: Called with each outcome as soon as it is recorded
        """
        self.native = native
        self.fungible = fungible
        self.gate = gate
        self.on_outcome = on_outcome

    async def process_token(self, token: Token) -> SweepOutcome:
        """Sweep a single token; always returns an outcome."""
        processor = self.native if token.is_native else self.fungible
        try:
            return await processor.process(token)
        except Exception as e:
            logger.error(f"Processor raised for {token.symbol} on chain {token.chain}: {e}")
            return Failed(token=token, reason=f"error: {e}")

    async def run(self, tokens: Iterable[Token]) -> Summary:
        """Sweep every token in order.

        Returns:
            A fresh Summary with exactly one outcome per token
        """
        tokens = list(tokens)
        summary = Summary()
        if not tokens:
            logger.info("No tokens to sweep")
            return summary

        logger.info(f"Sweeping {len(tokens)} token(s)")
        for index, token in enumerate(tokens, start=1):
            kind = "native" if token.is_native else token.address
            logger.info(f"[{index}/{len(tokens)}] {token.symbol} on chain {token.chain} ({kind})")

            outcome = await self.process_token(token)
            summary.record(outcome)
            if self.on_outcome is not None:
                try:
                    self.on_outcome(outcome)
                except Exception as e:
                    logger.error(f"Outcome callback failed for {token.symbol}: {e}")

        logger.info(f"Sweep finished: {len(summary.sent)} sent, {len(summary.failed)} failed")
        if summary.total:
            try:
                await self.gate.notify(summary.format_message())
            except Exception as e:
                logger.error(f"Failed to deliver sweep summary: {e}")
        return summary
