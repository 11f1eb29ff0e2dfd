"""Application wiring - builds every collaborator from settings."""

import json
import logging
from typing import Iterable, Optional

from relaysweep.backend.client import RelayBackendClient
from relaysweep.backend.scanner import TokenScanner
from relaysweep.chain.base import WalletContext
from relaysweep.chain.factory import create_wallet_context
from relaysweep.config import ConfirmationMode, Settings, get_settings
from relaysweep.confirmation.base import ConfirmationGate
from relaysweep.confirmation.channel import MessageChannel, StdioMessageChannel
from relaysweep.confirmation.factory import create_confirmation_gate
from relaysweep.contracts.tokens import Token
from relaysweep.errors import BackendError, ConfigurationError
from relaysweep.sweep.base import Summary, SweepOutcome
from relaysweep.sweep.fungible import FungibleTokenProcessor
from relaysweep.sweep.gas import GasBudgetCalculator
from relaysweep.sweep.native import NativeTokenProcessor
from relaysweep.sweep.orchestrator import SweepOrchestrator
from relaysweep.sweep.wrap import WrapAdvisor

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Log to stderr; stdout may be the host bridge."""
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class Application:
    """A wallet scan and sweep session."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[RelayBackendClient] = None,
        wallet: Optional[WalletContext] = None,
        gate: Optional[ConfirmationGate] = None,
        channel: Optional[MessageChannel] = None,
    ):
        """Initialize application.

        Collaborators not passed in are built from settings.

        Raises:
            ConfigurationError: If a required setting is missing
        """
        self.settings = settings or get_settings()

        if channel is None and self.settings.confirmation_mode == ConfirmationMode.BRIDGE:
            channel = StdioMessageChannel()
        self.channel = channel

        if backend is None:
            if not self.settings.backend_url:
                raise ConfigurationError("BACKEND_URL is required")
            backend = RelayBackendClient(
                self.settings.backend_url, timeout=self.settings.backend_timeout_seconds
            )
        self.backend = backend
        self.wallet = wallet or create_wallet_context(self.settings)
        self.gate = gate or create_confirmation_gate(self.settings, channel)

        self.scanner = TokenScanner(self.backend)
        self.orchestrator = SweepOrchestrator(
            native=NativeTokenProcessor(
                wallet=self.wallet,
                backend=self.backend,
                advisor=WrapAdvisor(self.backend),
                gate=self.gate,
                calculator=GasBudgetCalculator(self.settings.default_gas_price_wei),
            ),
            fungible=FungibleTokenProcessor(self.wallet, self.backend, self.gate),
            gate=self.gate,
            on_outcome=self._log_outcome,
        )

    async def start(self) -> None:
        """Open the host bridge, if any."""
        if isinstance(self.channel, StdioMessageChannel):
            await self.channel.start()

    async def close(self) -> None:
        if isinstance(self.channel, StdioMessageChannel):
            await self.channel.close()

    async def scan(self) -> list[Token]:
        """Fetch the owner's tokens; the user is alerted if the scan fails."""
        if not self.wallet.address:
            raise ConfigurationError("No wallet address to scan")
        try:
            return await self.scanner.scan(self.wallet.address)
        except BackendError as e:
            logger.error(f"Error scanning wallet: {e}")
            await self.gate.notify(f"Error scanning wallet: {e}")
            raise

    async def sweep(self, symbols: Optional[Iterable[str]] = None) -> Summary:
        """Scan, optionally filter by symbol, and sweep the result."""
        tokens = await self.scan()
        if symbols:
            wanted = {s.upper() for s in symbols}
            tokens = [t for t in tokens if t.symbol.upper() in wanted]
            logger.info(f"Selected {len(tokens)} token(s) matching {sorted(wanted)}")
        return await self.orchestrator.run(tokens)

    def emit(self, payload: dict) -> None:
        """Hand a result to whoever drives us (host bridge or terminal)."""
        if self.channel is not None:
            self.channel.post(json.dumps({"type": "result", **payload}))
        else:
            print(json.dumps(payload, indent=2))

    @staticmethod
    def _log_outcome(outcome: SweepOutcome) -> None:
        logger.debug(f"Outcome recorded: {outcome.to_dict()}")
