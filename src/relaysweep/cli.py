"""Command line interface.

    relaysweep scan                 list the wallet's tokens
    relaysweep sweep [--only ETH]   sweep every (or the selected) token
    relaysweep config               show the effective settings
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence

from relaysweep.config import ConfirmationMode, Settings, get_settings
from relaysweep.errors import BackendError, ConfigurationError
from relaysweep.main import Application, configure_logging
from relaysweep.utils.units import format_units

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relaysweep",
        description="Sweep a wallet's tokens to the relayer across chains",
    )
    parser.add_argument("--owner", type=str, help="Wallet address (overrides OWNER_ADDRESS)")
    parser.add_argument("--bridge", action="store_true", help="Answer prompts through the stdio host bridge")
    parser.add_argument("--live", action="store_true", help="Submit real transactions (turns DRY_RUN off)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("scan", help="List tokens held by the wallet")
    sweep = sub.add_parser("sweep", help="Sweep tokens to the relayer")
    sweep.add_argument(
        "--only", action="append", metavar="SYMBOL", help="Only sweep this symbol (repeatable)"
    )
    sub.add_parser("config", help="Show effective settings (secrets redacted)")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Fold command line flags into the loaded settings."""
    updates = {}
    if args.owner:
        updates["owner_address"] = args.owner
    if args.bridge:
        updates["confirmation_mode"] = ConfirmationMode.BRIDGE
    if args.live:
        updates["dry_run"] = False
    if args.debug:
        updates["debug"] = True
    return settings.model_copy(update=updates) if updates else settings


async def run_command(app: Application, args: argparse.Namespace) -> int:
    await app.start()
    try:
        if args.command == "scan":
            tokens = await app.scan()
            app.emit({
                "tokens": [
                    {
                        "symbol": t.symbol,
                        "chain": t.chain,
                        "native": t.is_native,
                        "address": t.address,
                        "balance": format_units(t.balance, t.decimals),
                    }
                    for t in tokens
                ],
                "quarantined": len(app.scanner.quarantined),
            })
            return EXIT_OK

        summary = await app.sweep(args.only)
        app.emit({"summary": summary.to_dict()})
        return EXIT_FAILURES if summary.failed else EXIT_OK
    finally:
        await app.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(settings)

    if args.command == "config":
        print(json.dumps(settings.get_safe_dict(), indent=2))
        return EXIT_OK

    try:
        app = Application(settings)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG

    try:
        return asyncio.run(run_command(app, args))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG
    except BackendError:
        return EXIT_FAILURES
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
