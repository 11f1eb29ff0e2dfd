"""Build the wallet context (owner + chain client) from settings."""

import logging
from typing import Optional

import httpx
from bip_utils import Bip39SeedGenerator, Bip44, Bip44Changes, Bip44Coins, MnemonicChecksumError
from eth_account import Account
from eth_account.signers.local import LocalAccount

from relaysweep.chain.base import ChainClient, WalletContext
from relaysweep.chain.dry_run import DryRunChainClient
from relaysweep.chain.rpc import RpcChainClient
from relaysweep.config import Settings
from relaysweep.errors import ConfigurationError

logger = logging.getLogger(__name__)


def derive_private_key(seed_phrase: str, index: int = 0) -> str:
    """Derive the hex private key at m/44'/60'/0'/0/index."""
    seed_bytes = Bip39SeedGenerator(seed_phrase).Generate()
    bip44 = Bip44.FromSeed(seed_bytes, Bip44Coins.ETHEREUM)
    account = bip44.Purpose().Coin().Account(0).Change(Bip44Changes.CHAIN_EXT).AddressIndex(index)
    return account.PrivateKey().Raw().ToHex()


def load_account(settings: Settings) -> Optional[LocalAccount]:
    """Signing account from PRIVATE_KEY, else from WALLET_SEED_PHRASE."""
    if settings.private_key:
        return Account.from_key(settings.private_key)

    if settings.has_signer:
        try:
            private_key = derive_private_key(
                settings.wallet_seed_phrase, settings.wallet_account_index
            )
        except (MnemonicChecksumError, ValueError) as e:
            raise ConfigurationError(f"Invalid wallet seed phrase: {e}") from e
        return Account.from_key(private_key)

    return None


def create_chain_client(
    settings: Settings,
    account: Optional[LocalAccount] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ChainClient:
    """Dry-run client when DRY_RUN is on, otherwise an RPC client.

    Raises:
        ConfigurationError: If live mode lacks an RPC URL or a signer
    """
    if settings.dry_run:
        return DryRunChainClient(chain_id=settings.chain_id)

    if not settings.rpc_url:
        raise ConfigurationError("RPC_URL is required when DRY_RUN is off")
    if account is None:
        raise ConfigurationError("PRIVATE_KEY or WALLET_SEED_PHRASE is required when DRY_RUN is off")

    return RpcChainClient(
        rpc_url=settings.rpc_url,
        account=account,
        chain_id=settings.chain_id,
        receipt_timeout=settings.receipt_timeout_seconds,
        poll_interval=settings.receipt_poll_interval_seconds,
        transport=transport,
    )


def create_wallet_context(
    settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> WalletContext:
    """Resolve the owner address and chain client for this run.

    Raises:
        ConfigurationError: If no owner can be determined, or the configured
            owner is not the signing account in live mode
    """
    account = load_account(settings)
    client = create_chain_client(settings, account, transport)

    owner = settings.owner_address or (account.address if account else None)
    if not owner:
        raise ConfigurationError("OWNER_ADDRESS or a signer is required")

    if account and not settings.dry_run and owner.lower() != account.address.lower():
        raise ConfigurationError(
            f"OWNER_ADDRESS {owner} does not match the signing account {account.address}"
        )

    logger.info(f"Wallet context: owner={owner} dry_run={settings.dry_run}")
    return WalletContext(address=owner, client=client)
