"""Chain clients and the connected-wallet context."""

from relaysweep.chain.base import ChainClient, TxReceipt, WalletContext
from relaysweep.chain.dry_run import DryRunChainClient
from relaysweep.chain.factory import create_chain_client, create_wallet_context, load_account
from relaysweep.chain.rpc import RpcChainClient, encode_function_call

__all__ = [
    "ChainClient",
    "DryRunChainClient",
    "RpcChainClient",
    "TxReceipt",
    "WalletContext",
    "create_chain_client",
    "create_wallet_context",
    "encode_function_call",
    "load_account",
]
