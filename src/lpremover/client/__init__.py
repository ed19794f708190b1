"""Chain client interface and web3.py implementation."""

from lpremover.client.base import (
    ChainClient,
    ChainClientError,
    ContractHandle,
    PoolReserves,
    RouterHandle,
    SignerUnavailableError,
    TokenBalance,
    TransactionFailedError,
)

__all__ = [
    "ChainClient",
    "ChainClientError",
    "ContractHandle",
    "PoolReserves",
    "RouterHandle",
    "SignerUnavailableError",
    "TokenBalance",
    "TransactionFailedError",
    "create_client",
]


def create_client(settings=None) -> ChainClient:
    """Create the web3-backed client described by settings."""
    from lpremover.client.signer import load_account
    from lpremover.client.web3_client import Web3ChainClient
    from lpremover.config import get_settings

    settings = settings or get_settings()
    return Web3ChainClient(
        rpc_url=settings.rpc_url,
        account=load_account(settings),
        watch_address=settings.account_address,
        deadline_seconds=settings.tx_deadline_seconds,
        receipt_timeout=settings.tx_receipt_timeout,
    )
