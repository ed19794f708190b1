"""Abstract chain client interface used by the remover components."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional, Sequence

from lpremover.chains import TokenInfo
from lpremover.models import RemovalQuote

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class ChainClientError(Exception):
    """Raised when a chain query or transaction cannot be completed."""

    pass


class TransactionFailedError(ChainClientError):
    """Raised when a submitted transaction reverts."""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class SignerUnavailableError(ChainClientError):
    """Raised when a write is attempted without a signing account."""

    pass


@dataclass(frozen=True)
class ContractHandle:
    """A resolved contract address plus the backend's contract object."""

    address: str
    contract: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class RouterHandle(ContractHandle, ABC):
    """A V2 router. Knows its wrapped-native token and its factory."""

    @abstractmethod
    async def weth(self) -> str:
        """Wrapped-native token address."""
        pass

    @abstractmethod
    async def factory(self) -> str:
        """Factory address."""
        pass


@dataclass(frozen=True)
class TokenBalance:
    """Symbol and balance of a token for an account."""

    symbol: str
    balance: Decimal
    base_units: int
    decimals: int = 18


@dataclass(frozen=True)
class PoolReserves:
    """Reserves of a pair, ordered as requested, plus the account's LP balance."""

    reserve_a: Decimal
    reserve_b: Decimal
    liquidity: Decimal
    liquidity_base_units: int


class ChainClient(ABC):
    """Read/write access to a node on behalf of one account.

    The provider and signer live inside the client instance; swapping the
    client is how a caller changes either of them.
    """

    @property
    @abstractmethod
    def identity(self) -> tuple:
        """Identifies the provider/signer pair this client talks through."""
        pass

    @abstractmethod
    async def get_account(self) -> Optional[str]:
        """Address of the active account, or None when none is connected."""
        pass

    @abstractmethod
    async def get_network(self) -> int:
        """Chain id reported by the node."""
        pass

    @abstractmethod
    async def get_router(self, router_address: str) -> RouterHandle:
        """Resolve a router handle."""
        pass

    @abstractmethod
    async def get_weth(self, address: str) -> ContractHandle:
        """Resolve a wrapped-native token handle."""
        pass

    @abstractmethod
    async def get_factory(self, address: str) -> ContractHandle:
        """Resolve a factory handle."""
        pass

    @abstractmethod
    async def get_balance_and_symbol(
        self,
        account: str,
        token_address: str,
        weth_address: Optional[str],
        known_tokens: Sequence[TokenInfo] = (),
    ) -> TokenBalance:
        """Symbol and balance of a token. The WETH address means the native coin."""
        pass

    @abstractmethod
    async def get_reserves(
        self,
        token_a: str,
        token_b: str,
        factory: ContractHandle,
        account: str,
    ) -> PoolReserves:
        """Reserves for the pair (ordered a, b) and the account's LP balance."""
        pass

    @abstractmethod
    async def quote_remove_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount: Decimal,
        factory: ContractHandle,
    ) -> RemovalQuote:
        """Read-only preview of burning `amount` LP tokens."""
        pass

    @abstractmethod
    async def remove_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount: Decimal,
        min_a: Decimal,
        min_b: Decimal,
        router: RouterHandle,
        account: str,
        factory: ContractHandle,
    ) -> dict:
        """Submit a removal and wait for its receipt.

        Raises:
            TransactionFailedError: If the transaction reverts
            SignerUnavailableError: If no signing account is configured
        """
        pass

    async def close(self) -> None:
        """Release transport resources."""
        pass
