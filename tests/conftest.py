"""Pytest configuration and fixtures."""

import asyncio
import os
from collections import Counter
from decimal import Decimal
from typing import Optional, Sequence

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DRY_RUN"] = "false"
os.environ["PRIVATE_KEY"] = ""
os.environ["WALLET_SEED_PHRASE"] = ""
os.environ["TOKEN_LIST_URL"] = ""

from lpremover.chains import TokenInfo
from lpremover.client.base import (
    ChainClient,
    ChainClientError,
    ContractHandle,
    PoolReserves,
    RouterHandle,
    TokenBalance,
    TransactionFailedError,
)
from lpremover.config import Settings
from lpremover.models import RemovalQuote
from lpremover.pool_math import from_base_units, quote_removal, to_base_units
from lpremover.utils.locks import clear_account_locks

ACCOUNT = "0x1111111111111111111111111111111111111111"
ROUTER = "0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D"
FACTORY = "0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
TOKEN_X = "0x2222222222222222222222222222222222222222"
TOKEN_Y = "0x3333333333333333333333333333333333333333"
TOKEN_Z = "0x4444444444444444444444444444444444444444"

E18 = 10**18


class FakeRouter(RouterHandle):
    """Router handle returning fixed WETH and factory addresses."""

    async def weth(self) -> str:
        return WETH

    async def factory(self) -> str:
        return FACTORY


class FakePool:
    """Pool state in base units (all tokens 18 decimals)."""

    def __init__(self, reserves: dict[str, int], total_supply: int, lp_balance: int):
        self.reserves = {k.lower(): v for k, v in reserves.items()}
        self.total_supply = total_supply
        self.lp_balance = lp_balance


class FakeChainClient(ChainClient):
    """In-memory chain client that records every call."""

    def __init__(
        self,
        account: Optional[str] = ACCOUNT,
        chain_id: int = 1,
        signer: str = "signer-1",
    ):
        self.account = account
        self.chain_id = chain_id
        self.signer = signer
        self.balances: dict[str, TokenBalance] = {}
        self.pools: dict[frozenset, FakePool] = {}
        self.calls: Counter = Counter()
        self.call_log: list[tuple] = []
        self.fail: set[str] = set()
        self.delays: dict[str, float] = {}
        self.remove_error: Optional[Exception] = None
        self.remove_delay: float = 0.0

    @property
    def identity(self) -> tuple:
        return ("fake", self.signer)

    def add_token(self, address: str, symbol: str, balance: str) -> None:
        amount = Decimal(balance)
        self.balances[address.lower()] = TokenBalance(
            symbol=symbol,
            balance=amount,
            base_units=to_base_units(amount, 18),
        )

    def add_pool(self, token_a: str, reserve_a: str, token_b: str, reserve_b: str,
                 total_supply: str, lp_balance: str) -> FakePool:
        pool = FakePool(
            {
                token_a: to_base_units(Decimal(reserve_a), 18),
                token_b: to_base_units(Decimal(reserve_b), 18),
            },
            to_base_units(Decimal(total_supply), 18),
            to_base_units(Decimal(lp_balance), 18),
        )
        self.pools[frozenset((token_a.lower(), token_b.lower()))] = pool
        return pool

    async def _record(self, name: str, *args) -> None:
        self.calls[name] += 1
        self.call_log.append((name, *args))
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.fail:
            raise ChainClientError(f"{name} failed")

    def _pool(self, token_a: str, token_b: str) -> FakePool:
        return self.pools[frozenset((token_a.lower(), token_b.lower()))]

    async def get_account(self) -> Optional[str]:
        await self._record("get_account")
        return self.account

    async def get_network(self) -> int:
        await self._record("get_network")
        return self.chain_id

    async def get_router(self, router_address: str) -> RouterHandle:
        await self._record("get_router", router_address)
        return FakeRouter(address=router_address)

    async def get_weth(self, address: str) -> ContractHandle:
        await self._record("get_weth", address)
        return ContractHandle(address=address)

    async def get_factory(self, address: str) -> ContractHandle:
        await self._record("get_factory", address)
        return ContractHandle(address=address)

    async def get_balance_and_symbol(
        self,
        account: str,
        token_address: str,
        weth_address: Optional[str],
        known_tokens: Sequence[TokenInfo] = (),
    ) -> TokenBalance:
        await self._record("get_balance_and_symbol", token_address)
        return self.balances[token_address.lower()]

    async def get_reserves(self, token_a, token_b, factory, account) -> PoolReserves:
        pool = self._pool(token_a, token_b)
        snapshot = (pool.reserves[token_a.lower()], pool.reserves[token_b.lower()], pool.lp_balance)
        await self._record("get_reserves", token_a, token_b)
        reserve_a, reserve_b, lp = snapshot
        return PoolReserves(
            reserve_a=from_base_units(reserve_a, 18),
            reserve_b=from_base_units(reserve_b, 18),
            liquidity=from_base_units(lp, 18),
            liquidity_base_units=lp,
        )

    async def quote_remove_liquidity(self, token_a, token_b, amount, factory) -> RemovalQuote:
        await self._record("quote_remove_liquidity", token_a, token_b, amount)
        pool = self._pool(token_a, token_b)
        out_a, out_b = quote_removal(
            pool.reserves[token_a.lower()],
            pool.reserves[token_b.lower()],
            pool.total_supply,
            to_base_units(amount, 18),
        )
        return RemovalQuote(amount, from_base_units(out_a, 18), from_base_units(out_b, 18))

    async def remove_liquidity(self, token_a, token_b, amount, min_a, min_b, router, account, factory) -> dict:
        await self._record("remove_liquidity", token_a, token_b, amount, min_a, min_b)
        if self.remove_delay:
            await asyncio.sleep(self.remove_delay)
        if self.remove_error:
            raise self.remove_error
        return {"status": 1, "transactionHash": "0xfeed"}


def make_settings(**overrides) -> Settings:
    values = {
        "dry_run": False,
        "poll_interval": 0.05,
        "notification_ttl": 10.0,
        "token_list_url": None,
        "private_key": None,
        "wallet_seed_phrase": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_locks():
    """Clear account locks before each test."""
    clear_account_locks()
    yield
    clear_account_locks()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client() -> FakeChainClient:
    """Pool X/Y: 100 X / 200 Y, 50 LP supply, account holds 5 LP."""
    fake = FakeChainClient()
    fake.add_token(TOKEN_X, "X", "1000")
    fake.add_token(TOKEN_Y, "Y", "2000")
    fake.add_token(TOKEN_Z, "Z", "3000")
    fake.add_token(WETH, "ETH", "1.5")
    fake.add_pool(TOKEN_X, "100", TOKEN_Y, "200", total_supply="50", lp_balance="5")
    fake.add_pool(TOKEN_X, "10", TOKEN_Z, "30", total_supply="10", lp_balance="1")
    fake.add_pool(TOKEN_Y, "40", TOKEN_Z, "80", total_supply="20", lp_balance="0")
    return fake
