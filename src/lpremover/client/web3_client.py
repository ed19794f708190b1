"""Chain client backed by web3.py.

Reads go through AsyncWeb3 contract calls. Writes are built with
build_transaction, signed locally with eth-account and broadcast as raw
transactions, then awaited until a receipt is available.
"""

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3

from lpremover.chains import TokenInfo, find_token
from lpremover.client.abi import ERC20_ABI, FACTORY_ABI, PAIR_ABI, ROUTER_ABI
from lpremover.client.base import (
    ChainClient,
    ContractHandle,
    PoolReserves,
    RouterHandle,
    SignerUnavailableError,
    TokenBalance,
    TransactionFailedError,
)
from lpremover.models import RemovalQuote
from lpremover.pool_math import (
    LP_TOKEN_DECIMALS,
    from_base_units,
    quote_removal,
    to_base_units,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Web3RouterHandle(RouterHandle):
    """Router handle over an AsyncWeb3 contract."""

    async def weth(self) -> str:
        return await self.contract.functions.WETH().call()

    async def factory(self) -> str:
        return await self.contract.functions.factory().call()


@dataclass(frozen=True)
class _PairState:
    address: str
    reserve_a: int
    reserve_b: int
    decimals_a: int
    decimals_b: int


class Web3ChainClient(ChainClient):
    """ChainClient talking JSON-RPC to an EVM node."""

    def __init__(
        self,
        rpc_url: str,
        account: Optional[LocalAccount] = None,
        watch_address: Optional[str] = None,
        deadline_seconds: int = 200000,
        receipt_timeout: float = 120.0,
        w3: Optional[AsyncWeb3] = None,
    ):
        """Initialize the client.

        Args:
            rpc_url: Node JSON-RPC endpoint
            account: Local signing account (None = read-only)
            watch_address: Address reported when no signing account is set
            deadline_seconds: Router deadline offset for removals
            receipt_timeout: Seconds to wait for transaction receipts
            w3: Pre-built AsyncWeb3 instance (overrides rpc_url)
        """
        self.rpc_url = rpc_url
        self.account = account
        self.watch_address = watch_address
        self.deadline_seconds = deadline_seconds
        self.receipt_timeout = receipt_timeout
        self.w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._decimals: dict[str, int] = {}

    @property
    def identity(self) -> tuple:
        signer = self.account.address if self.account else None
        return (self.rpc_url, signer, self.watch_address)

    def _checksum(self, address: str) -> str:
        return AsyncWeb3.to_checksum_address(address)

    def _erc20(self, address: str):
        return self.w3.eth.contract(address=self._checksum(address), abi=ERC20_ABI)

    def _pair(self, address: str):
        return self.w3.eth.contract(address=self._checksum(address), abi=PAIR_ABI)

    async def _get_decimals(self, token_address: str) -> int:
        key = token_address.lower()
        if key not in self._decimals:
            self._decimals[key] = await self._erc20(token_address).functions.decimals().call()
        return self._decimals[key]

    # ======================
    # Session resolution
    # ======================

    async def get_account(self) -> Optional[str]:
        if self.account:
            return self.account.address
        if self.watch_address:
            return self._checksum(self.watch_address)
        return None

    async def get_network(self) -> int:
        return await self.w3.eth.chain_id

    async def get_router(self, router_address: str) -> RouterHandle:
        address = self._checksum(router_address)
        contract = self.w3.eth.contract(address=address, abi=ROUTER_ABI)
        return Web3RouterHandle(address=address, contract=contract)

    async def get_weth(self, address: str) -> ContractHandle:
        address = self._checksum(address)
        return ContractHandle(address=address, contract=self._erc20(address))

    async def get_factory(self, address: str) -> ContractHandle:
        address = self._checksum(address)
        contract = self.w3.eth.contract(address=address, abi=FACTORY_ABI)
        return ContractHandle(address=address, contract=contract)

    # ======================
    # Queries
    # ======================

    async def get_balance_and_symbol(
        self,
        account: str,
        token_address: str,
        weth_address: Optional[str],
        known_tokens: Sequence[TokenInfo] = (),
    ) -> TokenBalance:
        known = find_token(list(known_tokens), token_address)

        if weth_address and token_address.lower() == weth_address.lower():
            raw = await self.w3.eth.get_balance(self._checksum(account))
            symbol = known.symbol if known else "ETH"
            return TokenBalance(
                symbol=symbol,
                balance=from_base_units(raw, 18),
                base_units=raw,
                decimals=18,
            )

        token = self._erc20(token_address)
        try:
            symbol = await token.functions.symbol().call()
        except Exception as e:
            if not known:
                raise
            logger.debug(f"symbol() failed for {token_address}, using token list: {e}")
            symbol = known.symbol

        decimals = await self._get_decimals(token_address)
        raw = await token.functions.balanceOf(self._checksum(account)).call()
        return TokenBalance(
            symbol=symbol,
            balance=from_base_units(raw, decimals),
            base_units=raw,
            decimals=decimals,
        )

    async def _get_pair_address(
        self, token_a: str, token_b: str, factory: ContractHandle
    ) -> Optional[str]:
        address = await factory.contract.functions.getPair(
            self._checksum(token_a), self._checksum(token_b)
        ).call()
        if not address or int(address, 16) == 0:
            return None
        return address

    async def _fetch_pair_state(self, token_a: str, token_b: str, pair_address: str) -> _PairState:
        pair = self._pair(pair_address)
        reserve0, reserve1, _ = await pair.functions.getReserves().call()
        token0 = await pair.functions.token0().call()

        if token0.lower() == token_a.lower():
            reserve_a, reserve_b = reserve0, reserve1
        else:
            reserve_a, reserve_b = reserve1, reserve0

        return _PairState(
            address=pair_address,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            decimals_a=await self._get_decimals(token_a),
            decimals_b=await self._get_decimals(token_b),
        )

    async def get_reserves(
        self,
        token_a: str,
        token_b: str,
        factory: ContractHandle,
        account: str,
    ) -> PoolReserves:
        pair_address = await self._get_pair_address(token_a, token_b, factory)
        if pair_address is None:
            logger.info(f"No pair exists yet for {token_a} / {token_b}")
            return PoolReserves(Decimal("0"), Decimal("0"), Decimal("0"), 0)

        state = await self._fetch_pair_state(token_a, token_b, pair_address)
        lp_raw = await self._pair(pair_address).functions.balanceOf(
            self._checksum(account)
        ).call()

        return PoolReserves(
            reserve_a=from_base_units(state.reserve_a, state.decimals_a),
            reserve_b=from_base_units(state.reserve_b, state.decimals_b),
            liquidity=from_base_units(lp_raw, LP_TOKEN_DECIMALS),
            liquidity_base_units=lp_raw,
        )

    async def quote_remove_liquidity(
        self,
        token_a: str,
        token_b: str,
        amount: Decimal,
        factory: ContractHandle,
    ) -> RemovalQuote:
        pair_address = await self._get_pair_address(token_a, token_b, factory)
        if pair_address is None:
            return RemovalQuote(amount, Decimal("0"), Decimal("0"))

        state = await self._fetch_pair_state(token_a, token_b, pair_address)
        pair = self._pair(pair_address)
        total_supply = await pair.functions.totalSupply().call()
        k_last = await pair.functions.kLast().call()
        fee_to = await factory.contract.functions.feeTo().call()

        out_a, out_b = quote_removal(
            state.reserve_a,
            state.reserve_b,
            total_supply,
            to_base_units(amount, LP_TOKEN_DECIMALS),
            k_last=k_last,
            fee_on=int(fee_to, 16) != 0,
        )
        return RemovalQuote(
            lp_tokens_to_burn=amount,
            amount_out_first=from_base_units(out_a, state.decimals_a),
            amount_out_second=from_base_units(out_b, state.decimals_b),
        )

    # ======================
    # Transactions
    # ======================

    async def _send(self, fn, label: str) -> dict:
        """Build, sign and broadcast a contract call, then wait for its receipt."""
        if not self.account:
            raise SignerUnavailableError("No signing account configured")

        tx = await fn.build_transaction(
            {
                "from": self.account.address,
                "nonce": await self.w3.eth.get_transaction_count(self.account.address, "pending"),
                "chainId": await self.w3.eth.chain_id,
            }
        )
        signed = self.account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hex = AsyncWeb3.to_hex(tx_hash)
        logger.info(f"{label} submitted: {tx_hex}")

        receipt = await self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.receipt_timeout
        )
        if receipt["status"] != 1:
            raise TransactionFailedError(
                f"{label} transaction {tx_hex} reverted", tx_hash=tx_hex
            )
        return dict(receipt)

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
        if not self.account:
            raise SignerUnavailableError("No signing account configured")

        for value in (min_a, min_b):
            if not value.is_finite() or value < 0:
                raise ValueError(f"Invalid minimum output: {value}")
        liquidity = to_base_units(amount, LP_TOKEN_DECIMALS)
        if liquidity <= 0:
            raise ValueError(f"Invalid LP amount: {amount}")
        amount_a_min = to_base_units(min_a, await self._get_decimals(token_a))
        amount_b_min = to_base_units(min_b, await self._get_decimals(token_b))
        deadline = int(time.time()) + self.deadline_seconds

        pair_address = await self._get_pair_address(token_a, token_b, factory)
        if pair_address is None:
            raise TransactionFailedError(f"No pair exists for {token_a} / {token_b}")

        await self._send(
            self._pair(pair_address).functions.approve(router.address, liquidity),
            "LP approval",
        )

        weth_address = (await router.weth()).lower()
        to = self._checksum(account)
        functions = router.contract.functions

        if token_a.lower() == weth_address:
            fn = functions.removeLiquidityETH(
                self._checksum(token_b), liquidity, amount_b_min, amount_a_min, to, deadline
            )
        elif token_b.lower() == weth_address:
            fn = functions.removeLiquidityETH(
                self._checksum(token_a), liquidity, amount_a_min, amount_b_min, to, deadline
            )
        else:
            fn = functions.removeLiquidity(
                self._checksum(token_a),
                self._checksum(token_b),
                liquidity,
                amount_a_min,
                amount_b_min,
                to,
                deadline,
            )

        return await self._send(fn, "Liquidity removal")

    async def close(self) -> None:
        await self.w3.provider.disconnect()
