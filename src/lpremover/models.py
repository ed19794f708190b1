"""State objects shared by the remover components."""

import time
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Optional

from lpremover.chains import TokenInfo

if TYPE_CHECKING:
    from lpremover.client.base import ContractHandle, RouterHandle

ZERO = Decimal("0")


class Slot(str, Enum):
    """One of the two token slots of a pair selection."""

    FIRST = "first"
    SECOND = "second"

    @property
    def other(self) -> "Slot":
        return Slot.SECOND if self is Slot.FIRST else Slot.FIRST


@dataclass(frozen=True)
class Token:
    """A selected token. The address is its identity, the rest is derived."""

    address: Optional[str] = None
    symbol: Optional[str] = None
    balance: Optional[Decimal] = None
    base_units: Optional[int] = None

    def with_balance(self, balance: Decimal, base_units: int) -> "Token":
        return replace(self, balance=balance, base_units=base_units)


@dataclass(frozen=True)
class Reserves:
    """Pool reserves ordered to match the selection slots."""

    first: Decimal = ZERO
    second: Decimal = ZERO

    def reversed(self) -> "Reserves":
        return Reserves(first=self.second, second=self.first)


@dataclass(frozen=True)
class LiquidityPosition:
    """Liquidity tokens held by the connected account in the selected pool."""

    total_tokens_owned: Decimal = ZERO
    total_tokens_owned_base_units: int = 0


@dataclass(frozen=True)
class RemovalQuote:
    """Preview of a liquidity removal. Not a commitment."""

    lp_tokens_to_burn: Decimal
    amount_out_first: Decimal
    amount_out_second: Decimal
    timestamp: float = field(default_factory=time.time, compare=False)

    def reversed(self) -> "RemovalQuote":
        return replace(
            self,
            amount_out_first=self.amount_out_second,
            amount_out_second=self.amount_out_first,
        )


@dataclass(frozen=True)
class Session:
    """Wallet/network session.

    Contract handles are only set when the chain id is supported and every
    resolution step succeeded.
    """

    account: Optional[str] = None
    chain_id: Optional[int] = None
    router: Optional["RouterHandle"] = None
    factory: Optional["ContractHandle"] = None
    weth_address: Optional[str] = None
    tokens: tuple[TokenInfo, ...] = ()
    wrong_network: bool = False
    generation: int = 0

    @property
    def is_ready(self) -> bool:
        """True when transactions may be built against this session."""
        return (
            not self.wrong_network
            and self.account is not None
            and self.router is not None
            and self.factory is not None
            and self.weth_address is not None
        )


@dataclass(frozen=True)
class SelectionSnapshot:
    """Identity of the inputs a refresh was issued for.

    Responses are only applied while the current snapshot still equals the
    one they were requested under.
    """

    first: Optional[str]
    second: Optional[str]
    account: Optional[str]
    session_generation: int
    amount_input: Optional[str] = None


@dataclass
class RemoverState:
    """Mutable view state of a liquidity remover."""

    first: Token = field(default_factory=Token)
    second: Token = field(default_factory=Token)
    reserves: Reserves = field(default_factory=Reserves)
    position: LiquidityPosition = field(default_factory=LiquidityPosition)
    quote: Optional[RemovalQuote] = None
    amount_input: str = ""
    loading: bool = False

    def token(self, slot: Slot) -> Token:
        return self.first if slot is Slot.FIRST else self.second

    def set_token(self, slot: Slot, token: Token) -> None:
        if slot is Slot.FIRST:
            self.first = token
        else:
            self.second = token

    @property
    def pair_selected(self) -> bool:
        return bool(self.first.address and self.second.address)


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive address equality. Undefined never matches."""
    return bool(a and b and a.lower() == b.lower())
