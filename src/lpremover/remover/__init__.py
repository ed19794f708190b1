"""Liquidity removal components."""

from lpremover.remover.dispatcher import ActionDispatcher, RemovalResult
from lpremover.remover.poller import PollingLoop
from lpremover.remover.refresher import ReserveRefresher
from lpremover.remover.selection import PairSelection
from lpremover.remover.service import LiquidityRemover
from lpremover.remover.session import SessionState
from lpremover.remover.validation import can_remove, parse_amount

__all__ = [
    "ActionDispatcher",
    "LiquidityRemover",
    "PairSelection",
    "PollingLoop",
    "RemovalResult",
    "ReserveRefresher",
    "SessionState",
    "can_remove",
    "parse_amount",
]
