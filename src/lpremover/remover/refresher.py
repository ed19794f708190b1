"""Reserve and quote refresh.

Each refresh records the selection it was issued for. A response is
applied only if the selection is unchanged when it arrives; otherwise it
is discarded. Reserves and the LP position are always replaced together.
"""

import asyncio
import logging
from typing import Optional

from lpremover.models import (
    LiquidityPosition,
    RemoverState,
    Reserves,
    SelectionSnapshot,
)
from lpremover.remover.session import SessionState
from lpremover.remover.validation import can_remove, parse_amount

logger = logging.getLogger(__name__)


class ReserveRefresher:
    """Keeps reserves, LP position and the removal preview current."""

    def __init__(self, state: RemoverState, session: SessionState):
        self.state = state
        self.session = session
        self._reserve_task: Optional[asyncio.Task] = None
        self._quote_task: Optional[asyncio.Task] = None

    def snapshot(self, include_amount: bool = False) -> SelectionSnapshot:
        session = self.session.session
        return SelectionSnapshot(
            first=self.state.first.address,
            second=self.state.second.address,
            account=session.account,
            session_generation=session.generation,
            amount_input=self.state.amount_input if include_amount else None,
        )

    async def refresh_reserves(self) -> bool:
        """Fetch reserves and the LP balance for the selected pair.

        Returns:
            True if new values were applied
        """
        session = self.session.session
        state = self.state
        if not (state.pair_selected and session.account and session.factory):
            return False

        issued = self.snapshot()
        try:
            data = await self.session.client.get_reserves(
                state.first.address,
                state.second.address,
                session.factory,
                session.account,
            )
        except Exception as e:
            logger.warning(
                f"Failed to get reserves for {state.first.address} / {state.second.address}: {e}"
            )
            return False

        if issued != self.snapshot():
            logger.debug(f"Discarding stale reserves for {issued.first} / {issued.second}")
            return False

        state.reserves = Reserves(first=data.reserve_a, second=data.reserve_b)
        state.position = LiquidityPosition(
            total_tokens_owned=data.liquidity,
            total_tokens_owned_base_units=data.liquidity_base_units,
        )
        logger.debug(
            f"Reserves {state.reserves.first} / {state.reserves.second}, "
            f"LP balance {state.position.total_tokens_owned}"
        )
        return True

    async def refresh_quote(self) -> bool:
        """Preview the removal of the entered amount.

        Runs only while removal is enabled. Otherwise the previous quote is
        left as it is (stale).

        Returns:
            True if a new quote was applied
        """
        session = self.session.session
        state = self.state
        if not can_remove(state) or not session.factory:
            return False

        amount = parse_amount(state.amount_input)
        issued = self.snapshot(include_amount=True)
        logger.debug(f"Previewing removal of {amount} LP tokens")

        try:
            quote = await self.session.client.quote_remove_liquidity(
                state.first.address,
                state.second.address,
                amount,
                session.factory,
            )
        except Exception as e:
            logger.warning(f"Failed to quote removal of {amount}: {e}")
            return False

        if issued != self.snapshot(include_amount=True):
            logger.debug(f"Discarding stale quote for {amount}")
            return False

        state.quote = quote
        return True

    def schedule_reserves(self) -> asyncio.Task:
        """Start a reserve refresh, cancelling one still in flight."""
        self._reserve_task = self._replace(self._reserve_task, self.refresh_reserves())
        return self._reserve_task

    def schedule_quote(self) -> asyncio.Task:
        """Start a quote refresh, cancelling one still in flight."""
        self._quote_task = self._replace(self._quote_task, self.refresh_quote())
        return self._quote_task

    @staticmethod
    def _replace(task: Optional[asyncio.Task], coro) -> asyncio.Task:
        if task is not None and not task.done():
            task.cancel()
        return asyncio.create_task(coro)

    async def cancel(self) -> None:
        """Cancel refreshes still in flight."""
        pending = [t for t in (self._reserve_task, self._quote_task) if t and not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)
