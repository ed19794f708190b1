"""Liquidity remover: session, selection, refresh, polling and dispatch wired together."""

import asyncio
import logging
from decimal import Decimal
from typing import Optional

from lpremover.client.base import ChainClient
from lpremover.config import Settings, get_settings
from lpremover.models import RemoverState, Session, Slot
from lpremover.notifications.notifier import Notifier
from lpremover.remover.dispatcher import ActionDispatcher, RemovalResult
from lpremover.remover.poller import PollingLoop
from lpremover.remover.refresher import ReserveRefresher
from lpremover.remover.selection import PairSelection
from lpremover.remover.session import SessionState
from lpremover.remover.validation import can_remove

logger = logging.getLogger(__name__)


class LiquidityRemover:
    """Client-side state for removing liquidity from one pair.

    Usage:
        async with LiquidityRemover(client) as remover:
            await remover.select_token(Slot.FIRST, token_a)
            await remover.select_token(Slot.SECOND, token_b)
            await remover.set_amount("1.5")
            result = await remover.remove()
    """

    def __init__(
        self,
        client: ChainClient,
        settings: Optional[Settings] = None,
        notifier: Optional[Notifier] = None,
    ):
        settings = settings or get_settings()
        self.settings = settings
        self.state = RemoverState()
        self.notifier = notifier or Notifier(default_ttl=settings.notification_ttl)
        self.session_state = SessionState(
            client,
            router_address=settings.router_address,
            token_list_url=settings.token_list_url,
        )
        self.selection = PairSelection(self.state, self.session_state)
        self.refresher = ReserveRefresher(self.state, self.session_state)
        self.dispatcher = ActionDispatcher(
            self.state,
            self.session_state,
            self.notifier,
            dry_run=settings.dry_run,
            slippage=settings.removal_slippage,
        )
        self.poller = PollingLoop(self.poll_once, interval=settings.poll_interval)

    @property
    def session(self) -> Session:
        return self.session_state.session

    @property
    def client(self) -> ChainClient:
        return self.session_state.client

    # ======================
    # Lifecycle
    # ======================

    async def start(self, poll: bool = True) -> Session:
        """Resolve the session and optionally start polling."""
        session = await self.session_state.resolve()
        if poll:
            self.poller.start()
        return session

    async def stop(self) -> None:
        """Stop polling and cancel refreshes in flight."""
        await self.poller.stop()
        await self.refresher.cancel()

    async def __aenter__(self) -> "LiquidityRemover":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
        return False

    async def reconnect(self, client: ChainClient) -> bool:
        """Use a new client. Re-resolves and refreshes if its identity differs."""
        changed = await self.session_state.use_client(client)
        if changed:
            await self._refresh_after_change()
        return changed

    # ======================
    # User actions
    # ======================

    async def select_token(self, slot: Slot, address: Optional[str]) -> bool:
        """Select a token into a slot and refresh reserves if the pair changed."""
        before = (self.state.first.address, self.state.second.address)
        await self.selection.select_token(slot, address)
        after = (self.state.first.address, self.state.second.address)
        if before == after:
            return False
        await self._refresh_after_change()
        return True

    async def switch(self) -> None:
        """Swap the two slots."""
        self.selection.switch()
        await self._refresh_after_change()

    async def set_amount(self, value: str) -> None:
        """Set the LP amount to remove and refresh the preview."""
        self.state.amount_input = value
        await self._settle(self.refresher.schedule_quote())

    def can_remove(self) -> bool:
        return can_remove(self.state)

    async def remove(
        self,
        min_first: Optional[Decimal] = None,
        min_second: Optional[Decimal] = None,
    ) -> Optional[RemovalResult]:
        """Submit the removal if it is enabled."""
        return await self.dispatcher.remove(min_first, min_second)

    # ======================
    # Refresh
    # ======================

    async def poll_once(self) -> None:
        """One polling tick: reserves and both slot balances."""
        session = self.session
        jobs = []
        if self.state.pair_selected and session.account:
            jobs.append(self.refresher.refresh_reserves())
        for slot in Slot:
            if self.state.token(slot).address and session.account and not session.wrong_network:
                jobs.append(self.selection.refresh_balance(slot))
        if jobs:
            logger.debug("Checking balances & getting reserves...")
            await asyncio.gather(*jobs)

    async def _refresh_after_change(self) -> None:
        await self._settle(self.refresher.schedule_reserves())
        await self._settle(self.refresher.schedule_quote())

    @staticmethod
    async def _settle(task: asyncio.Task) -> None:
        # A superseded refresh is cancelled by the newer one; that is not an error here.
        await asyncio.wait({task})
