"""Pair selection: two token slots with symmetric selection rules."""

import logging
from typing import Optional

from lpremover.models import RemoverState, Slot, Token, same_address
from lpremover.remover.session import SessionState

logger = logging.getLogger(__name__)


class PairSelection:
    """Selects tokens into the first and second slot.

    Rules are identical for both slots:
    - selecting the address held by the other slot swaps the slots
    - selecting any other address fetches its symbol and balance
    - selecting nothing changes nothing

    Every change to a slot bumps that slot's request counter; a balance
    response is applied only if the counter is unchanged when it arrives.
    """

    def __init__(self, state: RemoverState, session: SessionState):
        self.state = state
        self.session = session
        self._requests = {Slot.FIRST: 0, Slot.SECOND: 0}

    def switch(self) -> None:
        """Swap both slots, including reserves and the last quote."""
        state = self.state
        state.first, state.second = state.second, state.first
        state.reserves = state.reserves.reversed()
        if state.quote is not None:
            state.quote = state.quote.reversed()
        self._requests[Slot.FIRST] += 1
        self._requests[Slot.SECOND] += 1
        logger.debug(f"Switched slots: {state.first.symbol} / {state.second.symbol}")

    async def select_token(self, slot: Slot, address: Optional[str]) -> bool:
        """Select a token into a slot.

        Returns:
            True if the selection changed
        """
        if not address:
            return False

        if same_address(address, self.state.token(slot.other).address):
            self.switch()
            return True

        self._requests[slot] += 1
        request = self._requests[slot]

        token = await self._fetch(address)
        if token is None:
            return False
        if request != self._requests[slot]:
            logger.debug(f"Discarding superseded selection of {address}")
            return False

        self.state.set_token(slot, token)
        return True

    async def refresh_balance(self, slot: Slot) -> bool:
        """Re-fetch symbol and balance for the token already in a slot."""
        address = self.state.token(slot).address
        if not address:
            return False

        request = self._requests[slot]
        token = await self._fetch(address)
        if token is None or request != self._requests[slot]:
            return False

        self.state.set_token(slot, token)
        return True

    async def _fetch(self, address: str) -> Optional[Token]:
        """Fetch token data for the session account. None on failure."""
        session = self.session.session
        if not session.account:
            logger.warning(f"Cannot load {address}: no account connected")
            return None

        try:
            data = await self.session.client.get_balance_and_symbol(
                session.account,
                address,
                session.weth_address,
                session.tokens,
            )
        except Exception as e:
            logger.warning(f"Failed to load balance for {address}: {e}")
            return None

        return Token(
            address=address,
            symbol=data.symbol,
            balance=data.balance,
            base_units=data.base_units,
        )
