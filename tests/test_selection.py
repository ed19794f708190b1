"""Tests for pair selection."""

import asyncio
from decimal import Decimal

import pytest

from lpremover.models import RemovalQuote, RemoverState, Reserves, Slot
from lpremover.remover.selection import PairSelection
from lpremover.remover.session import SessionState

from conftest import TOKEN_X, TOKEN_Y, TOKEN_Z, WETH, FakeChainClient


async def make_selection(client: FakeChainClient) -> tuple[RemoverState, PairSelection]:
    session = SessionState(client)
    await session.resolve()
    state = RemoverState()
    return state, PairSelection(state, session)


@pytest.mark.parametrize("slot", [Slot.FIRST, Slot.SECOND])
class TestSelectToken:
    """Selection rules, run for both slots."""

    @pytest.mark.asyncio
    async def test_select_new_address(self, client, slot):
        """Exactly one fetch, other slot untouched."""
        state, selection = await make_selection(client)
        other_before = state.token(slot.other)

        changed = await selection.select_token(slot, TOKEN_X)

        assert changed is True
        token = state.token(slot)
        assert token.address == TOKEN_X
        assert token.symbol == "X"
        assert token.balance == Decimal("1000")
        assert token.base_units == 1000 * 10**18
        assert state.token(slot.other) == other_before
        assert client.calls["get_balance_and_symbol"] == 1

    @pytest.mark.asyncio
    async def test_select_none_is_noop(self, client, slot):
        state, selection = await make_selection(client)
        await selection.select_token(slot, TOKEN_X)
        before = (state.first, state.second)

        changed = await selection.select_token(slot, None)

        assert changed is False
        assert (state.first, state.second) == before
        assert client.calls["get_balance_and_symbol"] == 1

    @pytest.mark.asyncio
    async def test_select_other_slot_address_switches(self, client, slot):
        """Full state swaps, reserves reverse, no balance fetch."""
        state, selection = await make_selection(client)
        await selection.select_token(slot, TOKEN_X)
        await selection.select_token(slot.other, TOKEN_Y)
        state.reserves = Reserves(Decimal("100"), Decimal("200"))
        mine, theirs = state.token(slot), state.token(slot.other)
        fetches = client.calls["get_balance_and_symbol"]

        changed = await selection.select_token(slot, TOKEN_Y)

        assert changed is True
        assert state.token(slot) == theirs
        assert state.token(slot.other) == mine
        assert state.reserves == Reserves(Decimal("200"), Decimal("100"))
        assert client.calls["get_balance_and_symbol"] == fetches

    @pytest.mark.asyncio
    async def test_switch_matches_address_case_insensitively(self, client, slot):
        state, selection = await make_selection(client)
        await selection.select_token(slot, TOKEN_X)
        await selection.select_token(slot.other, WETH)

        await selection.select_token(slot, WETH.lower())

        assert state.token(slot).address == WETH
        assert state.token(slot.other).address == TOKEN_X

    @pytest.mark.asyncio
    async def test_failed_fetch_keeps_state(self, client, slot):
        state, selection = await make_selection(client)
        await selection.select_token(slot, TOKEN_X)
        before = state.token(slot)
        client.fail.add("get_balance_and_symbol")

        changed = await selection.select_token(slot, TOKEN_Z)

        assert changed is False
        assert state.token(slot) == before


class TestSwitch:
    """Tests for PairSelection.switch()."""

    @pytest.mark.asyncio
    async def test_switch_reverses_quote(self, client):
        state, selection = await make_selection(client)
        await selection.select_token(Slot.FIRST, TOKEN_X)
        await selection.select_token(Slot.SECOND, TOKEN_Y)
        state.quote = RemovalQuote(Decimal("5"), Decimal("10"), Decimal("20"))

        selection.switch()

        assert state.quote.amount_out_first == Decimal("20")
        assert state.quote.amount_out_second == Decimal("10")
        assert state.first.address == TOKEN_Y


class TestSupersededResponses:
    """Tests for out-of-order balance responses."""

    @pytest.mark.asyncio
    async def test_older_selection_discarded(self, client):
        state, selection = await make_selection(client)
        client.delays["get_balance_and_symbol"] = 0.05

        slow = asyncio.create_task(selection.select_token(Slot.FIRST, TOKEN_X))
        await asyncio.sleep(0.01)
        client.delays.pop("get_balance_and_symbol")
        await selection.select_token(Slot.FIRST, TOKEN_Z)
        assert await slow is False

        assert state.first.address == TOKEN_Z

    @pytest.mark.asyncio
    async def test_refresh_does_not_override_new_selection(self, client):
        state, selection = await make_selection(client)
        await selection.select_token(Slot.FIRST, TOKEN_X)
        client.delays["get_balance_and_symbol"] = 0.05

        refresh = asyncio.create_task(selection.refresh_balance(Slot.FIRST))
        await asyncio.sleep(0.01)
        client.delays.pop("get_balance_and_symbol")
        await selection.select_token(Slot.FIRST, TOKEN_Z)

        assert await refresh is False
        assert state.first.address == TOKEN_Z

    @pytest.mark.asyncio
    async def test_refresh_balance_updates(self, client):
        state, selection = await make_selection(client)
        await selection.select_token(Slot.SECOND, TOKEN_Y)
        client.add_token(TOKEN_Y, "Y", "1500")

        assert await selection.refresh_balance(Slot.SECOND) is True
        assert state.second.balance == Decimal("1500")
