"""Tests for session resolution."""

import pytest
from unittest.mock import AsyncMock, patch

from lpremover.chains import TokenInfo, default_tokens
from lpremover.remover.session import SessionState

from conftest import ACCOUNT, FACTORY, ROUTER, WETH, FakeChainClient


class TestSessionResolve:
    """Tests for SessionState.resolve()."""

    @pytest.mark.asyncio
    async def test_supported_network_resolves_handles(self):
        client = FakeChainClient(chain_id=1)
        state = SessionState(client)

        session = await state.resolve()

        assert session.account == ACCOUNT
        assert session.chain_id == 1
        assert session.wrong_network is False
        assert session.router.address == ROUTER
        assert session.factory.address == FACTORY
        assert session.weth_address == WETH
        assert session.is_ready

    @pytest.mark.asyncio
    async def test_default_tokens_use_weth_for_native_coin(self):
        state = SessionState(FakeChainClient(chain_id=1))

        session = await state.resolve()

        assert session.tokens[0].symbol == "ETH"
        assert session.tokens[0].address == WETH
        assert len(session.tokens) > 1

    @pytest.mark.asyncio
    async def test_unsupported_network(self):
        """An unsupported chain id leaves every handle unset."""
        client = FakeChainClient(chain_id=31337)
        state = SessionState(client)

        session = await state.resolve()

        assert session.wrong_network is True
        assert session.chain_id == 31337
        assert session.router is None
        assert session.factory is None
        assert session.weth_address is None
        assert not session.is_ready
        assert client.calls["get_router"] == 0
        assert client.calls["get_weth"] == 0
        assert client.calls["get_factory"] == 0

    @pytest.mark.asyncio
    async def test_failed_step_leaves_no_partial_session(self):
        """Router and WETH resolved but factory failing leaves nothing set."""
        client = FakeChainClient(chain_id=1)
        client.fail.add("get_factory")
        state = SessionState(client)

        session = await state.resolve()

        assert session.wrong_network is True
        assert session.router is None
        assert session.weth_address is None
        assert session.factory is None
        assert not session.is_ready

    @pytest.mark.asyncio
    async def test_network_query_failure(self):
        client = FakeChainClient()
        client.fail.add("get_network")

        session = await SessionState(client).resolve()

        assert session.wrong_network is True
        assert session.chain_id is None

    @pytest.mark.asyncio
    async def test_router_override(self):
        client = FakeChainClient(chain_id=56)
        override = "0x9999999999999999999999999999999999999999"

        session = await SessionState(client, router_address=override).resolve()

        assert session.router.address == override

    @pytest.mark.asyncio
    async def test_generation_increments(self):
        state = SessionState(FakeChainClient())

        first = await state.resolve()
        second = await state.resolve()

        assert second.generation == first.generation + 1

    @pytest.mark.asyncio
    async def test_remote_token_list_merged(self):
        remote = [TokenInfo("0x5555555555555555555555555555555555555555", "NEW", "New Token")]
        state = SessionState(FakeChainClient(), token_list_url="https://example.com/list.json")

        with patch(
            "lpremover.remover.session.fetch_token_list",
            new=AsyncMock(return_value=remote),
        ) as fetch:
            session = await state.resolve()
            await state.resolve()

        assert session.tokens[-1].symbol == "NEW"
        fetch.assert_awaited_once_with("https://example.com/list.json", 1)

    @pytest.mark.asyncio
    async def test_broken_remote_list_falls_back_to_defaults(self):
        state = SessionState(FakeChainClient(), token_list_url="https://example.com/list.json")

        with patch(
            "lpremover.remover.session.fetch_token_list",
            new=AsyncMock(side_effect=AttributeError("'list' object has no attribute 'get'")),
        ):
            session = await state.resolve()

        assert session.is_ready
        assert session.tokens == tuple(default_tokens(1, WETH))

    @pytest.mark.asyncio
    async def test_empty_remote_list_is_fetched_again(self):
        state = SessionState(FakeChainClient(), token_list_url="https://example.com/list.json")

        with patch(
            "lpremover.remover.session.fetch_token_list",
            new=AsyncMock(return_value=[]),
        ) as fetch:
            await state.resolve()
            await state.resolve()

        assert fetch.await_count == 2


class TestUseClient:
    """Tests for switching provider/signer."""

    @pytest.mark.asyncio
    async def test_same_identity_does_not_resolve(self):
        client = FakeChainClient(signer="a")
        state = SessionState(client)
        await state.resolve()

        changed = await state.use_client(FakeChainClient(signer="a"))

        assert changed is False
        assert state.client is client

    @pytest.mark.asyncio
    async def test_new_signer_resolves_again(self):
        state = SessionState(FakeChainClient(signer="a", chain_id=31337))
        session = await state.resolve()
        assert session.wrong_network

        changed = await state.use_client(FakeChainClient(signer="b", chain_id=1))

        assert changed is True
        assert state.session.wrong_network is False
        assert state.session.is_ready

    @pytest.mark.asyncio
    async def test_broken_remote_list_on_new_client(self):
        state = SessionState(FakeChainClient(signer="a"), token_list_url="https://example.com/list.json")
        with patch(
            "lpremover.remover.session.fetch_token_list",
            new=AsyncMock(return_value=[]),
        ):
            await state.resolve()

        new_account = "0x6666666666666666666666666666666666666666"
        with patch(
            "lpremover.remover.session.fetch_token_list",
            new=AsyncMock(side_effect=AttributeError("'list' object has no attribute 'get'")),
        ) as fetch:
            changed = await state.use_client(FakeChainClient(account=new_account, signer="b"))

        fetch.assert_awaited_once()
        assert changed is True
        assert state.session.account == new_account
        assert state.session.generation == 2
        assert state.session.is_ready

    @pytest.mark.asyncio
    async def test_failed_resolve_leaves_no_usable_session(self):
        state = SessionState(FakeChainClient(signer="a"))
        await state.resolve()
        assert state.session.is_ready

        with patch.object(state, "resolve", new=AsyncMock(side_effect=RuntimeError("boom"))):
            with pytest.raises(RuntimeError):
                await state.use_client(FakeChainClient(signer="b"))

        assert state.session.is_ready is False
        assert state.session.account is None
        assert state.session.router is None
