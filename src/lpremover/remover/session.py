"""Session state: active account, network and resolved contract handles."""

import asyncio
import logging
from typing import Optional

from lpremover.chains import TokenInfo, default_tokens, get_router_address, is_supported
from lpremover.client.base import ChainClient
from lpremover.models import Session
from lpremover.tokenlist import fetch_token_list, merge_token_lists

logger = logging.getLogger(__name__)


class SessionState:
    """Owns the chain client and the session resolved through it.

    Passed explicitly to every component that needs the account, the
    contract handles or the client.
    """

    def __init__(
        self,
        client: ChainClient,
        router_address: Optional[str] = None,
        token_list_url: Optional[str] = None,
    ):
        """Initialize session state.

        Args:
            client: Chain client for the current provider/signer
            router_address: Router override for every supported network
            token_list_url: Optional remote token list merged into defaults
        """
        self.client = client
        self.router_address = router_address
        self.token_list_url = token_list_url
        self.session = Session()
        self._generation = 0
        self._lock = asyncio.Lock()
        self._remote_tokens: dict[int, list[TokenInfo]] = {}

    async def resolve(self) -> Session:
        """Resolve account, network and contract handles.

        Any failure while resolving router, WETH or factory leaves every
        handle unset, never a partial session.
        """
        async with self._lock:
            self._generation += 1
            generation = self._generation
            client = self.client

            try:
                account = await client.get_account()
            except Exception as e:
                logger.warning(f"Failed to get account: {e}")
                account = None

            try:
                chain_id = await client.get_network()
            except Exception as e:
                logger.warning(f"Failed to get network: {e}")
                self.session = Session(account=account, wrong_network=True, generation=generation)
                return self.session

            if not is_supported(chain_id):
                logger.warning(f"Wrong network: chain id {chain_id} is not supported")
                self.session = Session(
                    account=account,
                    chain_id=chain_id,
                    wrong_network=True,
                    generation=generation,
                )
                return self.session

            router_address = self.router_address or get_router_address(chain_id)
            try:
                router = await client.get_router(router_address)
                weth = await client.get_weth(await router.weth())
                factory = await client.get_factory(await router.factory())
            except Exception as e:
                logger.warning(f"Failed to resolve contracts on chain {chain_id}: {e}")
                self.session = Session(
                    account=account,
                    chain_id=chain_id,
                    wrong_network=True,
                    generation=generation,
                )
                return self.session

            tokens = default_tokens(chain_id, weth.address)
            if self.token_list_url:
                try:
                    tokens = merge_token_lists(tokens, await self._remote_list(chain_id))
                except Exception as e:
                    logger.warning(f"Ignoring remote token list for chain {chain_id}: {e}")

            self.session = Session(
                account=account,
                chain_id=chain_id,
                router=router,
                factory=factory,
                weth_address=weth.address,
                tokens=tuple(tokens),
                generation=generation,
            )
            logger.info(
                f"Session resolved: chain {chain_id}, router {router.address}, "
                f"factory {factory.address}, account {account or '(none)'}"
            )
            return self.session

    async def _remote_list(self, chain_id: int) -> list[TokenInfo]:
        if chain_id in self._remote_tokens:
            return self._remote_tokens[chain_id]
        tokens = await fetch_token_list(self.token_list_url, chain_id)
        # An empty list may be a failed download; fetch again next time
        if tokens:
            self._remote_tokens[chain_id] = tokens
        return tokens

    async def use_client(self, client: ChainClient) -> bool:
        """Switch to a different client, re-resolving if its identity changed.

        Returns:
            True if the session was re-resolved
        """
        if client is self.client or client.identity == self.client.identity:
            return False
        logger.info("Provider or signer changed - resolving session again")
        self.client = client
        # Handles and account of the previous client must not outlive it
        self.session = Session()
        await self.resolve()
        return True
