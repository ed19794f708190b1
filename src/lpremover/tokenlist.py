"""Remote token lists.

Parses the Uniswap token-list JSON format
(https://tokenlists.org) and merges entries into a network's defaults.
"""

import logging
from typing import Optional

import httpx

from lpremover.chains import TokenInfo

logger = logging.getLogger(__name__)


def parse_token_list(data, chain_id: int) -> list[TokenInfo]:
    """Extract the entries for one chain from a token-list document.

    Anything that is not a token-list object yields no tokens; entries that
    are not objects are skipped.
    """
    if not isinstance(data, dict) or not isinstance(data.get("tokens"), list):
        logger.warning("Token list document has no \"tokens\" array")
        return []

    tokens = []
    for entry in data["tokens"]:
        if not isinstance(entry, dict) or entry.get("chainId") != chain_id:
            continue
        if not isinstance(entry.get("address"), str) or not isinstance(entry.get("symbol"), str):
            logger.debug(f"Skipping token list entry without address or symbol: {entry!r}")
            continue
        try:
            tokens.append(
                TokenInfo(
                    address=entry["address"],
                    symbol=entry["symbol"],
                    name=entry.get("name", entry["symbol"]),
                    decimals=int(entry.get("decimals", 18)),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Skipping malformed token list entry {entry!r}: {e}")
    return tokens


def merge_token_lists(defaults: list[TokenInfo], extra: list[TokenInfo]) -> list[TokenInfo]:
    """Append extra tokens whose address is not already listed."""
    seen = {t.address.lower() for t in defaults if t.address}
    merged = list(defaults)
    for token in extra:
        if token.address and token.address.lower() not in seen:
            seen.add(token.address.lower())
            merged.append(token)
    return merged


async def fetch_token_list(
    url: str,
    chain_id: int,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 15.0,
) -> list[TokenInfo]:
    """Download a token list and return the entries for chain_id.

    Returns an empty list when the download or decoding fails.
    """
    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with httpx.AsyncClient(timeout=timeout) as http:
                response = await http.get(url)

        response.raise_for_status()
        tokens = parse_token_list(response.json(), chain_id)
        logger.info(f"Loaded {len(tokens)} tokens for chain {chain_id} from {url}")
        return tokens

    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to load token list from {url}: {e}")
        return []
