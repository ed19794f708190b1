"""Supported networks for liquidity removal.

Each network exposes a Uniswap V2-compatible router:
- ETH (Uniswap V2)
- BNB (PancakeSwap V2)
- MATIC (QuickSwap)

The first entry of every default token list is the native coin. Its
address is the router's wrapped-native (WETH) contract, which is only
known once the router has been queried.
"""

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True)
class TokenInfo:
    """A token list entry."""

    address: Optional[str]
    symbol: str
    name: str
    decimals: int = 18


@dataclass
class NetworkConfig:
    """Configuration for a supported network."""

    name: str
    symbol: str  # Native coin symbol
    chain_id: int
    dex_name: str
    router_address: str
    explorer_url: str
    tokens: list[TokenInfo] = field(default_factory=list)


# ======================
# Network Configurations
# ======================

NETWORKS: dict[int, NetworkConfig] = {
    # Ethereum - Uniswap V2
    1: NetworkConfig(
        name="Ethereum",
        symbol="ETH",
        chain_id=1,
        dex_name="Uniswap V2",
        router_address="0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D",
        explorer_url="https://etherscan.io",
        tokens=[
            TokenInfo(None, "ETH", "Ether"),
            TokenInfo("0xdAC17F958D2ee523a2206206994597C13D831ec7", "USDT", "Tether USD", 6),
            TokenInfo("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", "USDC", "USD Coin", 6),
            TokenInfo("0x6B175474E89094C44Da98b954EedeAC495271d0F", "DAI", "Dai Stablecoin"),
            TokenInfo("0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599", "WBTC", "Wrapped BTC", 8),
            TokenInfo("0x1f9840a85d5aF5bf1D1762F925BDADdC4201F984", "UNI", "Uniswap"),
        ],
    ),

    # BNB Smart Chain - PancakeSwap
    56: NetworkConfig(
        name="BNB Smart Chain",
        symbol="BNB",
        chain_id=56,
        dex_name="PancakeSwap V2",
        router_address="0x10ED43C718714eb63d5aA57B78B54704E256024E",
        explorer_url="https://bscscan.com",
        tokens=[
            TokenInfo(None, "BNB", "BNB"),
            TokenInfo("0x55d398326f99059fF775485246999027B3197955", "USDT", "Tether USD"),
            TokenInfo("0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d", "USDC", "USD Coin"),
            TokenInfo("0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56", "BUSD", "Binance USD"),
            TokenInfo("0x2170Ed0880ac9A755fd29B2688956BD959F933F8", "ETH", "Ethereum Token"),
            TokenInfo("0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82", "CAKE", "PancakeSwap Token"),
        ],
    ),

    # Polygon - QuickSwap
    137: NetworkConfig(
        name="Polygon",
        symbol="MATIC",
        chain_id=137,
        dex_name="QuickSwap",
        router_address="0xa5E0829CaCEd8fFDD4De3c43696c57F7D7A678ff",
        explorer_url="https://polygonscan.com",
        tokens=[
            TokenInfo(None, "MATIC", "Polygon"),
            TokenInfo("0xc2132D05D31c914a87C6611C10748AEb04B58e8F", "USDT", "Tether USD", 6),
            TokenInfo("0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174", "USDC.e", "Bridged USDC", 6),
            TokenInfo("0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619", "WETH", "Wrapped Ether"),
            TokenInfo("0x1BFD67037B42Cf73acF2047067bd4F2C47D9BfD6", "WBTC", "Wrapped BTC", 8),
        ],
    ),
}


# ======================
# Helper Functions
# ======================

def is_supported(chain_id: Optional[int]) -> bool:
    """Check whether a chain id is supported."""
    return chain_id in NETWORKS


def get_network(chain_id: int) -> Optional[NetworkConfig]:
    """Get network configuration by chain id."""
    return NETWORKS.get(chain_id)


def get_router_address(chain_id: int) -> Optional[str]:
    """Get the V2 router address for a chain."""
    network = get_network(chain_id)
    return network.router_address if network else None


def default_tokens(chain_id: int, weth_address: Optional[str] = None) -> list[TokenInfo]:
    """Get the default token list for a chain.

    Args:
        chain_id: Network chain id
        weth_address: Wrapped-native address reported by the router. Fills
            in the address of the native coin entry.
    """
    network = get_network(chain_id)
    if not network:
        return []

    tokens = []
    for token in network.tokens:
        if token.address is None:
            token = replace(token, address=weth_address)
        tokens.append(token)
    return tokens


def find_token(tokens: list[TokenInfo], address: Optional[str]) -> Optional[TokenInfo]:
    """Look up a token list entry by address (case-insensitive)."""
    if not address:
        return None
    for token in tokens:
        if token.address and token.address.lower() == address.lower():
            return token
    return None
