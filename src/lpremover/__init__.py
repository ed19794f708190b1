"""lpremover - preview and remove Uniswap V2-style liquidity from the command line."""

__version__ = "0.1.0"
