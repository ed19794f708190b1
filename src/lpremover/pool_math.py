"""Constant-product pool arithmetic for liquidity removal.

Amounts are integers in base units, rounded the way the V2 pair contract
rounds them. Decimal conversion happens at the edges.
"""

from decimal import ROUND_DOWN, Decimal, localcontext
from math import isqrt

LP_TOKEN_DECIMALS = 18

# Enough significant digits for any uint256 (2**256 has 78 digits)
UINT256_PRECISION = 78


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Convert a decimal amount to base units, truncating extra precision."""
    with localcontext() as ctx:
        ctx.prec = UINT256_PRECISION
        scaled = Decimal(amount).scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_base_units(amount: int, decimals: int) -> Decimal:
    """Convert base units to a decimal amount without losing digits."""
    with localcontext() as ctx:
        ctx.prec = UINT256_PRECISION
        return Decimal(amount) / (Decimal(10) ** decimals)


def apply_slippage(amount: Decimal, slippage: Decimal) -> Decimal:
    """Minimum acceptable output: amount reduced by the slippage fraction."""
    with localcontext() as ctx:
        ctx.prec = UINT256_PRECISION
        ctx.rounding = ROUND_DOWN
        return amount * (Decimal("1") - slippage)


def protocol_fee_liquidity(
    reserve_a: int,
    reserve_b: int,
    total_supply: int,
    k_last: int,
) -> int:
    """Liquidity minted to the fee recipient before a burn.

    Mirrors the pair's _mintFee: nothing is minted unless the pool's root-k
    has grown since kLast was recorded.
    """
    if k_last == 0:
        return 0
    root_k = isqrt(reserve_a * reserve_b)
    root_k_last = isqrt(k_last)
    if root_k <= root_k_last:
        return 0
    numerator = total_supply * (root_k - root_k_last)
    denominator = root_k * 5 + root_k_last
    return numerator // denominator


def quote_removal(
    reserve_a: int,
    reserve_b: int,
    total_supply: int,
    liquidity: int,
    k_last: int = 0,
    fee_on: bool = False,
) -> tuple[int, int]:
    """Amounts of each token returned for burning `liquidity`.

    Args:
        reserve_a: Pool reserve of the first token (base units)
        reserve_b: Pool reserve of the second token (base units)
        total_supply: LP token total supply (base units)
        liquidity: LP tokens to burn (base units)
        k_last: Pair's kLast value
        fee_on: Whether the factory has a fee recipient set

    Returns:
        (amount_a, amount_b) in base units
    """
    if fee_on:
        total_supply += protocol_fee_liquidity(reserve_a, reserve_b, total_supply, k_last)
    if total_supply == 0:
        return 0, 0
    amount_a = liquidity * reserve_a // total_supply
    amount_b = liquidity * reserve_b // total_supply
    return amount_a, amount_b
