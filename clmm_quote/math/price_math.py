"""Human-readable price conversions.

Prices are token B per token A adjusted for mint decimals. Decimal is used
with enough precision to round-trip Q64.64 values exactly.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from clmm_quote.constants import Q64
from clmm_quote.math.tick_math import sqrt_price_x64_to_tick_index, tick_index_to_sqrt_price_x64
from clmm_quote.math.tick_utils import get_initializable_tick_index, invert_tick

# 80 digits: a u128 squared plus decimal scaling
DECIMAL_PRICE_CONTEXT = decimal.Context(prec=80)


def sqrt_price_x64_to_price(sqrt_price_x64: int, decimals_a: int, decimals_b: int) -> Decimal:
    """Convert a Q64.64 sqrt price to a decimal price of A in units of B.

    Args:
        sqrt_price_x64: Pool sqrt price
        decimals_a: Decimals of token A
        decimals_b: Decimals of token B

    Returns:
        Price adjusted for mint decimals
    """
    with decimal.localcontext(DECIMAL_PRICE_CONTEXT):
        sqrt_price = Decimal(sqrt_price_x64) / Decimal(Q64)
        return sqrt_price * sqrt_price * Decimal(10) ** (decimals_a - decimals_b)


def price_to_sqrt_price_x64(price: Decimal, decimals_a: int, decimals_b: int) -> int:
    """Convert a decimal price to a Q64.64 sqrt price, rounding down."""
    with decimal.localcontext(DECIMAL_PRICE_CONTEXT):
        raw = Decimal(price) * Decimal(10) ** (decimals_b - decimals_a)
        return int((raw.sqrt() * Decimal(Q64)).to_integral_value(rounding=decimal.ROUND_FLOOR))


def tick_index_to_price(tick_index: int, decimals_a: int, decimals_b: int) -> Decimal:
    """Decimal price at a tick."""
    return sqrt_price_x64_to_price(tick_index_to_sqrt_price_x64(tick_index), decimals_a, decimals_b)


def price_to_tick_index(price: Decimal, decimals_a: int, decimals_b: int) -> int:
    """Tick whose price band contains the decimal price."""
    return sqrt_price_x64_to_tick_index(price_to_sqrt_price_x64(price, decimals_a, decimals_b))


def price_to_initializable_tick_index(
    price: Decimal, decimals_a: int, decimals_b: int, tick_spacing: int
) -> int:
    """Nearest initializable tick to the decimal price."""
    return get_initializable_tick_index(
        price_to_tick_index(price, decimals_a, decimals_b), tick_spacing
    )


def invert_price(price: Decimal, decimals_a: int, decimals_b: int) -> Decimal:
    """Price of B in units of A, snapped to the tick grid."""
    tick = price_to_tick_index(price, decimals_a, decimals_b)
    return tick_index_to_price(invert_tick(tick), decimals_b, decimals_a)


def invert_sqrt_price_x64(sqrt_price_x64: int) -> int:
    """sqrt price of the inverse pair, snapped to the tick grid."""
    tick = sqrt_price_x64_to_tick_index(sqrt_price_x64)
    return tick_index_to_sqrt_price_x64(invert_tick(tick))


__all__ = [
    "DECIMAL_PRICE_CONTEXT",
    "sqrt_price_x64_to_price",
    "price_to_sqrt_price_x64",
    "tick_index_to_price",
    "price_to_tick_index",
    "price_to_initializable_tick_index",
    "invert_price",
    "invert_sqrt_price_x64",
]
