"""Fixed-point math for concentrated liquidity pools.

This package provides the integer primitives the quote engine is built on:
- Q64.64 sqrt price <-> tick index conversion
- Token amount deltas between two sqrt prices
- Single swap step computation
- Token-2022 transfer fee adjustments
- Decimal price conversion for display and input
"""

from clmm_quote.math.price_math import (
    invert_price,
    invert_sqrt_price_x64,
    price_to_initializable_tick_index,
    price_to_sqrt_price_x64,
    price_to_tick_index,
    sqrt_price_x64_to_price,
    tick_index_to_price,
)
from clmm_quote.math.swap_math import SwapStep, compute_swap_step
from clmm_quote.math.tick_math import sqrt_price_x64_to_tick_index, tick_index_to_sqrt_price_x64
from clmm_quote.math.tick_utils import (
    get_initializable_tick_index,
    get_next_initializable_tick_index,
    get_prev_initializable_tick_index,
    invert_tick,
    is_tick_initializable,
)
from clmm_quote.math.token_math import get_amount_delta_a, get_amount_delta_b, get_next_sqrt_price
from clmm_quote.math.transfer_fee import transfer_fee_excluded_amount, transfer_fee_included_amount

__all__ = [
    # Tick math
    "tick_index_to_sqrt_price_x64",
    "sqrt_price_x64_to_tick_index",
    "get_initializable_tick_index",
    "get_next_initializable_tick_index",
    "get_prev_initializable_tick_index",
    "is_tick_initializable",
    "invert_tick",
    # Token math
    "get_amount_delta_a",
    "get_amount_delta_b",
    "get_next_sqrt_price",
    "SwapStep",
    "compute_swap_step",
    # Transfer fees
    "transfer_fee_excluded_amount",
    "transfer_fee_included_amount",
    # Prices
    "sqrt_price_x64_to_price",
    "price_to_sqrt_price_x64",
    "tick_index_to_price",
    "price_to_tick_index",
    "price_to_initializable_tick_index",
    "invert_price",
    "invert_sqrt_price_x64",
]
