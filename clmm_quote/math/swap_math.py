"""Single swap step within one constant-liquidity range."""

from __future__ import annotations

from dataclasses import dataclass

from clmm_quote.constants import FEE_RATE_MUL_VALUE
from clmm_quote.math.checked import checked_u64, mul_div
from clmm_quote.math.token_math import (
    amount_delta_a_unbounded,
    amount_delta_b_unbounded,
    get_amount_delta_a,
    get_amount_delta_b,
    get_next_sqrt_price,
)


@dataclass(frozen=True)
class SwapStep:
    """Result of swapping toward a target price within one range.

    Attributes:
        amount_in: Input consumed, excluding fee
        amount_out: Output produced
        next_price: sqrt price reached (Q64.64)
        fee_amount: Fee charged on the input
    """

    amount_in: int
    amount_out: int
    next_price: int
    fee_amount: int


def _amount_fixed_delta(
    sqrt_price_current: int,
    sqrt_price_target: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> int:
    if a_to_b == amount_specified_is_input:
        return amount_delta_a_unbounded(
            sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input
        )
    return amount_delta_b_unbounded(
        sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input
    )


def _amount_unfixed_delta(
    sqrt_price_current: int,
    sqrt_price_target: int,
    liquidity: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> int:
    if a_to_b == amount_specified_is_input:
        return get_amount_delta_b(
            sqrt_price_current, sqrt_price_target, liquidity, not amount_specified_is_input
        )
    return get_amount_delta_a(
        sqrt_price_current, sqrt_price_target, liquidity, not amount_specified_is_input
    )


def compute_swap_step(
    amount_remaining: int,
    fee_rate: int,
    liquidity: int,
    sqrt_price_current: int,
    sqrt_price_target: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> SwapStep:
    """Swap as much of amount_remaining as the range allows toward a target.

    The "fixed" side is the token whose amount was specified by the caller
    and the "unfixed" side is derived from the price movement. For exact
    input, the fee is deducted before moving the price; if the target is
    not reached the whole remainder is consumed and the leftover becomes
    the fee.

    Args:
        amount_remaining: Specified amount still to swap
        fee_rate: Fee rate in hundredths of a basis point
        liquidity: Active liquidity in the range
        sqrt_price_current: Starting sqrt price (Q64.64)
        sqrt_price_target: Furthest sqrt price this step may reach
        amount_specified_is_input: Whether amount_remaining is the input token
        a_to_b: Swap direction

    Returns:
        SwapStep with the amounts, fee and price reached

    Raises:
        TokenMaxExceeded: If an amount does not fit in u64
    """
    amount_fixed_delta = _amount_fixed_delta(
        sqrt_price_current, sqrt_price_target, liquidity, amount_specified_is_input, a_to_b
    )

    amount_calc = amount_remaining
    if amount_specified_is_input:
        amount_calc = checked_u64(
            mul_div(amount_remaining, FEE_RATE_MUL_VALUE - fee_rate, FEE_RATE_MUL_VALUE)
        )

    if amount_calc >= amount_fixed_delta:
        next_sqrt_price = sqrt_price_target
    else:
        next_sqrt_price = get_next_sqrt_price(
            sqrt_price_current, liquidity, amount_calc, amount_specified_is_input, a_to_b
        )

    is_max_swap = next_sqrt_price == sqrt_price_target

    amount_unfixed_delta = _amount_unfixed_delta(
        sqrt_price_current, next_sqrt_price, liquidity, amount_specified_is_input, a_to_b
    )

    if not is_max_swap:
        amount_fixed_delta = _amount_fixed_delta(
            sqrt_price_current, next_sqrt_price, liquidity, amount_specified_is_input, a_to_b
        )
    amount_fixed_delta = checked_u64(amount_fixed_delta)

    if amount_specified_is_input:
        amount_in, amount_out = amount_fixed_delta, amount_unfixed_delta
    else:
        amount_in, amount_out = amount_unfixed_delta, amount_fixed_delta

    # Exact output may round one unit past the request
    if not amount_specified_is_input and amount_out > amount_remaining:
        amount_out = amount_remaining

    if amount_specified_is_input and not is_max_swap:
        fee_amount = amount_remaining - amount_in
    else:
        fee_amount = checked_u64(
            mul_div(amount_in, fee_rate, FEE_RATE_MUL_VALUE - fee_rate, round_up=True)
        )

    return SwapStep(
        amount_in=amount_in,
        amount_out=amount_out,
        next_price=next_sqrt_price,
        fee_amount=fee_amount,
    )


__all__ = ["SwapStep", "compute_swap_step"]
