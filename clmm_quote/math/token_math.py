"""Token amount and price movement math for a single liquidity range.

Within a range of constant liquidity L, moving the price from sqrt(P0) to
sqrt(P1) exchanges

    delta_a = L * (sqrt(P1) - sqrt(P0)) / (sqrt(P0) * sqrt(P1))
    delta_b = L * (sqrt(P1) - sqrt(P0))

with prices in Q64.64. Every division picks the rounding that favors the
liquidity providers: amounts paid into the pool round up, amounts paid out
round down, and prices move so that a trader never receives more than the
curve allows.
"""

from __future__ import annotations

from clmm_quote.constants import MAX_SQRT_PRICE_X64, MIN_SQRT_PRICE_X64, Q64_RESOLUTION
from clmm_quote.errors import DivisionByZero, SqrtPriceOutOfBounds
from clmm_quote.math.checked import (
    checked_u64,
    checked_u128,
    checked_u256,
    div_round_up_if,
)


def _ordered(sqrt_price_0: int, sqrt_price_1: int) -> tuple[int, int]:
    if sqrt_price_0 > sqrt_price_1:
        return sqrt_price_1, sqrt_price_0
    return sqrt_price_0, sqrt_price_1


def _check_sqrt_price_bounds(sqrt_price: int) -> int:
    if sqrt_price < MIN_SQRT_PRICE_X64 or sqrt_price > MAX_SQRT_PRICE_X64:
        raise SqrtPriceOutOfBounds(
            f"sqrt price {sqrt_price} outside [{MIN_SQRT_PRICE_X64}, {MAX_SQRT_PRICE_X64}]"
        )
    return sqrt_price


def amount_delta_a_unbounded(
    sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool
) -> int:
    """Token A exchanged between two sqrt prices, without the u64 check.

    Swap steps compare this against the remaining amount to decide whether
    the target price is reachable, where a value above u64 is meaningful.

    Raises:
        Overflow: If the intermediate numerator exceeds u256
    """
    lower, upper = _ordered(sqrt_price_0, sqrt_price_1)
    numerator = checked_u256((liquidity * (upper - lower)) << Q64_RESOLUTION)
    return div_round_up_if(numerator, upper * lower, round_up)


def amount_delta_b_unbounded(
    sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool
) -> int:
    """Token B exchanged between two sqrt prices, without the u64 check."""
    lower, upper = _ordered(sqrt_price_0, sqrt_price_1)
    product = liquidity * (upper - lower)
    result = product >> Q64_RESOLUTION
    if round_up and product & ((1 << Q64_RESOLUTION) - 1):
        result += 1
    return result


def get_amount_delta_a(
    sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool
) -> int:
    """Token A exchanged when the price moves between two sqrt prices.

    Args:
        sqrt_price_0: One end of the move (Q64.64)
        sqrt_price_1: Other end of the move (Q64.64)
        liquidity: Active liquidity over the move
        round_up: Round the division up (amounts owed to the pool)

    Returns:
        Token A amount as u64

    Raises:
        TokenMaxExceeded: If the amount does not fit in u64
        Overflow: If the intermediate numerator exceeds u256
    """
    return checked_u64(
        amount_delta_a_unbounded(sqrt_price_0, sqrt_price_1, liquidity, round_up)
    )


def get_amount_delta_b(
    sqrt_price_0: int, sqrt_price_1: int, liquidity: int, round_up: bool
) -> int:
    """Token B exchanged when the price moves between two sqrt prices.

    Raises:
        TokenMaxExceeded: If the amount does not fit in u64
    """
    return checked_u64(
        amount_delta_b_unbounded(sqrt_price_0, sqrt_price_1, liquidity, round_up)
    )


def next_sqrt_price_from_a_round_up(
    sqrt_price: int, liquidity: int, amount: int, amount_specified_is_input: bool
) -> int:
    """sqrt price after adding (input) or removing (output) token A.

    Computes ceil(L * sqrt(P) / (L +- amount * sqrt(P))) in Q64.64.

    Raises:
        DivisionByZero: If removing amount would drain the range entirely
        SqrtPriceOutOfBounds: If the resulting price is outside the range
    """
    if amount == 0:
        return sqrt_price

    product = sqrt_price * amount
    numerator = checked_u256((liquidity * sqrt_price) << Q64_RESOLUTION)
    liquidity_shifted = liquidity << Q64_RESOLUTION

    if amount_specified_is_input:
        denominator = liquidity_shifted + product
    else:
        if liquidity_shifted <= product:
            raise DivisionByZero(
                f"Output amount {amount} exhausts liquidity {liquidity} at {sqrt_price}"
            )
        denominator = liquidity_shifted - product

    price = checked_u128(div_round_up_if(numerator, denominator, True))
    return _check_sqrt_price_bounds(price)


def next_sqrt_price_from_b_round_down(
    sqrt_price: int, liquidity: int, amount: int, amount_specified_is_input: bool
) -> int:
    """sqrt price after adding (input) or removing (output) token B.

    Computes sqrt(P) +- amount / L in Q64.64; the delta rounds up when
    token B leaves the pool.

    Raises:
        DivisionByZero: If liquidity is zero
        SqrtPriceOutOfBounds: If the resulting price is outside the range
    """
    amount_x64 = amount << Q64_RESOLUTION
    delta = div_round_up_if(amount_x64, liquidity, not amount_specified_is_input)

    if amount_specified_is_input:
        price = sqrt_price + delta
    else:
        price = sqrt_price - delta
        if price < 0:
            raise SqrtPriceOutOfBounds(
                f"Output amount {amount} moves sqrt price {sqrt_price} below zero"
            )
    return _check_sqrt_price_bounds(checked_u128(price))


def get_next_sqrt_price(
    sqrt_price: int,
    liquidity: int,
    amount: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
) -> int:
    """sqrt price after swapping amount in the given direction.

    The specified amount is token A when it is the input of an a->b swap or
    the output of a b->a swap; otherwise it is token B.
    """
    if amount_specified_is_input == a_to_b:
        return next_sqrt_price_from_a_round_up(
            sqrt_price, liquidity, amount, amount_specified_is_input
        )
    return next_sqrt_price_from_b_round_down(
        sqrt_price, liquidity, amount, amount_specified_is_input
    )


def _require_liquidity(liquidity: int) -> None:
    if liquidity == 0:
        raise DivisionByZero("Liquidity is zero")


def lower_sqrt_price_from_token_a(amount: int, liquidity: int, sqrt_price: int) -> int:
    """Lowest sqrt price reached by depositing amount of token A.

    Rounds up so the trader is never credited with a lower price than the
    curve allows.

    Raises:
        DivisionByZero: If liquidity is zero
    """
    _require_liquidity(liquidity)
    return next_sqrt_price_from_a_round_up(sqrt_price, liquidity, amount, True)


def upper_sqrt_price_from_token_a(amount: int, liquidity: int, sqrt_price: int) -> int:
    """Highest sqrt price reached by withdrawing amount of token A.

    Raises:
        DivisionByZero: If liquidity is zero or amount drains the range
    """
    _require_liquidity(liquidity)
    return next_sqrt_price_from_a_round_up(sqrt_price, liquidity, amount, False)


def upper_sqrt_price_from_token_b(amount: int, liquidity: int, sqrt_price: int) -> int:
    """Highest sqrt price reached by depositing amount of token B.

    Rounds down: the price moves up by floor(amount / L).

    Raises:
        DivisionByZero: If liquidity is zero
    """
    _require_liquidity(liquidity)
    return next_sqrt_price_from_b_round_down(sqrt_price, liquidity, amount, True)


def lower_sqrt_price_from_token_b(amount: int, liquidity: int, sqrt_price: int) -> int:
    """Lowest sqrt price reached by withdrawing amount of token B.

    The delta is rounded up before being subtracted, so the resulting price
    is rounded down.

    Raises:
        DivisionByZero: If liquidity is zero
    """
    _require_liquidity(liquidity)
    return next_sqrt_price_from_b_round_down(sqrt_price, liquidity, amount, False)


__all__ = [
    "amount_delta_a_unbounded",
    "amount_delta_b_unbounded",
    "get_amount_delta_a",
    "get_amount_delta_b",
    "next_sqrt_price_from_a_round_up",
    "next_sqrt_price_from_b_round_down",
    "get_next_sqrt_price",
    "lower_sqrt_price_from_token_a",
    "upper_sqrt_price_from_token_a",
    "lower_sqrt_price_from_token_b",
    "upper_sqrt_price_from_token_b",
]
