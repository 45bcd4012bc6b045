"""Checked integer helpers for fixed-point pool math.

Python integers never overflow, so the widths the settlement program works
with (u64 token amounts, u128 prices and liquidity) are enforced explicitly:

    from clmm_quote.math.checked import checked_u64, div_round_up_if

    amount = checked_u64(div_round_up_if(numerator, denominator, round_up))

Division helpers raise DivisionByZero instead of ZeroDivisionError so that
all numeric failures share the quote error hierarchy.
"""

from __future__ import annotations

from clmm_quote.constants import U64_MAX, U128_MAX, U256_MAX
from clmm_quote.errors import DivisionByZero, Overflow, TokenMaxExceeded


def checked_u64(value: int) -> int:
    """Return value if it fits in u64.

    Raises:
        TokenMaxExceeded: If value is negative or above U64_MAX
    """
    if value < 0 or value > U64_MAX:
        raise TokenMaxExceeded(f"Value {value} does not fit in u64")
    return value


def checked_u128(value: int) -> int:
    """Return value if it fits in u128.

    Raises:
        Overflow: If value is negative or above U128_MAX
    """
    if value < 0 or value > U128_MAX:
        raise Overflow(f"Value {value} does not fit in u128")
    return value


def checked_u256(value: int) -> int:
    """Return value if it fits in u256.

    Raises:
        Overflow: If value is negative or above U256_MAX
    """
    if value < 0 or value > U256_MAX:
        raise Overflow(f"Value {value} does not fit in u256")
    return value


def div_round_up_if(numerator: int, denominator: int, round_up: bool) -> int:
    """Divide non-negative integers, rounding up when requested.

    Raises:
        DivisionByZero: If denominator is zero
    """
    if denominator == 0:
        raise DivisionByZero(f"Division by zero: {numerator} / 0")
    quotient, remainder = divmod(numerator, denominator)
    if round_up and remainder != 0:
        return quotient + 1
    return quotient


def mul_div(a: int, b: int, denominator: int, round_up: bool = False) -> int:
    """Compute a * b / denominator with explicit rounding.

    Raises:
        DivisionByZero: If denominator is zero
    """
    return div_round_up_if(a * b, denominator, round_up)


__all__ = [
    "checked_u64",
    "checked_u128",
    "checked_u256",
    "div_round_up_if",
    "mul_div",
]
