"""Tick grid helpers.

Only ticks that are multiples of the pool's tick spacing can hold
liquidity ("initializable" ticks). Python's floor division and modulo
already round toward negative infinity for a positive spacing, which is the
grid alignment the pool program uses.
"""

from __future__ import annotations

from clmm_quote.constants import MAX_TICK_INDEX, MIN_TICK_INDEX
from clmm_quote.errors import InvalidTickSpacing


def _check_spacing(tick_spacing: int) -> None:
    if tick_spacing <= 0:
        raise InvalidTickSpacing(f"Tick spacing must be positive, got {tick_spacing}")


def get_initializable_tick_index(
    tick_index: int, tick_spacing: int, round_up: bool | None = None
) -> int:
    """Snap a tick to the spacing grid.

    Args:
        tick_index: Any tick
        tick_spacing: Pool tick spacing
        round_up: True rounds up, False rounds down, None rounds to nearest
            (halfway rounds up)

    Returns:
        An initializable tick index
    """
    _check_spacing(tick_spacing)
    remainder = tick_index % tick_spacing
    result = tick_index - remainder
    if round_up is None:
        should_round_up = remainder > 0 and remainder >= tick_spacing // 2
    else:
        should_round_up = round_up and remainder > 0
    return result + tick_spacing if should_round_up else result


def get_next_initializable_tick_index(tick_index: int, tick_spacing: int) -> int:
    """Smallest initializable tick strictly above tick_index."""
    _check_spacing(tick_spacing)
    return tick_index - tick_index % tick_spacing + tick_spacing


def get_prev_initializable_tick_index(tick_index: int, tick_spacing: int) -> int:
    """Largest initializable tick strictly below tick_index."""
    _check_spacing(tick_spacing)
    remainder = tick_index % tick_spacing
    if remainder == 0:
        return tick_index - tick_spacing
    return tick_index - remainder


def is_tick_initializable(tick_index: int, tick_spacing: int) -> bool:
    """Whether the tick lies on the spacing grid."""
    _check_spacing(tick_spacing)
    return tick_index % tick_spacing == 0


def check_tick_in_bounds(tick_index: int) -> bool:
    """Whether the tick lies within [MIN_TICK_INDEX, MAX_TICK_INDEX]."""
    return MIN_TICK_INDEX <= tick_index <= MAX_TICK_INDEX


def invert_tick(tick_index: int) -> int:
    """Tick of the inverse price (token B priced in token A)."""
    return -tick_index


__all__ = [
    "get_initializable_tick_index",
    "get_next_initializable_tick_index",
    "get_prev_initializable_tick_index",
    "is_tick_initializable",
    "check_tick_in_bounds",
    "invert_tick",
]
