"""Tick array selection for swaps.

A swap instruction names the tick arrays it may traverse up front. For a
pool at tick_current_index these are the array containing the search start
and the next arrays in swap direction:

    a->b (price falls):  [ ta2 ][ ta1 ][ ta0 * ]
    b->a (price rises):  [ * ta0 ][ ta1 ][ ta2 ]

An optional fallback array (the neighbor of ta0 on the opposite side)
protects a quote against the price moving across the ta0 boundary between
quoting and execution.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from clmm_quote.constants import MAX_SWAP_TICK_ARRAYS, MAX_TICK_INDEX, MIN_TICK_INDEX, TICK_ARRAY_SIZE
from clmm_quote.errors import InvalidTickSpacing, TickIndexOutOfBounds
from clmm_quote.models.enums import UseFallbackTickArray
from clmm_quote.models.state import ZEROED_TICK, TickArray, TickArrayAccount
from clmm_quote.tick_array.pda import get_tick_array_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class TickArrayAddress:
    """Derived tick array address and the start tick it covers."""

    address: str
    start_tick_index: int


def get_start_tick_index(tick_index: int, tick_spacing: int, offset: int = 0) -> int:
    """Start tick of the array containing tick_index, shifted by offset arrays.

    Args:
        tick_index: Any tick
        tick_spacing: Pool tick spacing
        offset: Number of arrays to move (negative moves down)

    Returns:
        Start tick index, a multiple of tick_spacing * TICK_ARRAY_SIZE

    Raises:
        InvalidTickSpacing: If tick_spacing is not positive
        TickIndexOutOfBounds: If the array lies entirely outside the tick range
    """
    if tick_spacing <= 0:
        raise InvalidTickSpacing(f"Tick spacing must be positive, got {tick_spacing}")
    ticks_in_array = tick_spacing * TICK_ARRAY_SIZE
    start_tick_index = (tick_index // ticks_in_array + offset) * ticks_in_array

    min_start_tick_index = (MIN_TICK_INDEX // ticks_in_array) * ticks_in_array
    if start_tick_index < min_start_tick_index:
        raise TickIndexOutOfBounds(f"Start tick index {start_tick_index} is too small")
    if start_tick_index > MAX_TICK_INDEX:
        raise TickIndexOutOfBounds(f"Start tick index {start_tick_index} is too large")
    return start_tick_index


def get_tick_array_addresses(
    tick_current_index: int,
    tick_spacing: int,
    a_to_b: bool,
    program_id: str,
    pool_address: str,
    max_arrays: int = MAX_SWAP_TICK_ARRAYS,
) -> list[TickArrayAddress]:
    """Tick arrays a swap starting at tick_current_index may traverse.

    An a->b swap searches at or below the current tick, a b->a swap strictly
    above it, so the first array is taken at tick_current_index + shift.
    The list is shorter than max_arrays when the tick range ends first.

    Args:
        tick_current_index: Pool's current tick
        tick_spacing: Pool tick spacing
        a_to_b: Swap direction
        program_id: Pool program id
        pool_address: Pool address
        max_arrays: Maximum number of arrays to return

    Returns:
        Addresses in traversal order
    """
    shift = 0 if a_to_b else tick_spacing
    step = -1 if a_to_b else 1

    addresses: list[TickArrayAddress] = []
    offset = 0
    for _ in range(max_arrays):
        try:
            start_tick_index = get_start_tick_index(tick_current_index + shift, tick_spacing, offset)
        except TickIndexOutOfBounds:
            break
        pda = get_tick_array_address(program_id, pool_address, start_tick_index)
        addresses.append(TickArrayAddress(address=pda.address, start_tick_index=start_tick_index))
        offset += step
    return addresses


def get_fallback_tick_array_address(
    first_start_tick_index: int,
    tick_spacing: int,
    a_to_b: bool,
    program_id: str,
    pool_address: str,
) -> TickArrayAddress | None:
    """Neighbor of the first tick array on the side opposite the swap.

    Returns:
        The fallback address, or None if that array is outside the tick range
    """
    try:
        start_tick_index = get_start_tick_index(
            first_start_tick_index, tick_spacing, 1 if a_to_b else -1
        )
    except TickIndexOutOfBounds:
        return None
    pda = get_tick_array_address(program_id, pool_address, start_tick_index)
    return TickArrayAddress(address=pda.address, start_tick_index=start_tick_index)


def select_fallback_tick_array(
    policy: UseFallbackTickArray,
    tick_current_index: int,
    first_start_tick_index: int,
    tick_spacing: int,
    a_to_b: bool,
    program_id: str,
    pool_address: str,
) -> TickArrayAddress | None:
    """Apply a fallback policy to decide whether a quote carries a fallback array.

    SITUATIONAL only attaches the fallback when the current tick sits in the
    quarter of ta0 nearest to the fallback array, where a small adverse
    price move would put the swap start outside ta0.

    Args:
        policy: Fallback policy
        tick_current_index: Pool's current tick
        first_start_tick_index: Start tick of ta0
        tick_spacing: Pool tick spacing
        a_to_b: Swap direction
        program_id: Pool program id
        pool_address: Pool address

    Returns:
        The fallback address, or None
    """
    if policy == UseFallbackTickArray.NEVER:
        return None

    fallback = get_fallback_tick_array_address(
        first_start_tick_index, tick_spacing, a_to_b, program_id, pool_address
    )
    if fallback is None:
        logger.warning(
            "fallback_tick_array_unavailable",
            pool=pool_address,
            start_tick_index=first_start_tick_index,
            a_to_b=a_to_b,
        )
        return None
    if policy == UseFallbackTickArray.ALWAYS:
        return fallback

    ticks_in_array = tick_spacing * TICK_ARRAY_SIZE
    if a_to_b:
        # Rightmost quarter of ta0
        threshold = first_start_tick_index + ticks_in_array * 3 // 4
        return fallback if tick_current_index >= threshold else None
    # Leftmost quarter of ta0
    threshold = first_start_tick_index + ticks_in_array // 4
    return fallback if tick_current_index <= threshold else None


def build_zeroed_tick_array(pool_address: str, start_tick_index: int) -> TickArray:
    """Tick array with every tick uninitialized."""
    return TickArray(
        start_tick_index=start_tick_index,
        ticks=(ZEROED_TICK,) * TICK_ARRAY_SIZE,
        pool=pool_address,
    )


def interpolate_uninitialized_tick_arrays(
    pool_address: str, tick_arrays: list[TickArrayAccount]
) -> list[TickArrayAccount]:
    """Replace missing tick array data with zeroed arrays.

    Uninitialized arrays hold no liquidity, so a swap can traverse them as
    if every tick were empty.
    """
    return [
        account
        if account.data is not None
        else TickArrayAccount(
            address=account.address,
            start_tick_index=account.start_tick_index,
            data=build_zeroed_tick_array(pool_address, account.start_tick_index),
        )
        for account in tick_arrays
    ]


__all__ = [
    "TickArrayAddress",
    "get_start_tick_index",
    "get_tick_array_addresses",
    "get_fallback_tick_array_address",
    "select_fallback_tick_array",
    "build_zeroed_tick_array",
    "interpolate_uninitialized_tick_arrays",
]
