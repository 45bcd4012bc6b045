"""Adaptive fee oracle state transitions.

The adaptive fee grows with the number of tick groups a price moved away
from a reference group. The reference is refreshed whenever enough time
has passed since the last update, carrying over a decayed share of the
accumulated volatility:

    va  = min(volatility_reference + |group_ref - group| * 10_000, max_va)
    fee = ceil(control_factor * (va * tick_group_size)^2 / (100_000 * 10_000^2))

All functions are pure and return new AdaptiveFeeVariables instances.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from clmm_quote.constants import (
    ADAPTIVE_FEE_CONTROL_FACTOR_DENOMINATOR,
    FEE_RATE_HARD_LIMIT,
    MAX_REFERENCE_AGE,
    MAX_TICK_INDEX,
    MIN_TICK_INDEX,
    Q64_RESOLUTION,
    REDUCTION_FACTOR_DENOMINATOR,
    VOLATILITY_ACCUMULATOR_SCALE_FACTOR,
)
from clmm_quote.errors import InvalidTimestamp
from clmm_quote.math.tick_math import tick_index_to_sqrt_price_x64
from clmm_quote.models.enums import ProtocolVersion
from clmm_quote.models.state import AdaptiveFeeConstants, AdaptiveFeeVariables


@dataclass(frozen=True)
class TickGroupBound:
    """Edge of the core tick group range and its sqrt price."""

    tick_group_index: int
    sqrt_price: int


def get_tick_group_index(tick_index: int, tick_group_size: int) -> int:
    """Tick group containing tick_index (floor division)."""
    return tick_index // tick_group_size


def update_reference(
    variables: AdaptiveFeeVariables,
    constants: AdaptiveFeeConstants,
    tick_group_index: int,
    timestamp: int,
    max_reference_age: int = MAX_REFERENCE_AGE,
    protocol_version: ProtocolVersion = ProtocolVersion.V2,
) -> AdaptiveFeeVariables:
    """Refresh the volatility reference at the start of a swap.

    Elapsed time is measured from the later of the last reference update
    and the last major swap:

    - reference older than max_reference_age: reset
    - elapsed < filter_period: keep everything (high frequency trading)
    - elapsed < decay_period: move the reference and decay the volatility
    - otherwise: move the reference and reset the volatility

    Under ProtocolVersion.V1 every reference change also records the
    timestamp as the last major swap.

    Args:
        variables: Oracle variables before the swap
        constants: Fee tier constants
        tick_group_index: Tick group the swap starts in
        timestamp: Swap timestamp in seconds
        max_reference_age: Seconds after which the reference is stale
        protocol_version: Oracle behavior to reproduce

    Returns:
        Updated variables

    Raises:
        InvalidTimestamp: If timestamp precedes the last recorded update
    """
    max_timestamp = max(
        variables.last_reference_update_timestamp, variables.last_major_swap_timestamp
    )
    if timestamp < max_timestamp:
        raise InvalidTimestamp(f"Timestamp {timestamp} is earlier than {max_timestamp}")

    reference_age = timestamp - variables.last_reference_update_timestamp
    elapsed = timestamp - max_timestamp

    if reference_age > max_reference_age:
        volatility_reference = 0
    elif elapsed < constants.filter_period:
        return variables
    elif elapsed < constants.decay_period:
        volatility_reference = (
            variables.volatility_accumulator
            * constants.reduction_factor
            // REDUCTION_FACTOR_DENOMINATOR
        )
    else:
        volatility_reference = 0

    updated = replace(
        variables,
        tick_group_index_reference=tick_group_index,
        volatility_reference=volatility_reference,
        last_reference_update_timestamp=timestamp,
    )
    if protocol_version == ProtocolVersion.V1:
        updated = replace(updated, last_major_swap_timestamp=timestamp)
    return updated


def update_volatility_accumulator(
    variables: AdaptiveFeeVariables,
    constants: AdaptiveFeeConstants,
    tick_group_index: int,
) -> AdaptiveFeeVariables:
    """Set the accumulator from the distance between the reference and tick_group_index."""
    index_delta = abs(variables.tick_group_index_reference - tick_group_index)
    volatility_accumulator = (
        variables.volatility_reference + index_delta * VOLATILITY_ACCUMULATOR_SCALE_FACTOR
    )
    return replace(
        variables,
        volatility_accumulator=min(volatility_accumulator, constants.max_volatility_accumulator),
    )


def compute_adaptive_fee_rate(
    variables: AdaptiveFeeVariables,
    constants: AdaptiveFeeConstants,
    fee_rate_hard_limit: int = FEE_RATE_HARD_LIMIT,
) -> int:
    """Adaptive fee rate component for the current accumulator.

    Returns:
        Fee rate in hundredths of a basis point, at most fee_rate_hard_limit
    """
    crossed = variables.volatility_accumulator * constants.tick_group_size
    dividend = constants.adaptive_fee_control_factor * crossed * crossed
    divisor = (
        ADAPTIVE_FEE_CONTROL_FACTOR_DENOMINATOR
        * VOLATILITY_ACCUMULATOR_SCALE_FACTOR
        * VOLATILITY_ACCUMULATOR_SCALE_FACTOR
    )
    fee_rate = (dividend + divisor - 1) // divisor
    return min(fee_rate, fee_rate_hard_limit)


def is_major_swap(pre_sqrt_price: int, post_sqrt_price: int, major_swap_threshold_ticks: int) -> bool:
    """Whether the price moved by at least major_swap_threshold_ticks."""
    smaller, larger = sorted((pre_sqrt_price, post_sqrt_price))
    factor = tick_index_to_sqrt_price_x64(major_swap_threshold_ticks)
    return larger >= (smaller * factor) >> Q64_RESOLUTION


def update_major_swap_timestamp(
    variables: AdaptiveFeeVariables,
    constants: AdaptiveFeeConstants,
    pre_sqrt_price: int,
    post_sqrt_price: int,
    timestamp: int,
    protocol_version: ProtocolVersion = ProtocolVersion.V2,
) -> AdaptiveFeeVariables:
    """Record timestamp as the last major swap if the swap was large enough.

    ProtocolVersion.V1 records major swaps on reference updates instead, so
    this is a no-op there.
    """
    if protocol_version == ProtocolVersion.V1:
        return variables
    if is_major_swap(pre_sqrt_price, post_sqrt_price, constants.major_swap_threshold_ticks):
        return replace(variables, last_major_swap_timestamp=timestamp)
    return variables


def get_core_tick_group_range(
    variables: AdaptiveFeeVariables, constants: AdaptiveFeeConstants
) -> tuple[TickGroupBound | None, TickGroupBound | None]:
    """Tick groups outside which the accumulator is pinned at its maximum.

    Outside the core range the fee rate no longer changes per tick group,
    so a swap can move through it in a single step. A bound is None when it
    falls outside the tick range.

    Returns:
        Tuple of (lower bound, upper bound)
    """
    # ceil((max_va - volatility_reference) / scale)
    max_delta = -(
        (variables.volatility_reference - constants.max_volatility_accumulator)
        // VOLATILITY_ACCUMULATOR_SCALE_FACTOR
    )
    lower_index = variables.tick_group_index_reference - max_delta
    upper_index = variables.tick_group_index_reference + max_delta

    lower_tick = lower_index * constants.tick_group_size
    upper_tick = upper_index * constants.tick_group_size + constants.tick_group_size

    lower = None
    if lower_tick > MIN_TICK_INDEX:
        lower = TickGroupBound(lower_index, tick_index_to_sqrt_price_x64(lower_tick))
    upper = None
    if upper_tick < MAX_TICK_INDEX:
        upper = TickGroupBound(upper_index, tick_index_to_sqrt_price_x64(upper_tick))
    return lower, upper


__all__ = [
    "TickGroupBound",
    "get_tick_group_index",
    "update_reference",
    "update_volatility_accumulator",
    "compute_adaptive_fee_rate",
    "is_major_swap",
    "update_major_swap_timestamp",
    "get_core_tick_group_range",
]
