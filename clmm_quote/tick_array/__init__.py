"""Tick array addressing and traversal."""

from clmm_quote.tick_array.addressing import (
    TickArrayAddress,
    get_fallback_tick_array_address,
    get_start_tick_index,
    get_tick_array_addresses,
    interpolate_uninitialized_tick_arrays,
    select_fallback_tick_array,
)
from clmm_quote.tick_array.pda import ProgramDerivedAddress, get_oracle_address, get_tick_array_address
from clmm_quote.tick_array.sequence import TickArrayIndex, TickArraySequence

__all__ = [
    # Addresses
    "ProgramDerivedAddress",
    "TickArrayAddress",
    "get_tick_array_address",
    "get_oracle_address",
    "get_start_tick_index",
    "get_tick_array_addresses",
    # Fallback
    "get_fallback_tick_array_address",
    "select_fallback_tick_array",
    "interpolate_uninitialized_tick_arrays",
    # Traversal
    "TickArrayIndex",
    "TickArraySequence",
]
