"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Mints, pools and common values
- factories: Pool, tick array and oracle factory functions
"""

from tests.helpers.constants import (
    POOL_SOL_USDC,
    POOL_SOL_USDC_4,
    POOL_USDC_USDT,
    PROGRAM_ID,
    Q64,
    SOL,
    TIMESTAMP,
    USDC,
    USDT,
)
from tests.helpers.factories import (
    make_adaptive_fee_constants,
    make_oracle,
    make_pool,
    make_tick_array,
    make_tick_arrays,
)

__all__ = [
    # Constants
    "SOL",
    "USDC",
    "USDT",
    "POOL_SOL_USDC",
    "POOL_SOL_USDC_4",
    "POOL_USDC_USDT",
    "PROGRAM_ID",
    "Q64",
    "TIMESTAMP",
    # Factories
    "make_pool",
    "make_tick_array",
    "make_tick_arrays",
    "make_adaptive_fee_constants",
    "make_oracle",
]
