"""Static and adaptive fee rates.

An adaptive fee tier adds a volatility-driven surcharge on top of the
static fee rate. The surcharge grows with the number of tick groups the
price has moved away from a reference and decays over time.
"""

from clmm_quote.fees.adaptive import (
    TickGroupBound,
    compute_adaptive_fee_rate,
    get_core_tick_group_range,
    get_tick_group_index,
    is_major_swap,
    update_major_swap_timestamp,
    update_reference,
    update_volatility_accumulator,
)
from clmm_quote.fees.manager import (
    AdaptiveFeeRateManager,
    FeeRateManager,
    StaticFeeRateManager,
    predict_adaptive_fee_update,
)
from clmm_quote.fees.validation import (
    check_trade_enabled,
    validate_fee_rate,
    validate_protocol_fee_rate,
)

__all__ = [
    # Fee rate managers
    "FeeRateManager",
    "StaticFeeRateManager",
    "AdaptiveFeeRateManager",
    "predict_adaptive_fee_update",
    # Adaptive fee state transitions
    "TickGroupBound",
    "get_tick_group_index",
    "update_reference",
    "update_volatility_accumulator",
    "compute_adaptive_fee_rate",
    "is_major_swap",
    "update_major_swap_timestamp",
    "get_core_tick_group_range",
    # Validation
    "validate_fee_rate",
    "validate_protocol_fee_rate",
    "check_trade_enabled",
]
