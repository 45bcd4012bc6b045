"""Account snapshot models."""

from clmm_quote.models.enums import ProtocolVersion, SwapVariant, UseFallbackTickArray
from clmm_quote.models.state import (
    ZEROED_TICK,
    AdaptiveFeeConstants,
    AdaptiveFeeInfo,
    AdaptiveFeeVariables,
    OracleState,
    PoolState,
    Tick,
    TickArray,
    TickArrayAccount,
    TransferFee,
)

__all__ = [
    # Enums
    "ProtocolVersion",
    "SwapVariant",
    "UseFallbackTickArray",
    # Pool accounts
    "PoolState",
    "Tick",
    "ZEROED_TICK",
    "TickArray",
    "TickArrayAccount",
    # Oracle
    "AdaptiveFeeConstants",
    "AdaptiveFeeVariables",
    "AdaptiveFeeInfo",
    "OracleState",
    # Mints
    "TransferFee",
]
