"""Fee configuration checks and the oracle trade gate."""

from __future__ import annotations

from clmm_quote.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from clmm_quote.errors import FeeRateMaxExceeded, ProtocolFeeRateMaxExceeded, TradeNotEnabled
from clmm_quote.models.state import OracleState


def validate_fee_rate(fee_rate: int, config: QuoteConfig = DEFAULT_QUOTE_CONFIG) -> int:
    """Check a base fee rate against config.max_fee_rate.

    Raises:
        FeeRateMaxExceeded: If fee_rate is above the maximum
    """
    if fee_rate > config.max_fee_rate:
        raise FeeRateMaxExceeded(f"Fee rate {fee_rate} exceeds {config.max_fee_rate}")
    return fee_rate


def validate_protocol_fee_rate(
    protocol_fee_rate: int, config: QuoteConfig = DEFAULT_QUOTE_CONFIG
) -> int:
    """Check a protocol fee rate against config.max_protocol_fee_rate.

    Raises:
        ProtocolFeeRateMaxExceeded: If protocol_fee_rate is above the maximum
    """
    if protocol_fee_rate > config.max_protocol_fee_rate:
        raise ProtocolFeeRateMaxExceeded(
            f"Protocol fee rate {protocol_fee_rate} exceeds {config.max_protocol_fee_rate}"
        )
    return protocol_fee_rate


def check_trade_enabled(oracle: OracleState | None, timestamp: int) -> None:
    """Reject swaps before the oracle's trade enable timestamp.

    Raises:
        TradeNotEnabled: If timestamp is before oracle.trade_enable_timestamp
    """
    if oracle is not None and oracle.trade_enable_timestamp > timestamp:
        raise TradeNotEnabled(
            f"Trading starts at {oracle.trade_enable_timestamp}, now is {timestamp}"
        )


__all__ = ["validate_fee_rate", "validate_protocol_fee_rate", "check_trade_enabled"]
