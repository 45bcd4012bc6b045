"""Tests for fee rate limits and the trade gate."""

import pytest

from clmm_quote.config import QuoteConfig
from clmm_quote.constants import ERROR_CODE_TRADE_IS_NOT_ENABLED
from clmm_quote.errors import FeeRateMaxExceeded, ProtocolFeeRateMaxExceeded, TradeNotEnabled
from clmm_quote.fees.validation import (
    check_trade_enabled,
    validate_fee_rate,
    validate_protocol_fee_rate,
)
from tests.helpers import TIMESTAMP, make_oracle, make_pool


class TestFeeRateLimits:
    """Tests for validate_fee_rate and validate_protocol_fee_rate."""

    def test_within_limits(self) -> None:
        """Rates at the maximum are accepted."""
        assert validate_fee_rate(60_000) == 60_000
        assert validate_protocol_fee_rate(2_500) == 2_500

    def test_above_limits(self) -> None:
        """Rates above the maximum are rejected."""
        with pytest.raises(FeeRateMaxExceeded):
            validate_fee_rate(60_001)
        with pytest.raises(ProtocolFeeRateMaxExceeded):
            validate_protocol_fee_rate(2_501)

    def test_configurable(self) -> None:
        """Limits come from the configuration."""
        with pytest.raises(FeeRateMaxExceeded):
            validate_fee_rate(20_000, QuoteConfig(max_fee_rate=10_000))


class TestTradeGate:
    """Tests for check_trade_enabled."""

    def test_no_oracle(self) -> None:
        """Static fee pools are always tradable."""
        check_trade_enabled(None, 0)

    def test_enabled(self) -> None:
        """Trading opens at the enable timestamp."""
        oracle = make_oracle(make_pool(adaptive_fee_enabled=True), trade_enable_timestamp=TIMESTAMP)
        check_trade_enabled(oracle, TIMESTAMP)

    def test_not_yet_enabled(self) -> None:
        """Swaps before the enable timestamp fail with the program's error code."""
        oracle = make_oracle(make_pool(adaptive_fee_enabled=True), trade_enable_timestamp=TIMESTAMP)
        with pytest.raises(TradeNotEnabled) as exc_info:
            check_trade_enabled(oracle, TIMESTAMP - 1)
        assert exc_info.value.code == ERROR_CODE_TRADE_IS_NOT_ENABLED
