"""Error classes for quoting and routing.

Arithmetic errors also derive from ArithmeticError so callers that only
care about numeric failure can catch them generically. Errors that mirror a
settlement program failure carry its numeric code in ``code``.
"""

from __future__ import annotations

from clmm_quote.constants import (
    ERROR_CODE_INTERMEDIATE_TOKEN_AMOUNT_MISMATCH,
    ERROR_CODE_TRADE_IS_NOT_ENABLED,
)


class QuoteError(Exception):
    """Base error for quote computation."""

    code: int | None = None


# --- Arithmetic ---


class MathError(QuoteError, ArithmeticError):
    """Base class for fixed-point arithmetic errors."""

    pass


class Overflow(MathError):
    """Intermediate or final value exceeds its integer width."""

    pass


class TokenMaxExceeded(Overflow):
    """Token amount does not fit in u64."""

    pass


class DivisionByZero(MathError):
    """Division by zero, usually zero liquidity."""

    pass


# --- Input ranges ---


class SqrtPriceOutOfBounds(QuoteError):
    """sqrt price is outside [MIN_SQRT_PRICE_X64, MAX_SQRT_PRICE_X64]."""

    pass


class TickIndexOutOfBounds(QuoteError):
    """Tick index is outside the supported tick range."""

    pass


class InvalidTickSpacing(QuoteError):
    """Tick spacing must be positive."""

    pass


class FeeRateMaxExceeded(QuoteError):
    """Fee rate exceeds the configured maximum."""

    pass


class ProtocolFeeRateMaxExceeded(QuoteError):
    """Protocol fee rate exceeds the configured maximum."""

    pass


class InvalidAdaptiveFeeConstants(QuoteError):
    """Adaptive fee constants violate the fee tier rules."""

    pass


class InvalidTimestamp(QuoteError):
    """Timestamp is earlier than the oracle's last update."""

    pass


# --- Swap ---


class SwapError(QuoteError):
    """Base error for swap simulation."""

    pass


class InvalidSqrtPriceLimitDirection(SwapError):
    """sqrt price limit is on the wrong side of the current price."""

    pass


class ZeroTradableAmount(SwapError):
    """Swap amount is zero."""

    pass


class TradeNotEnabled(SwapError):
    """Pool does not accept trades before its trade enable timestamp."""

    code = ERROR_CODE_TRADE_IS_NOT_ENABLED


class TickArrayOutOfRange(SwapError):
    """Swap traversed past the loaded tick arrays."""

    pass


class TickArraySequenceInvalid(SwapError):
    """Tick array 0 does not contain the pool's current tick."""

    pass


class TickArrayCrossingAboveMax(SwapError):
    """Swap touches more tick arrays than one instruction accepts."""

    pass


class AmountRemainingOverflow(SwapError):
    """Remaining amount went negative during simulation."""

    pass


class AmountCalcOverflow(SwapError):
    """Calculated amount exceeds u64."""

    pass


class SlippageExceeded(SwapError):
    """Quoted amount violates the other amount threshold."""

    pass


class AmountOutBelowMinimum(SlippageExceeded):
    """Exact-in output is below the minimum accepted."""

    pass


class AmountInAboveMaximum(SlippageExceeded):
    """Exact-out input is above the maximum accepted."""

    pass


# --- Two-hop ---


class TwoHopError(QuoteError):
    """Base error for two-hop quote composition."""

    pass


class DuplicateTwoHopPool(TwoHopError):
    """Both hops use the same pool."""

    pass


class InvalidIntermediaryMint(TwoHopError):
    """Output mint of hop one is not the input mint of hop two."""

    pass


class IntermediateTokenAmountMismatch(TwoHopError):
    """Intermediate amount differs between the two hops."""

    code = ERROR_CODE_INTERMEDIATE_TOKEN_AMOUNT_MISMATCH


class AmountSpecifiedMismatch(TwoHopError):
    """Hops disagree on whether the amount is an input or output."""

    pass


__all__ = [
    "QuoteError",
    # Arithmetic
    "MathError",
    "Overflow",
    "TokenMaxExceeded",
    "DivisionByZero",
    # Input ranges
    "SqrtPriceOutOfBounds",
    "TickIndexOutOfBounds",
    "InvalidTickSpacing",
    "FeeRateMaxExceeded",
    "ProtocolFeeRateMaxExceeded",
    "InvalidAdaptiveFeeConstants",
    "InvalidTimestamp",
    # Swap
    "SwapError",
    "InvalidSqrtPriceLimitDirection",
    "ZeroTradableAmount",
    "TradeNotEnabled",
    "TickArrayOutOfRange",
    "TickArraySequenceInvalid",
    "TickArrayCrossingAboveMax",
    "AmountRemainingOverflow",
    "AmountCalcOverflow",
    "SlippageExceeded",
    "AmountOutBelowMinimum",
    "AmountInAboveMaximum",
    # Two-hop
    "TwoHopError",
    "DuplicateTwoHopPool",
    "InvalidIntermediaryMint",
    "IntermediateTokenAmountMismatch",
    "AmountSpecifiedMismatch",
]
