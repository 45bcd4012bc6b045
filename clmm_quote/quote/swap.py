"""Swap quote simulation.

Replays the settlement program's swap loop against a snapshot of the pool
and its tick arrays. The outer loop walks initialized ticks in swap
direction; the inner loop splits each range into steps so an adaptive fee
can be recomputed at every tick group boundary.

Usage:
    params = SwapQuoteParams(pool=pool, amount=1_000_000, a_to_b=True,
                             amount_specified_is_input=True,
                             tick_arrays=tick_arrays, timestamp=now)
    quote = swap_quote_with_params(params, Percentage.from_bps(50))
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

import structlog

from clmm_quote.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from clmm_quote.constants import (
    MAX_SQRT_PRICE_X64,
    MAX_SWAP_TICK_ARRAYS,
    MIN_SQRT_PRICE_X64,
    PROTOCOL_FEE_RATE_MUL_VALUE,
    Q64_RESOLUTION,
    U64_MAX,
)
from clmm_quote.errors import (
    AmountCalcOverflow,
    AmountInAboveMaximum,
    AmountOutBelowMinimum,
    AmountRemainingOverflow,
    InvalidSqrtPriceLimitDirection,
    Overflow,
    SqrtPriceOutOfBounds,
    TickArrayCrossingAboveMax,
    TickArraySequenceInvalid,
    ZeroTradableAmount,
)
from clmm_quote.fees.manager import FeeRateManager
from clmm_quote.fees.validation import check_trade_enabled
from clmm_quote.math.swap_math import compute_swap_step
from clmm_quote.math.tick_math import sqrt_price_x64_to_tick_index, tick_index_to_sqrt_price_x64
from clmm_quote.math.transfer_fee import transfer_fee_excluded_amount, transfer_fee_included_amount
from clmm_quote.models.state import (
    AdaptiveFeeInfo,
    OracleState,
    PoolState,
    TickArrayAccount,
    TransferFee,
)
from clmm_quote.quote.slippage import Percentage, adjust_for_slippage
from clmm_quote.tick_array.addressing import interpolate_uninitialized_tick_arrays
from clmm_quote.tick_array.sequence import TickArraySequence

logger = structlog.get_logger()


def default_sqrt_price_limit(a_to_b: bool) -> int:
    """Furthest price a swap may reach when the caller sets no limit."""
    return MIN_SQRT_PRICE_X64 if a_to_b else MAX_SQRT_PRICE_X64


def default_other_amount_threshold(amount_specified_is_input: bool) -> int:
    """Threshold that accepts any result: no minimum output, no maximum input."""
    return 0 if amount_specified_is_input else U64_MAX


def get_swap_direction(pool: PoolState, token_mint: str, amount_specified_is_input: bool) -> bool | None:
    """Swap direction implied by the token the caller specifies an amount for.

    Args:
        pool: Pool to trade on
        token_mint: Mint of the specified token
        amount_specified_is_input: Whether token_mint is the input token

    Returns:
        True for a->b, False for b->a, None if the mint is not in the pool
    """
    if token_mint == pool.token_mint_a:
        is_token_a = True
    elif token_mint == pool.token_mint_b:
        is_token_a = False
    else:
        return None
    return is_token_a == amount_specified_is_input


def calculate_swap_amounts_from_quote(
    amount: int,
    estimated_amount_in: int,
    estimated_amount_out: int,
    slippage: Percentage,
    amount_specified_is_input: bool,
) -> tuple[int, int]:
    """Instruction amount and other amount threshold for a quote.

    Exact input protects the output (rounded down by slippage); exact output
    protects the input (rounded up by slippage).

    Returns:
        Tuple of (amount, other_amount_threshold)
    """
    if amount_specified_is_input:
        return amount, adjust_for_slippage(estimated_amount_out, slippage, False)
    return amount, adjust_for_slippage(estimated_amount_in, slippage, True)


@dataclass(frozen=True)
class SwapQuoteParams:
    """Inputs of a single-pool swap quote.

    Attributes:
        pool: Pool snapshot
        amount: Specified amount (input or output per amount_specified_is_input)
        a_to_b: Swap direction
        amount_specified_is_input: Whether amount is the input token
        tick_arrays: Tick arrays in swap direction, tick array 0 first
        timestamp: Swap time in seconds, also the adaptive fee clock
        sqrt_price_limit: Price at which the swap stops (default: price bound)
        other_amount_threshold: Minimum output or maximum input (default: none)
        oracle: Adaptive fee oracle, required iff the pool uses adaptive fees
        fallback_tick_array: Address to attach for adverse price moves
        transfer_fee_a: Transfer fee of token A, None if the mint has none
        transfer_fee_b: Transfer fee of token B, None if the mint has none
        config: Quote configuration
    """

    pool: PoolState
    amount: int
    a_to_b: bool
    amount_specified_is_input: bool
    tick_arrays: Sequence[TickArrayAccount]
    timestamp: int
    sqrt_price_limit: int | None = None
    other_amount_threshold: int | None = None
    oracle: OracleState | None = None
    fallback_tick_array: str | None = None
    transfer_fee_a: TransferFee | None = None
    transfer_fee_b: TransferFee | None = None
    config: QuoteConfig = DEFAULT_QUOTE_CONFIG


@dataclass(frozen=True)
class SwapResult:
    """Raw result of the swap loop.

    Attributes:
        amount_a: Token A moved (including fee when A is the input)
        amount_b: Token B moved (including fee when B is the input)
        next_tick_index: Tick after the swap
        next_sqrt_price: sqrt price after the swap
        next_liquidity: Active liquidity after the swap
        total_fee_amount: Fees charged across all steps
        protocol_fee_amount: Protocol share of the fees
        fee_growth_global_input: Fee growth of the input token after the swap
        applied_fee_rate_min: Lowest fee rate used by a step
        applied_fee_rate_max: Highest fee rate used by a step
        next_adaptive_fee_info: Predicted oracle state, None for static fee pools
    """

    amount_a: int
    amount_b: int
    next_tick_index: int
    next_sqrt_price: int
    next_liquidity: int
    total_fee_amount: int
    protocol_fee_amount: int
    fee_growth_global_input: int
    applied_fee_rate_min: int
    applied_fee_rate_max: int
    next_adaptive_fee_info: AdaptiveFeeInfo | None = None


@dataclass(frozen=True)
class SwapQuote:
    """Estimated swap outcome together with the swap instruction inputs.

    Estimated amounts are what the trader sends and receives, so they include
    the input mint's transfer fee and exclude the output mint's. The withheld
    amounts are reported in transfer_fee_in and transfer_fee_out.
    """

    estimated_amount_in: int
    estimated_amount_out: int
    estimated_fee_amount: int
    estimated_end_sqrt_price: int
    estimated_end_tick_index: int
    estimated_fee_rate_min: int
    estimated_fee_rate_max: int
    amount: int
    amount_specified_is_input: bool
    a_to_b: bool
    other_amount_threshold: int
    sqrt_price_limit: int
    tick_array_0: str
    tick_array_1: str
    tick_array_2: str
    pool: str = ""
    input_token_mint: str = ""
    output_token_mint: str = ""
    oracle: str | None = None
    supplemental_tick_arrays: tuple[str, ...] = ()
    next_adaptive_fee_info: AdaptiveFeeInfo | None = None
    transfer_fee_in: int = 0
    transfer_fee_out: int = 0

    @property
    def tick_arrays(self) -> tuple[str, str, str]:
        return self.tick_array_0, self.tick_array_1, self.tick_array_2


def _apply_fees(
    fee_amount: int,
    protocol_fee_rate: int,
    liquidity: int,
    protocol_fee: int,
    fee_growth_global: int,
) -> tuple[int, int]:
    global_fee = fee_amount
    if protocol_fee_rate > 0:
        delta = global_fee * protocol_fee_rate // PROTOCOL_FEE_RATE_MUL_VALUE
        global_fee -= delta
        protocol_fee += delta
    if liquidity > 0:
        fee_growth_global += (global_fee << Q64_RESOLUTION) // liquidity
    return protocol_fee, fee_growth_global


def compute_swap(
    pool: PoolState,
    sequence: TickArraySequence,
    amount: int,
    sqrt_price_limit: int,
    amount_specified_is_input: bool,
    a_to_b: bool,
    timestamp: int,
    adaptive_fee_info: AdaptiveFeeInfo | None,
    config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
) -> SwapResult:
    """Run the swap loop until the amount is used up or the limit is reached.

    Args:
        pool: Pool snapshot
        sequence: Tick arrays in swap direction
        amount: Specified amount
        sqrt_price_limit: Price at which to stop
        amount_specified_is_input: Whether amount is the input token
        a_to_b: Swap direction
        timestamp: Swap time in seconds
        adaptive_fee_info: Oracle state, None for static fee pools
        config: Quote configuration

    Returns:
        SwapResult

    Raises:
        ValueError: If adaptive_fee_info does not match the pool's fee tier
        TickArrayOutOfRange: If the swap runs past the loaded tick arrays
        AmountRemainingOverflow: If a step consumes more than remains
        AmountCalcOverflow: If the calculated amount exceeds u64
    """
    if pool.adaptive_fee_enabled != (adaptive_fee_info is not None):
        raise ValueError(
            "Adaptive fee info must be given if and only if the pool uses an adaptive fee tier"
        )

    amount_remaining = amount
    amount_calculated = 0
    sqrt_price = pool.sqrt_price
    liquidity = pool.liquidity
    tick_index = pool.tick_current_index
    total_fee_amount = 0
    protocol_fee = 0
    fee_growth_global = pool.fee_growth_global_a if a_to_b else pool.fee_growth_global_b
    fee_rate_min: int | None = None
    fee_rate_max: int | None = None

    fee_rate_manager = FeeRateManager.new(
        a_to_b, pool.tick_current_index, timestamp, pool.fee_rate, adaptive_fee_info, config
    )

    while amount_remaining > 0 and sqrt_price != sqrt_price_limit:
        next_tick_index, _ = sequence.find_next_initialized_tick_index(tick_index)
        next_tick_sqrt_price = tick_index_to_sqrt_price_x64(next_tick_index)
        if a_to_b:
            sqrt_price_target = max(sqrt_price_limit, next_tick_sqrt_price)
        else:
            sqrt_price_target = min(sqrt_price_limit, next_tick_sqrt_price)

        # One step per tick group until the range target is reached
        while True:
            fee_rate_manager.update_volatility_accumulator()
            fee_rate = fee_rate_manager.get_total_fee_rate()
            fee_rate_min = fee_rate if fee_rate_min is None else min(fee_rate_min, fee_rate)
            fee_rate_max = fee_rate if fee_rate_max is None else max(fee_rate_max, fee_rate)

            bounded_target, update_skipped = fee_rate_manager.get_bounded_sqrt_price_target(
                sqrt_price_target, liquidity
            )
            step = compute_swap_step(
                amount_remaining,
                fee_rate,
                liquidity,
                sqrt_price,
                bounded_target,
                amount_specified_is_input,
                a_to_b,
            )
            total_fee_amount += step.fee_amount

            if amount_specified_is_input:
                amount_remaining -= step.amount_in + step.fee_amount
                amount_calculated += step.amount_out
            else:
                amount_remaining -= step.amount_out
                amount_calculated += step.amount_in + step.fee_amount

            if amount_remaining < 0:
                raise AmountRemainingOverflow(f"Amount remaining is negative: {amount_remaining}")
            if amount_calculated > U64_MAX:
                raise AmountCalcOverflow(f"Amount calculated exceeds u64: {amount_calculated}")

            protocol_fee, fee_growth_global = _apply_fees(
                step.fee_amount, pool.protocol_fee_rate, liquidity, protocol_fee, fee_growth_global
            )

            if step.next_price == next_tick_sqrt_price:
                tick = sequence.get_tick(next_tick_index)
                if tick.initialized:
                    liquidity = liquidity - tick.liquidity_net if a_to_b else liquidity + tick.liquidity_net
                    if liquidity < 0:
                        raise Overflow(f"Liquidity went negative crossing tick {next_tick_index}")
                tick_index = next_tick_index - 1 if a_to_b else next_tick_index
            else:
                tick_index = sqrt_price_x64_to_tick_index(step.next_price)

            sqrt_price = step.next_price

            if update_skipped:
                fee_rate_manager.advance_tick_group_after_skip(
                    sqrt_price, next_tick_sqrt_price, next_tick_index
                )
            else:
                fee_rate_manager.advance_tick_group()

            if amount_remaining <= 0 or sqrt_price == sqrt_price_target:
                break

    fee_rate_manager.update_major_swap_timestamp(pool.sqrt_price, sqrt_price)

    if a_to_b == amount_specified_is_input:
        amount_a, amount_b = amount - amount_remaining, amount_calculated
    else:
        amount_a, amount_b = amount_calculated, amount - amount_remaining

    logger.debug(
        "swap_computed",
        pool=pool.address,
        a_to_b=a_to_b,
        amount_a=amount_a,
        amount_b=amount_b,
        end_tick_index=tick_index,
        total_fee_amount=total_fee_amount,
    )

    return SwapResult(
        amount_a=amount_a,
        amount_b=amount_b,
        next_tick_index=tick_index,
        next_sqrt_price=sqrt_price,
        next_liquidity=liquidity,
        total_fee_amount=total_fee_amount,
        protocol_fee_amount=protocol_fee,
        fee_growth_global_input=fee_growth_global,
        applied_fee_rate_min=fee_rate_min if fee_rate_min is not None else pool.fee_rate,
        applied_fee_rate_max=fee_rate_max if fee_rate_max is not None else pool.fee_rate,
        next_adaptive_fee_info=fee_rate_manager.get_next_adaptive_fee_info(),
    )


def simulate_swap(params: SwapQuoteParams) -> SwapQuote:
    """Quote a swap without slippage adjustment.

    Validation runs in the settlement program's order: price limit bounds,
    limit direction, zero amount, tick array 0, trade gate. Transfer fees are
    taken off the specified input, or added to the specified output, before
    the swap loop runs.

    Args:
        params: Quote inputs; tick_arrays must all be loaded

    Returns:
        SwapQuote whose other_amount_threshold is the one given in params

    Raises:
        SqrtPriceOutOfBounds: If the price limit is outside the price range
        InvalidSqrtPriceLimitDirection: If the limit is behind the current price
        ZeroTradableAmount: If amount is zero, or zero after the transfer fee
        TickArraySequenceInvalid: If tick array 0 does not hold the current tick
        TradeNotEnabled: If the oracle has not opened trading yet
        InvalidAdaptiveFeeConstants: If the oracle constants do not fit the pool
        AmountOutBelowMinimum: If exact-in output is below the threshold
        AmountInAboveMaximum: If exact-out input is above the threshold
        TickArrayCrossingAboveMax: If the swap needs too many tick arrays
    """
    pool = params.pool
    a_to_b = params.a_to_b
    is_input = params.amount_specified_is_input
    config = params.config

    sqrt_price_limit = params.sqrt_price_limit
    if sqrt_price_limit is None:
        sqrt_price_limit = default_sqrt_price_limit(a_to_b)
    other_amount_threshold = params.other_amount_threshold
    if other_amount_threshold is None:
        other_amount_threshold = default_other_amount_threshold(is_input)
    timestamp = params.timestamp
    if a_to_b:
        transfer_fee_in, transfer_fee_out = params.transfer_fee_a, params.transfer_fee_b
    else:
        transfer_fee_in, transfer_fee_out = params.transfer_fee_b, params.transfer_fee_a

    if sqrt_price_limit > MAX_SQRT_PRICE_X64 or sqrt_price_limit < MIN_SQRT_PRICE_X64:
        raise SqrtPriceOutOfBounds(f"sqrt price limit {sqrt_price_limit} is out of bounds")
    if (a_to_b and sqrt_price_limit >= pool.sqrt_price) or (
        not a_to_b and sqrt_price_limit <= pool.sqrt_price
    ):
        raise InvalidSqrtPriceLimitDirection(
            f"sqrt price limit {sqrt_price_limit} is opposite to the swap direction"
        )
    if params.amount == 0:
        raise ZeroTradableAmount("Swap amount is zero")

    sequence = TickArraySequence(list(params.tick_arrays), pool.tick_spacing, a_to_b)
    if not sequence.is_valid_tick_array0(pool.tick_current_index):
        raise TickArraySequenceInvalid(
            f"Tick array 0 does not contain the pool's current tick {pool.tick_current_index}"
        )

    check_trade_enabled(params.oracle, timestamp)
    adaptive_fee_info = None
    if params.oracle is not None:
        params.oracle.adaptive_fee_constants.validate(pool.tick_spacing)
        adaptive_fee_info = params.oracle.adaptive_fee_info

    # The pool only sees amounts net of the mints' transfer fees
    if is_input:
        swap_amount, _ = transfer_fee_excluded_amount(params.amount, transfer_fee_in)
        if swap_amount == 0:
            raise ZeroTradableAmount("Swap amount is zero after the transfer fee")
    else:
        swap_amount, _ = transfer_fee_included_amount(params.amount, transfer_fee_out)

    result = compute_swap(
        pool,
        sequence,
        swap_amount,
        sqrt_price_limit,
        is_input,
        a_to_b,
        timestamp,
        adaptive_fee_info,
        config,
    )

    if a_to_b:
        swapped_in, swapped_out = result.amount_a, result.amount_b
    else:
        swapped_in, swapped_out = result.amount_b, result.amount_a

    estimated_amount_out, withheld_out = transfer_fee_excluded_amount(swapped_out, transfer_fee_out)
    if is_input and swapped_in == swap_amount:
        # Fully filled: the trader sends exactly the specified amount
        estimated_amount_in, withheld_in = params.amount, params.amount - swap_amount
    else:
        estimated_amount_in, withheld_in = transfer_fee_included_amount(swapped_in, transfer_fee_in)

    if is_input and estimated_amount_out < other_amount_threshold:
        raise AmountOutBelowMinimum(
            f"Quoted output {estimated_amount_out} is below the minimum {other_amount_threshold}"
        )
    if not is_input and estimated_amount_in > other_amount_threshold:
        raise AmountInAboveMaximum(
            f"Quoted input {estimated_amount_in} is above the maximum {other_amount_threshold}"
        )

    touched = sequence.num_touched_arrays()
    if touched > config.max_swap_tick_arrays:
        raise TickArrayCrossingAboveMax(
            f"Swap traverses {touched} tick arrays, at most {config.max_swap_tick_arrays} allowed"
        )
    tick_array_0, tick_array_1, tick_array_2 = sequence.get_touched_arrays(
        MAX_SWAP_TICK_ARRAYS
    )[:MAX_SWAP_TICK_ARRAYS]

    logger.info(
        "swap_quoted",
        pool=pool.address,
        a_to_b=a_to_b,
        amount_specified_is_input=is_input,
        amount=params.amount,
        estimated_amount_in=estimated_amount_in,
        estimated_amount_out=estimated_amount_out,
        touched_tick_arrays=touched,
    )

    return SwapQuote(
        estimated_amount_in=estimated_amount_in,
        estimated_amount_out=estimated_amount_out,
        estimated_fee_amount=result.total_fee_amount,
        estimated_end_sqrt_price=result.next_sqrt_price,
        estimated_end_tick_index=result.next_tick_index,
        estimated_fee_rate_min=result.applied_fee_rate_min,
        estimated_fee_rate_max=result.applied_fee_rate_max,
        amount=params.amount,
        amount_specified_is_input=is_input,
        a_to_b=a_to_b,
        other_amount_threshold=other_amount_threshold,
        sqrt_price_limit=sqrt_price_limit,
        tick_array_0=tick_array_0,
        tick_array_1=tick_array_1,
        tick_array_2=tick_array_2,
        pool=pool.address,
        input_token_mint=pool.token_mint_a if a_to_b else pool.token_mint_b,
        output_token_mint=pool.token_mint_b if a_to_b else pool.token_mint_a,
        oracle=params.oracle.address if params.oracle is not None else None,
        next_adaptive_fee_info=result.next_adaptive_fee_info,
        transfer_fee_in=withheld_in,
        transfer_fee_out=withheld_out,
    )


def swap_quote_with_params(params: SwapQuoteParams, slippage: Percentage) -> SwapQuote:
    """Quote a swap and set its other amount threshold from a slippage tolerance.

    Uninitialized tick arrays are treated as empty. A fallback tick array in
    params replaces tick_array_2 when the swap does not need a third array,
    and otherwise becomes the only supplemental tick array.
    """
    interpolated = interpolate_uninitialized_tick_arrays(params.pool.address, list(params.tick_arrays))
    quote = simulate_swap(replace(params, tick_arrays=interpolated))

    if params.fallback_tick_array is not None:
        if quote.tick_array_2 == quote.tick_array_1:
            quote = replace(quote, tick_array_2=params.fallback_tick_array)
        else:
            quote = replace(quote, supplemental_tick_arrays=(params.fallback_tick_array,))

    amount, other_amount_threshold = calculate_swap_amounts_from_quote(
        quote.amount,
        quote.estimated_amount_in,
        quote.estimated_amount_out,
        slippage,
        quote.amount_specified_is_input,
    )
    return replace(quote, amount=amount, other_amount_threshold=other_amount_threshold)


__all__ = [
    # Parameters and results
    "SwapQuoteParams",
    "SwapResult",
    "SwapQuote",
    # Simulation
    "compute_swap",
    "simulate_swap",
    "swap_quote_with_params",
    # Helpers
    "default_sqrt_price_limit",
    "default_other_amount_threshold",
    "get_swap_direction",
    "calculate_swap_amounts_from_quote",
]
