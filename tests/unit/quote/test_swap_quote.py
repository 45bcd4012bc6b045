"""Tests for single-pool swap quotes.

The default pool sits at tick 0 (sqrt price 2^64) with 10^12 liquidity and
a 0.3% fee, so small swaps stay within one price range:
1000 in -> 997 swapped + 3 fee -> 996 out.
"""

import pytest

from clmm_quote.config import QuoteConfig
from clmm_quote.constants import MAX_SQRT_PRICE_X64, MIN_SQRT_PRICE_X64, U64_MAX
from clmm_quote.errors import (
    AmountInAboveMaximum,
    AmountOutBelowMinimum,
    InvalidAdaptiveFeeConstants,
    InvalidSqrtPriceLimitDirection,
    SqrtPriceOutOfBounds,
    TickArrayCrossingAboveMax,
    TickArrayOutOfRange,
    TickArraySequenceInvalid,
    TradeNotEnabled,
    ZeroTradableAmount,
)
from clmm_quote.math.tick_math import tick_index_to_sqrt_price_x64
from clmm_quote.models.state import OracleState, PoolState, TickArrayAccount, TransferFee
from clmm_quote.quote.slippage import Percentage
from clmm_quote.quote.swap import (
    SwapQuoteParams,
    calculate_swap_amounts_from_quote,
    compute_swap,
    default_other_amount_threshold,
    default_sqrt_price_limit,
    get_swap_direction,
    simulate_swap,
    swap_quote_with_params,
)
from clmm_quote.tick_array.sequence import TickArraySequence
from tests.helpers import (
    SOL,
    TIMESTAMP,
    USDC,
    USDT,
    make_adaptive_fee_constants,
    make_oracle,
    make_pool,
    make_tick_arrays,
)


def make_params(
    pool: PoolState,
    tick_arrays: list[TickArrayAccount],
    amount: int = 1000,
    a_to_b: bool = True,
    amount_specified_is_input: bool = True,
    timestamp: int = TIMESTAMP,
    **kwargs: object,
) -> SwapQuoteParams:
    """Quote parameters, by default at the shared test timestamp."""
    return SwapQuoteParams(
        pool=pool,
        amount=amount,
        a_to_b=a_to_b,
        amount_specified_is_input=amount_specified_is_input,
        tick_arrays=tick_arrays,
        timestamp=timestamp,
        **kwargs,  # type: ignore[arg-type]
    )


class TestSwapDirection:
    """Tests for get_swap_direction."""

    def test_direction_from_mint(self) -> None:
        """Selling A or buying B is a->b."""
        pool = make_pool()
        assert get_swap_direction(pool, SOL, True) is True
        assert get_swap_direction(pool, USDC, True) is False
        assert get_swap_direction(pool, SOL, False) is False
        assert get_swap_direction(pool, USDC, False) is True

    def test_unknown_mint(self) -> None:
        """Mints outside the pool have no direction."""
        assert get_swap_direction(make_pool(), USDT, True) is None


class TestSwapDefaults:
    """Tests for default limits and thresholds."""

    def test_default_sqrt_price_limit(self) -> None:
        """Without a limit the swap may run to the price bound."""
        assert default_sqrt_price_limit(True) == MIN_SQRT_PRICE_X64
        assert default_sqrt_price_limit(False) == MAX_SQRT_PRICE_X64

    def test_default_other_amount_threshold(self) -> None:
        """Without a threshold any result is accepted."""
        assert default_other_amount_threshold(True) == 0
        assert default_other_amount_threshold(False) == U64_MAX

    def test_calculate_swap_amounts(self) -> None:
        """Slippage bounds the unspecified side."""
        slippage = Percentage.from_bps(100)
        assert calculate_swap_amounts_from_quote(1000, 1000, 996, slippage, True) == (1000, 986)
        assert calculate_swap_amounts_from_quote(996, 1000, 996, slippage, False) == (996, 1010)


class TestSimulateSwap:
    """Tests for simulate_swap on a static fee pool."""

    def test_exact_in_a_to_b(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Exact input spends the whole amount including the fee."""
        quote = simulate_swap(make_params(pool, tick_arrays_a_to_b))

        assert quote.estimated_amount_in == 1000
        assert quote.estimated_amount_out == 996
        assert quote.estimated_fee_amount == 3
        assert quote.estimated_end_tick_index == -1
        assert quote.estimated_end_sqrt_price < pool.sqrt_price
        assert quote.estimated_fee_rate_min == quote.estimated_fee_rate_max == 3000
        assert quote.input_token_mint == SOL
        assert quote.output_token_mint == USDC
        assert quote.other_amount_threshold == 0
        assert quote.sqrt_price_limit == MIN_SQRT_PRICE_X64

    def test_exact_in_b_to_a(
        self, pool: PoolState, tick_arrays_b_to_a: list[TickArrayAccount]
    ) -> None:
        """b->a raises the price."""
        quote = simulate_swap(make_params(pool, tick_arrays_b_to_a, a_to_b=False))

        assert quote.estimated_amount_in == 1000
        assert quote.estimated_amount_out == 996
        assert quote.estimated_end_tick_index == 0
        assert quote.estimated_end_sqrt_price > pool.sqrt_price
        assert quote.input_token_mint == USDC

    def test_exact_out(self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]) -> None:
        """Exact output delivers exactly the amount and charges the fee on top."""
        quote = simulate_swap(
            make_params(pool, tick_arrays_a_to_b, amount=996, amount_specified_is_input=False)
        )

        assert quote.estimated_amount_out == 996
        assert quote.estimated_amount_in == 1000
        assert quote.estimated_fee_amount == 3

    def test_touched_tick_arrays(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Searching for the next initialized tick touches every empty array."""
        quote = simulate_swap(make_params(pool, tick_arrays_a_to_b))
        assert quote.tick_arrays == tuple(ta.address for ta in tick_arrays_a_to_b)

    def test_single_tick_array_padded(
        self, pool: PoolState, tick_arrays_b_to_a: list[TickArrayAccount]
    ) -> None:
        """A swap within one array repeats it in the remaining slots."""
        quote = simulate_swap(make_params(pool, tick_arrays_b_to_a[:1], a_to_b=False))
        ta0 = tick_arrays_b_to_a[0].address
        assert quote.tick_arrays == (ta0, ta0, ta0)

    def test_price_limit_stops_swap(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """The swap ends at the limit with input left over."""
        limit = tick_index_to_sqrt_price_x64(-128)
        quote = simulate_swap(
            make_params(pool, tick_arrays_a_to_b, amount=10**12, sqrt_price_limit=limit)
        )

        assert quote.estimated_end_sqrt_price == limit
        assert quote.estimated_end_tick_index == -128
        assert quote.estimated_amount_in < 10**12

    def test_runs_out_of_tick_arrays(self, tick_arrays_a_to_b: list[TickArrayAccount]) -> None:
        """A swap larger than the loaded arrays can absorb fails."""
        pool = make_pool(liquidity=10**9)
        with pytest.raises(TickArrayOutOfRange):
            simulate_swap(make_params(pool, tick_arrays_a_to_b, amount=10**10))

    def test_stops_at_uninitialized_array(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Without interpolation a missing array ends the sequence."""
        missing = TickArrayAccount(tick_arrays_a_to_b[1].address, -5632)
        with pytest.raises(TickArrayOutOfRange):
            simulate_swap(make_params(pool, [tick_arrays_a_to_b[0], missing]))

    def test_too_many_tick_arrays(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Touching more arrays than the instruction accepts is rejected."""
        params = make_params(pool, tick_arrays_a_to_b, config=QuoteConfig(max_swap_tick_arrays=2))
        with pytest.raises(TickArrayCrossingAboveMax):
            simulate_swap(params)


class TestSimulateSwapValidation:
    """Input checks, in the order the settlement program runs them."""

    def test_limit_out_of_bounds(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Limits outside the price range are rejected."""
        with pytest.raises(SqrtPriceOutOfBounds):
            simulate_swap(
                make_params(pool, tick_arrays_a_to_b, sqrt_price_limit=MIN_SQRT_PRICE_X64 - 1)
            )

    def test_limit_wrong_direction(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """An a->b limit above the current price is rejected."""
        limit = tick_index_to_sqrt_price_x64(100)
        with pytest.raises(InvalidSqrtPriceLimitDirection):
            simulate_swap(make_params(pool, tick_arrays_a_to_b, sqrt_price_limit=limit))

    def test_limit_checked_before_amount(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """A bad limit wins over a zero amount."""
        limit = tick_index_to_sqrt_price_x64(100)
        with pytest.raises(InvalidSqrtPriceLimitDirection):
            simulate_swap(make_params(pool, tick_arrays_a_to_b, amount=0, sqrt_price_limit=limit))

    def test_zero_amount(self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]) -> None:
        """Zero amounts are rejected."""
        with pytest.raises(ZeroTradableAmount):
            simulate_swap(make_params(pool, tick_arrays_a_to_b, amount=0))

    def test_wrong_first_tick_array(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Tick array 0 must hold the current tick."""
        with pytest.raises(TickArraySequenceInvalid):
            simulate_swap(make_params(pool, tick_arrays_a_to_b[1:]))

    def test_output_below_minimum(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Exact input fails if the output is below the threshold."""
        with pytest.raises(AmountOutBelowMinimum):
            simulate_swap(make_params(pool, tick_arrays_a_to_b, other_amount_threshold=997))

    def test_input_above_maximum(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Exact output fails if the input is above the threshold."""
        params = make_params(
            pool,
            tick_arrays_a_to_b,
            amount=996,
            amount_specified_is_input=False,
            other_amount_threshold=999,
        )
        with pytest.raises(AmountInAboveMaximum):
            simulate_swap(params)

    def test_timestamp_required(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Quotes never fall back to the wall clock."""
        with pytest.raises(TypeError):
            SwapQuoteParams(  # type: ignore[call-arg]
                pool=pool,
                amount=1000,
                a_to_b=True,
                amount_specified_is_input=True,
                tick_arrays=tick_arrays_a_to_b,
            )

    def test_adaptive_fee_constants_checked(
        self, adaptive_pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Tick groups that do not divide the tick spacing are rejected before the swap loop."""
        oracle = make_oracle(adaptive_pool, make_adaptive_fee_constants(tick_group_size=48))
        with pytest.raises(InvalidAdaptiveFeeConstants, match="tick_group_size"):
            simulate_swap(make_params(adaptive_pool, tick_arrays_a_to_b, oracle=oracle))


class TestComputeSwap:
    """Tests for the swap loop itself."""

    def test_crossing_tick_a_to_b(self) -> None:
        """Crossing an initialized tick downward subtracts its liquidity_net."""
        pool = make_pool(liquidity=10**9)
        tick_arrays = make_tick_arrays(pool, a_to_b=True, ticks={-64: 5 * 10**8})
        sequence = TickArraySequence(tick_arrays, pool.tick_spacing, True)

        result = compute_swap(pool, sequence, 10**7, MIN_SQRT_PRICE_X64, True, True, TIMESTAMP, None)

        assert result.next_liquidity == 5 * 10**8
        assert result.next_tick_index < -64
        assert result.amount_a == 10**7

    def test_crossing_tick_b_to_a(self) -> None:
        """Crossing an initialized tick upward adds its liquidity_net."""
        pool = make_pool(liquidity=10**9)
        tick_arrays = make_tick_arrays(pool, a_to_b=False, ticks={64: 5 * 10**8})
        sequence = TickArraySequence(tick_arrays, pool.tick_spacing, False)
        limit = tick_index_to_sqrt_price_x64(20_000)

        result = compute_swap(pool, sequence, 10**7, limit, True, False, TIMESTAMP, None)

        assert result.next_liquidity == 15 * 10**8
        assert result.next_tick_index >= 64
        assert result.amount_b == 10**7

    def test_protocol_fee(self, tick_arrays_a_to_b: list[TickArrayAccount]) -> None:
        """The protocol takes its share of the fee before fee growth accrues."""
        pool = make_pool(protocol_fee_rate=2500)
        sequence = TickArraySequence(tick_arrays_a_to_b, pool.tick_spacing, True)

        result = compute_swap(
            pool, sequence, 10**6, MIN_SQRT_PRICE_X64, True, True, TIMESTAMP, None
        )

        assert result.total_fee_amount == 3000
        assert result.protocol_fee_amount == 750
        assert result.fee_growth_global_input == (2250 << 64) // pool.liquidity

    def test_adaptive_info_required(
        self, adaptive_pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Adaptive fee pools cannot be quoted without their oracle."""
        sequence = TickArraySequence(tick_arrays_a_to_b, adaptive_pool.tick_spacing, True)
        with pytest.raises(ValueError, match="Adaptive fee info"):
            compute_swap(
                adaptive_pool, sequence, 1000, MIN_SQRT_PRICE_X64, True, True, TIMESTAMP, None
            )


class TestAdaptiveFeeSwap:
    """Swaps on an adaptive fee pool with tick groups of 16 ticks.

    10^6 of token A moves the price from tick 0 to about tick -20: through
    group 0 (no extra fee), group -1 (+11) and into group -2 (+41).
    """

    def test_fee_rate_per_tick_group(
        self,
        adaptive_pool: PoolState,
        oracle: OracleState,
        tick_arrays_a_to_b: list[TickArrayAccount],
    ) -> None:
        """Each tick group crossed raises the fee rate."""
        quote = simulate_swap(
            make_params(adaptive_pool, tick_arrays_a_to_b, amount=10**6, oracle=oracle)
        )

        assert quote.estimated_amount_in == 10**6
        assert quote.estimated_fee_rate_min == 3000
        assert quote.estimated_fee_rate_max == 3041
        assert -32 < quote.estimated_end_tick_index < -16
        assert quote.estimated_fee_amount > 3000
        assert quote.oracle == oracle.address

    def test_predicted_oracle_state(
        self,
        adaptive_pool: PoolState,
        oracle: OracleState,
        tick_arrays_a_to_b: list[TickArrayAccount],
    ) -> None:
        """The quote predicts the oracle after the swap."""
        quote = simulate_swap(
            make_params(adaptive_pool, tick_arrays_a_to_b, amount=10**6, oracle=oracle)
        )

        assert quote.next_adaptive_fee_info is not None
        variables = quote.next_adaptive_fee_info.variables
        assert variables.tick_group_index_reference == 0
        assert variables.volatility_accumulator == 20_000
        assert variables.last_reference_update_timestamp == TIMESTAMP
        assert variables.last_major_swap_timestamp == TIMESTAMP

    def test_static_pool_has_no_prediction(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Static fee quotes carry no oracle state."""
        quote = simulate_swap(make_params(pool, tick_arrays_a_to_b))
        assert quote.next_adaptive_fee_info is None
        assert quote.oracle is None

    def test_trade_not_enabled(
        self, adaptive_pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Quotes before the trade enable timestamp fail, and succeed from it on."""
        oracle = make_oracle(adaptive_pool, trade_enable_timestamp=TIMESTAMP + 60)
        with pytest.raises(TradeNotEnabled):
            simulate_swap(make_params(adaptive_pool, tick_arrays_a_to_b, oracle=oracle))

        params = make_params(
            adaptive_pool, tick_arrays_a_to_b, timestamp=TIMESTAMP + 60, oracle=oracle
        )
        quote = simulate_swap(params)

        assert quote.estimated_amount_in == 1000
        assert simulate_swap(params) == quote

    def test_reference_taken_from_starting_tick_group(self) -> None:
        """A fresh oracle references the group the swap starts in.

        With tick groups as wide as the tick spacing, tick 150 is in group 2.
        20,000 of token A against 10^6 liquidity moves the price a few
        hundred ticks down, so the accumulator counts the groups crossed.
        """
        pool = make_pool(tick_current_index=150, liquidity=10**6, adaptive_fee_enabled=True)
        oracle = make_oracle(pool, make_adaptive_fee_constants(tick_group_size=64))
        assert oracle.adaptive_fee_variables.tick_group_index_reference == 0
        assert oracle.adaptive_fee_variables.volatility_accumulator == 0

        quote = swap_quote_with_params(
            make_params(pool, make_tick_arrays(pool, a_to_b=True), amount=20_000, oracle=oracle),
            Percentage.from_bps(0),
        )

        end_group = quote.estimated_end_tick_index // 64
        assert end_group < 2
        assert quote.other_amount_threshold == quote.estimated_amount_out
        assert quote.next_adaptive_fee_info is not None
        variables = quote.next_adaptive_fee_info.variables
        assert variables.tick_group_index_reference == 2
        assert variables.volatility_accumulator == abs(end_group - 2) * 10_000


class TestSwapQuoteWithParams:
    """Tests for swap_quote_with_params."""

    def test_exact_in_threshold(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Exact input protects the output."""
        quote = swap_quote_with_params(make_params(pool, tick_arrays_a_to_b), Percentage.from_bps(100))

        assert quote.amount == 1000
        assert quote.other_amount_threshold == 986

    def test_exact_out_threshold(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Exact output protects the input."""
        params = make_params(pool, tick_arrays_a_to_b, amount=996, amount_specified_is_input=False)

        quote = swap_quote_with_params(params, Percentage.from_bps(100))

        assert quote.amount == 996
        assert quote.other_amount_threshold == 1010

    def test_uninitialized_arrays_interpolated(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """Missing arrays are traversed as empty."""
        missing = [TickArrayAccount(ta.address, ta.start_tick_index) for ta in tick_arrays_a_to_b[1:]]

        quote = swap_quote_with_params(
            make_params(pool, [tick_arrays_a_to_b[0], *missing]), Percentage.from_bps(100)
        )

        assert quote.estimated_amount_out == 996
        assert quote.tick_arrays == tuple(ta.address for ta in tick_arrays_a_to_b)

    def test_fallback_fills_free_slot(
        self, pool: PoolState, tick_arrays_b_to_a: list[TickArrayAccount]
    ) -> None:
        """A fallback replaces a repeated tick_array_2."""
        params = make_params(
            pool, tick_arrays_b_to_a[:1], a_to_b=False, fallback_tick_array="fallback"
        )

        quote = swap_quote_with_params(params, Percentage.from_bps(100))

        ta0 = tick_arrays_b_to_a[0].address
        assert quote.tick_arrays == (ta0, ta0, "fallback")
        assert quote.supplemental_tick_arrays == ()

    def test_fallback_supplemental(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """A fallback with all slots taken becomes a supplemental array."""
        params = make_params(pool, tick_arrays_a_to_b, fallback_tick_array="fallback")

        quote = swap_quote_with_params(params, Percentage.from_bps(100))

        assert quote.tick_arrays == tuple(ta.address for ta in tick_arrays_a_to_b)
        assert quote.supplemental_tick_arrays == ("fallback",)


class TestTransferFeeSwap:
    """Swaps where a mint withholds a 1% transfer fee on every transfer."""

    FEE = TransferFee(fee_bps=100, max_fee=10**9)

    def test_exact_in_input_fee(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """The pool swaps what is left of the input after the fee."""
        plain = simulate_swap(make_params(pool, tick_arrays_a_to_b, amount=990))

        quote = simulate_swap(make_params(pool, tick_arrays_a_to_b, transfer_fee_a=self.FEE))

        assert quote.amount == 1000
        assert quote.estimated_amount_in == 1000
        assert quote.transfer_fee_in == 10
        assert quote.estimated_amount_out == plain.estimated_amount_out
        assert quote.estimated_fee_amount == plain.estimated_fee_amount
        assert quote.transfer_fee_out == 0

    def test_exact_in_output_fee(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """The trader receives the pool's output less the fee, rounded against them."""
        quote = simulate_swap(make_params(pool, tick_arrays_a_to_b, transfer_fee_b=self.FEE))

        assert quote.estimated_amount_in == 1000
        assert quote.estimated_amount_out == 986
        assert quote.transfer_fee_out == 10

    def test_exact_in_b_to_a_uses_token_b_fee(
        self, pool: PoolState, tick_arrays_b_to_a: list[TickArrayAccount]
    ) -> None:
        """The input mint's fee applies whichever side of the pool it is."""
        quote = simulate_swap(
            make_params(pool, tick_arrays_b_to_a, a_to_b=False, transfer_fee_b=self.FEE)
        )

        assert quote.transfer_fee_in == 10
        assert quote.transfer_fee_out == 0

    def test_exact_out_output_fee(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """The pool must pay out enough that the amount arrives after the fee."""
        plain = simulate_swap(
            make_params(pool, tick_arrays_a_to_b, amount=1007, amount_specified_is_input=False)
        )

        quote = simulate_swap(
            make_params(
                pool,
                tick_arrays_a_to_b,
                amount=996,
                amount_specified_is_input=False,
                transfer_fee_b=self.FEE,
            )
        )

        assert quote.amount == 996
        assert quote.estimated_amount_out == 996
        assert quote.transfer_fee_out == 11
        assert quote.estimated_amount_in == plain.estimated_amount_in

    def test_exact_out_input_fee(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """The trader sends the pool's input plus the fee."""
        quote = simulate_swap(
            make_params(
                pool,
                tick_arrays_a_to_b,
                amount=996,
                amount_specified_is_input=False,
                transfer_fee_a=self.FEE,
            )
        )

        assert quote.estimated_amount_in == 1011
        assert quote.transfer_fee_in == 11
        assert quote.estimated_amount_out == 996

    def test_max_fee_caps_fee(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """A 10% fee capped at 5 withholds only 5."""
        plain = simulate_swap(make_params(pool, tick_arrays_a_to_b, amount=995))

        quote = simulate_swap(
            make_params(pool, tick_arrays_a_to_b, transfer_fee_a=TransferFee(1000, 5))
        )

        assert quote.transfer_fee_in == 5
        assert quote.estimated_amount_out == plain.estimated_amount_out

    def test_input_consumed_by_fee(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """An input that the fee rounds to nothing is not tradable."""
        with pytest.raises(ZeroTradableAmount):
            simulate_swap(make_params(pool, tick_arrays_a_to_b, amount=1, transfer_fee_a=self.FEE))

    def test_slippage_applies_after_fee(
        self, pool: PoolState, tick_arrays_a_to_b: list[TickArrayAccount]
    ) -> None:
        """The minimum output protects what the trader actually receives."""
        params = make_params(pool, tick_arrays_a_to_b, transfer_fee_b=self.FEE)

        quote = swap_quote_with_params(params, Percentage.from_bps(100))

        assert quote.estimated_amount_out == 986
        assert quote.other_amount_threshold == 976
