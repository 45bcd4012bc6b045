"""Per-swap fee rate tracking.

A swap asks its FeeRateManager for the fee rate of every step. Static pools
always answer with the pool fee rate; adaptive pools track the tick group
the price is in and cap each step at the next tick group boundary so the
fee rate can be recomputed as volatility accumulates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from clmm_quote.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from clmm_quote.constants import MAX_TICK_INDEX, MIN_TICK_INDEX
from clmm_quote.fees.adaptive import (
    compute_adaptive_fee_rate,
    get_core_tick_group_range,
    get_tick_group_index,
    update_major_swap_timestamp,
    update_reference,
    update_volatility_accumulator,
)
from clmm_quote.math.tick_math import sqrt_price_x64_to_tick_index, tick_index_to_sqrt_price_x64
from clmm_quote.models.state import AdaptiveFeeConstants, AdaptiveFeeInfo, AdaptiveFeeVariables


class FeeRateManager(ABC):
    """Fee rate source for the steps of one swap."""

    @staticmethod
    def new(
        a_to_b: bool,
        tick_current_index: int,
        timestamp: int,
        static_fee_rate: int,
        adaptive_fee_info: AdaptiveFeeInfo | None,
        config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
    ) -> FeeRateManager:
        """Create the manager matching the pool's fee tier.

        Args:
            a_to_b: Swap direction
            tick_current_index: Pool tick before the swap
            timestamp: Swap timestamp in seconds
            static_fee_rate: Pool fee rate
            adaptive_fee_info: Oracle state, or None for a static fee pool
            config: Quote configuration

        Raises:
            InvalidTimestamp: If timestamp precedes the oracle's last update
        """
        if adaptive_fee_info is None:
            return StaticFeeRateManager(static_fee_rate)
        return AdaptiveFeeRateManager(
            a_to_b, tick_current_index, timestamp, static_fee_rate, adaptive_fee_info, config
        )

    @abstractmethod
    def update_volatility_accumulator(self) -> None:
        """Recompute volatility for the current tick group."""
        ...

    @abstractmethod
    def get_total_fee_rate(self) -> int:
        """Fee rate for the next step."""
        ...

    @abstractmethod
    def get_bounded_sqrt_price_target(self, sqrt_price: int, liquidity: int) -> tuple[int, bool]:
        """Clamp a step target to the current tick group.

        Returns:
            Tuple of (bounded target, whether the tick group update was skipped)
        """
        ...

    @abstractmethod
    def advance_tick_group(self) -> None:
        """Move to the next tick group in swap direction."""
        ...

    @abstractmethod
    def advance_tick_group_after_skip(
        self, sqrt_price: int, next_tick_sqrt_price: int, next_tick_index: int
    ) -> None:
        """Resynchronize the tick group after a step that skipped group updates."""
        ...

    @abstractmethod
    def update_major_swap_timestamp(self, pre_sqrt_price: int, post_sqrt_price: int) -> None:
        """Record the swap as major if it moved the price far enough."""
        ...

    @abstractmethod
    def get_next_adaptive_fee_info(self) -> AdaptiveFeeInfo | None:
        """Predicted oracle state after the swap."""
        ...


class StaticFeeRateManager(FeeRateManager):
    """Constant fee rate; every tick group hook is a no-op."""

    def __init__(self, static_fee_rate: int):
        self.static_fee_rate = static_fee_rate

    def update_volatility_accumulator(self) -> None:
        pass

    def get_total_fee_rate(self) -> int:
        return self.static_fee_rate

    def get_bounded_sqrt_price_target(self, sqrt_price: int, liquidity: int) -> tuple[int, bool]:
        return sqrt_price, False

    def advance_tick_group(self) -> None:
        pass

    def advance_tick_group_after_skip(
        self, sqrt_price: int, next_tick_sqrt_price: int, next_tick_index: int
    ) -> None:
        pass

    def update_major_swap_timestamp(self, pre_sqrt_price: int, post_sqrt_price: int) -> None:
        pass

    def get_next_adaptive_fee_info(self) -> AdaptiveFeeInfo | None:
        return None


class AdaptiveFeeRateManager(FeeRateManager):
    """Static fee plus a volatility component recomputed per tick group.

    The oracle reference is refreshed on construction, matching the
    settlement program which refreshes it once per swap before any step.
    """

    def __init__(
        self,
        a_to_b: bool,
        tick_current_index: int,
        timestamp: int,
        static_fee_rate: int,
        adaptive_fee_info: AdaptiveFeeInfo,
        config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
    ):
        self.a_to_b = a_to_b
        self.timestamp = timestamp
        self.static_fee_rate = static_fee_rate
        self.config = config

        self.constants: AdaptiveFeeConstants = adaptive_fee_info.constants
        self.tick_group_index = get_tick_group_index(
            tick_current_index, self.constants.tick_group_size
        )
        self.variables: AdaptiveFeeVariables = update_reference(
            adaptive_fee_info.variables,
            self.constants,
            self.tick_group_index,
            timestamp,
            max_reference_age=config.max_reference_age,
            protocol_version=config.protocol_version,
        )
        self._core_lower, self._core_upper = get_core_tick_group_range(
            self.variables, self.constants
        )

    def update_volatility_accumulator(self) -> None:
        self.variables = update_volatility_accumulator(
            self.variables, self.constants, self.tick_group_index
        )

    def get_total_fee_rate(self) -> int:
        adaptive_fee_rate = compute_adaptive_fee_rate(
            self.variables, self.constants, self.config.fee_rate_hard_limit
        )
        return min(self.static_fee_rate + adaptive_fee_rate, self.config.fee_rate_hard_limit)

    def get_bounded_sqrt_price_target(self, sqrt_price: int, liquidity: int) -> tuple[int, bool]:
        # Fee rate cannot change: swap straight to the target
        if self.constants.adaptive_fee_control_factor == 0 or liquidity == 0:
            return sqrt_price, True

        # Below the core range the accumulator stays at its maximum until
        # the price re-enters the range
        if self._core_lower is not None and self.tick_group_index < self._core_lower.tick_group_index:
            if self.a_to_b:
                return sqrt_price, True
            return min(sqrt_price, self._core_lower.sqrt_price), True

        if self._core_upper is not None and self.tick_group_index > self._core_upper.tick_group_index:
            if self.a_to_b:
                return max(sqrt_price, self._core_upper.sqrt_price), True
            return sqrt_price, True

        group_size = self.constants.tick_group_size
        if self.a_to_b:
            boundary_tick_index = self.tick_group_index * group_size
        else:
            boundary_tick_index = self.tick_group_index * group_size + group_size
        boundary_sqrt_price = tick_index_to_sqrt_price_x64(
            max(MIN_TICK_INDEX, min(boundary_tick_index, MAX_TICK_INDEX))
        )

        if self.a_to_b:
            return max(sqrt_price, boundary_sqrt_price), False
        return min(sqrt_price, boundary_sqrt_price), False

    def advance_tick_group(self) -> None:
        self.tick_group_index += -1 if self.a_to_b else 1

    def advance_tick_group_after_skip(
        self, sqrt_price: int, next_tick_sqrt_price: int, next_tick_index: int
    ) -> None:
        group_size = self.constants.tick_group_size
        if sqrt_price == next_tick_sqrt_price:
            tick_index = next_tick_index
            on_boundary = tick_index % group_size == 0
        else:
            tick_index = sqrt_price_x64_to_tick_index(sqrt_price)
            on_boundary = (
                tick_index % group_size == 0
                and sqrt_price == tick_index_to_sqrt_price_x64(tick_index)
            )

        # Moving up onto a group boundary has only traversed the group below it
        if on_boundary and not self.a_to_b:
            last_traversed = tick_index // group_size - 1
        else:
            last_traversed = tick_index // group_size

        if (self.a_to_b and last_traversed < self.tick_group_index) or (
            not self.a_to_b and last_traversed > self.tick_group_index
        ):
            self.tick_group_index = last_traversed
            self.update_volatility_accumulator()

        self.advance_tick_group()

    def update_major_swap_timestamp(self, pre_sqrt_price: int, post_sqrt_price: int) -> None:
        self.variables = update_major_swap_timestamp(
            self.variables,
            self.constants,
            pre_sqrt_price,
            post_sqrt_price,
            self.timestamp,
            protocol_version=self.config.protocol_version,
        )

    def get_next_adaptive_fee_info(self) -> AdaptiveFeeInfo | None:
        return AdaptiveFeeInfo(constants=self.constants, variables=self.variables)


def predict_adaptive_fee_update(
    now: int,
    tick_before: int,
    tick_after: int,
    constants: AdaptiveFeeConstants,
    variables: AdaptiveFeeVariables,
    config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
) -> tuple[AdaptiveFeeVariables, int]:
    """Predict the oracle after a swap moving the price from tick_before to tick_after.

    A single-shot shortcut over AdaptiveFeeRateManager for callers that only
    know the ticks: refreshes the reference at the starting tick group,
    accumulates volatility at the final tick group and applies the major
    swap rule between the two tick prices.

    Returns:
        Tuple of (updated variables, adaptive fee rate component)
    """
    group_size = constants.tick_group_size
    updated = update_reference(
        variables,
        constants,
        get_tick_group_index(tick_before, group_size),
        now,
        max_reference_age=config.max_reference_age,
        protocol_version=config.protocol_version,
    )
    updated = update_volatility_accumulator(
        updated, constants, get_tick_group_index(tick_after, group_size)
    )
    updated = update_major_swap_timestamp(
        updated,
        constants,
        tick_index_to_sqrt_price_x64(tick_before),
        tick_index_to_sqrt_price_x64(tick_after),
        now,
        protocol_version=config.protocol_version,
    )
    fee_rate = compute_adaptive_fee_rate(updated, constants, config.fee_rate_hard_limit)
    return updated, fee_rate


__all__ = [
    "FeeRateManager",
    "StaticFeeRateManager",
    "AdaptiveFeeRateManager",
    "predict_adaptive_fee_update",
]
