"""Snapshots of on-chain pool, tick array and oracle accounts.

These are immutable value objects: the fetch layer builds them from account
data, and the quote engine only reads them. Predicted post-swap oracle state
is returned as a new AdaptiveFeeVariables instance rather than mutating the
snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from clmm_quote.constants import (
    ADAPTIVE_FEE_CONTROL_FACTOR_DENOMINATOR,
    REDUCTION_FACTOR_DENOMINATOR,
    TICK_ARRAY_SIZE,
    U32_MAX,
)
from clmm_quote.errors import InvalidAdaptiveFeeConstants


@dataclass(frozen=True)
class Tick:
    """One tick of a tick array.

    liquidity_net is signed: it is added when the price crosses the tick
    moving up and subtracted when crossing it moving down.
    """

    initialized: bool = False
    liquidity_net: int = 0
    liquidity_gross: int = 0
    fee_growth_outside_a: int = 0
    fee_growth_outside_b: int = 0
    reward_growths_outside: tuple[int, ...] = (0, 0, 0)


ZEROED_TICK = Tick()


@dataclass(frozen=True)
class TickArray:
    """A fixed-size run of TICK_ARRAY_SIZE ticks starting at start_tick_index."""

    start_tick_index: int
    ticks: tuple[Tick, ...]
    pool: str = ""

    def __post_init__(self) -> None:
        if len(self.ticks) != TICK_ARRAY_SIZE:
            raise ValueError(
                f"Tick array must hold {TICK_ARRAY_SIZE} ticks, got {len(self.ticks)}"
            )


@dataclass(frozen=True)
class TickArrayAccount:
    """A tick array address paired with its data, or None if not initialized."""

    address: str
    start_tick_index: int
    data: TickArray | None = None


@dataclass(frozen=True)
class PoolState:
    """Pool account snapshot.

    Attributes:
        address: Pool address
        token_mint_a: Mint of token A (lower in the canonical ordering)
        token_mint_b: Mint of token B
        tick_spacing: Distance between initializable ticks
        sqrt_price: Current sqrt price (Q64.64)
        tick_current_index: Tick containing sqrt_price
        liquidity: Active liquidity at the current price
        fee_rate: Static fee rate in hundredths of a basis point
        protocol_fee_rate: Protocol share of fees in basis points
        fee_growth_global_a: Global fee growth of token A (Q64.64)
        fee_growth_global_b: Global fee growth of token B (Q64.64)
        adaptive_fee_enabled: Whether the pool was created with an adaptive fee tier
    """

    address: str
    token_mint_a: str
    token_mint_b: str
    tick_spacing: int
    sqrt_price: int
    tick_current_index: int
    liquidity: int
    fee_rate: int
    protocol_fee_rate: int = 0
    fee_growth_global_a: int = 0
    fee_growth_global_b: int = 0
    adaptive_fee_enabled: bool = False


@dataclass(frozen=True)
class AdaptiveFeeConstants:
    """Per-fee-tier adaptive fee parameters."""

    filter_period: int
    decay_period: int
    reduction_factor: int
    adaptive_fee_control_factor: int
    max_volatility_accumulator: int
    tick_group_size: int
    major_swap_threshold_ticks: int

    def validate(self, tick_spacing: int) -> None:
        """Check the constants against the fee tier rules.

        Args:
            tick_spacing: Tick spacing of the fee tier

        Raises:
            InvalidAdaptiveFeeConstants: Describing the first violated rule
        """
        if self.filter_period == 0:
            raise InvalidAdaptiveFeeConstants("filter_period must be >= 1")
        if self.decay_period == 0 or self.decay_period <= self.filter_period:
            raise InvalidAdaptiveFeeConstants("decay_period must be > filter_period")
        if self.adaptive_fee_control_factor >= ADAPTIVE_FEE_CONTROL_FACTOR_DENOMINATOR:
            raise InvalidAdaptiveFeeConstants(
                f"adaptive_fee_control_factor must be < {ADAPTIVE_FEE_CONTROL_FACTOR_DENOMINATOR}"
            )
        if self.max_volatility_accumulator * self.tick_group_size > U32_MAX:
            raise InvalidAdaptiveFeeConstants(
                "max_volatility_accumulator * tick_group_size must fit in u32"
            )
        if self.reduction_factor >= REDUCTION_FACTOR_DENOMINATOR:
            raise InvalidAdaptiveFeeConstants(
                f"reduction_factor must be < {REDUCTION_FACTOR_DENOMINATOR}"
            )
        if (
            self.tick_group_size == 0
            or self.tick_group_size > tick_spacing
            or tick_spacing % self.tick_group_size != 0
        ):
            raise InvalidAdaptiveFeeConstants(
                "tick_group_size must be a positive divisor of tick_spacing"
            )
        if (
            self.major_swap_threshold_ticks == 0
            or self.major_swap_threshold_ticks > tick_spacing * TICK_ARRAY_SIZE
        ):
            raise InvalidAdaptiveFeeConstants(
                "major_swap_threshold_ticks must be within one tick array"
            )


@dataclass(frozen=True)
class AdaptiveFeeVariables:
    """Mutable-on-chain oracle state, all zero at pool creation."""

    last_reference_update_timestamp: int = 0
    last_major_swap_timestamp: int = 0
    tick_group_index_reference: int = 0
    volatility_reference: int = 0
    volatility_accumulator: int = 0


@dataclass(frozen=True)
class AdaptiveFeeInfo:
    """Adaptive fee constants with the variables to start a swap from."""

    constants: AdaptiveFeeConstants
    variables: AdaptiveFeeVariables = field(default_factory=AdaptiveFeeVariables)


@dataclass(frozen=True)
class OracleState:
    """Oracle account snapshot for a pool with an adaptive fee tier."""

    address: str
    pool: str
    trade_enable_timestamp: int
    adaptive_fee_constants: AdaptiveFeeConstants
    adaptive_fee_variables: AdaptiveFeeVariables = field(default_factory=AdaptiveFeeVariables)

    @property
    def adaptive_fee_info(self) -> AdaptiveFeeInfo:
        return AdaptiveFeeInfo(
            constants=self.adaptive_fee_constants,
            variables=self.adaptive_fee_variables,
        )


@dataclass(frozen=True)
class TransferFee:
    """Token-2022 transfer fee of a mint for the current epoch.

    Attributes:
        fee_bps: Fee in basis points of the transferred amount
        max_fee: Upper bound on the fee of a single transfer
    """

    fee_bps: int = 0
    max_fee: int = 0


__all__ = [
    "Tick",
    "ZEROED_TICK",
    "TickArray",
    "TickArrayAccount",
    "PoolState",
    "AdaptiveFeeConstants",
    "AdaptiveFeeVariables",
    "AdaptiveFeeInfo",
    "OracleState",
    "TransferFee",
]
