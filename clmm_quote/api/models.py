"""Pydantic request and response models for the quote API.

Requests carry account snapshots fetched by the caller; the service never
reads chain state itself. Integers wider than 53 bits are accepted as
decimal strings and returned as decimal strings.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from clmm_quote.constants import TICK_ARRAY_SIZE
from clmm_quote.models.enums import SwapVariant, UseFallbackTickArray
from clmm_quote.models.state import (
    ZEROED_TICK,
    AdaptiveFeeConstants,
    AdaptiveFeeVariables,
    OracleState,
    PoolState,
    Tick,
    TickArray,
    TickArrayAccount,
    TransferFee,
)
from clmm_quote.models.types import I32, I128, U64, U128, Pubkey
from clmm_quote.quote.accounts import SwapAccounts
from clmm_quote.quote.swap import SwapQuote
from clmm_quote.quote.two_hop import TwoHopSwapQuote
from clmm_quote.routing.pool_graph import Path, PoolTokenPair


class PoolModel(BaseModel):
    """Pool account snapshot."""

    address: Pubkey
    token_mint_a: Pubkey = Field(alias="tokenMintA")
    token_mint_b: Pubkey = Field(alias="tokenMintB")
    tick_spacing: int = Field(alias="tickSpacing", gt=0, le=32768)
    sqrt_price: U128 = Field(alias="sqrtPrice")
    tick_current_index: I32 = Field(alias="tickCurrentIndex")
    liquidity: U128
    fee_rate: int = Field(alias="feeRate", ge=0, le=1_000_000)
    protocol_fee_rate: int = Field(default=0, alias="protocolFeeRate", ge=0, le=10_000)
    fee_growth_global_a: U128 = Field(default=0, alias="feeGrowthGlobalA")
    fee_growth_global_b: U128 = Field(default=0, alias="feeGrowthGlobalB")
    adaptive_fee_enabled: bool = Field(default=False, alias="adaptiveFeeEnabled")

    model_config = {"populate_by_name": True}

    def to_state(self) -> PoolState:
        return PoolState(
            address=self.address,
            token_mint_a=self.token_mint_a,
            token_mint_b=self.token_mint_b,
            tick_spacing=self.tick_spacing,
            sqrt_price=self.sqrt_price,
            tick_current_index=self.tick_current_index,
            liquidity=self.liquidity,
            fee_rate=self.fee_rate,
            protocol_fee_rate=self.protocol_fee_rate,
            fee_growth_global_a=self.fee_growth_global_a,
            fee_growth_global_b=self.fee_growth_global_b,
            adaptive_fee_enabled=self.adaptive_fee_enabled,
        )


class InitializedTickModel(BaseModel):
    """An initialized tick, addressed by its offset within the tick array."""

    offset: int = Field(ge=0, lt=TICK_ARRAY_SIZE)
    liquidity_net: I128 = Field(alias="liquidityNet")
    liquidity_gross: U128 = Field(default=0, alias="liquidityGross")

    model_config = {"populate_by_name": True}


class TickArrayModel(BaseModel):
    """Tick array snapshot with only its initialized ticks listed.

    Set initialized to false for an account that does not exist on-chain.
    """

    address: Pubkey
    start_tick_index: I32 = Field(alias="startTickIndex")
    initialized: bool = True
    ticks: list[InitializedTickModel] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    def to_account(self, pool_address: str) -> TickArrayAccount:
        if not self.initialized:
            return TickArrayAccount(address=self.address, start_tick_index=self.start_tick_index)
        ticks = [ZEROED_TICK] * TICK_ARRAY_SIZE
        for tick in self.ticks:
            ticks[tick.offset] = Tick(
                initialized=True,
                liquidity_net=tick.liquidity_net,
                liquidity_gross=tick.liquidity_gross,
            )
        return TickArrayAccount(
            address=self.address,
            start_tick_index=self.start_tick_index,
            data=TickArray(
                start_tick_index=self.start_tick_index, ticks=tuple(ticks), pool=pool_address
            ),
        )


class AdaptiveFeeConstantsModel(BaseModel):
    """Fee tier constants; cross-field rules are checked against the pool when quoting."""

    filter_period: int = Field(alias="filterPeriod", gt=0)
    decay_period: int = Field(alias="decayPeriod", gt=0)
    reduction_factor: int = Field(alias="reductionFactor", ge=0)
    adaptive_fee_control_factor: int = Field(alias="adaptiveFeeControlFactor", ge=0)
    max_volatility_accumulator: int = Field(alias="maxVolatilityAccumulator", ge=0)
    tick_group_size: int = Field(alias="tickGroupSize", gt=0)
    major_swap_threshold_ticks: int = Field(alias="majorSwapThresholdTicks", gt=0)

    model_config = {"populate_by_name": True}

    def to_state(self) -> AdaptiveFeeConstants:
        return AdaptiveFeeConstants(**self.model_dump())


class AdaptiveFeeVariablesModel(BaseModel):
    last_reference_update_timestamp: U64 = Field(default=0, alias="lastReferenceUpdateTimestamp")
    last_major_swap_timestamp: U64 = Field(default=0, alias="lastMajorSwapTimestamp")
    tick_group_index_reference: I32 = Field(default=0, alias="tickGroupIndexReference")
    volatility_reference: int = Field(default=0, alias="volatilityReference", ge=0)
    volatility_accumulator: int = Field(default=0, alias="volatilityAccumulator", ge=0)

    model_config = {"populate_by_name": True}

    def to_state(self) -> AdaptiveFeeVariables:
        return AdaptiveFeeVariables(**self.model_dump())

    @classmethod
    def from_state(cls, variables: AdaptiveFeeVariables) -> AdaptiveFeeVariablesModel:
        return cls(
            last_reference_update_timestamp=variables.last_reference_update_timestamp,
            last_major_swap_timestamp=variables.last_major_swap_timestamp,
            tick_group_index_reference=variables.tick_group_index_reference,
            volatility_reference=variables.volatility_reference,
            volatility_accumulator=variables.volatility_accumulator,
        )


class OracleModel(BaseModel):
    """Adaptive fee oracle snapshot."""

    address: Pubkey
    trade_enable_timestamp: U64 = Field(default=0, alias="tradeEnableTimestamp")
    adaptive_fee_constants: AdaptiveFeeConstantsModel = Field(alias="adaptiveFeeConstants")
    adaptive_fee_variables: AdaptiveFeeVariablesModel = Field(
        default_factory=AdaptiveFeeVariablesModel, alias="adaptiveFeeVariables"
    )

    model_config = {"populate_by_name": True}

    def to_state(self, pool_address: str) -> OracleState:
        return OracleState(
            address=self.address,
            pool=pool_address,
            trade_enable_timestamp=self.trade_enable_timestamp,
            adaptive_fee_constants=self.adaptive_fee_constants.to_state(),
            adaptive_fee_variables=self.adaptive_fee_variables.to_state(),
        )


class TransferFeeModel(BaseModel):
    """Token-2022 transfer fee of a mint for the current epoch."""

    fee_bps: int = Field(alias="feeBps", ge=0, le=10_000)
    max_fee: U64 = Field(alias="maxFee")

    model_config = {"populate_by_name": True}

    def to_state(self) -> TransferFee:
        return TransferFee(fee_bps=self.fee_bps, max_fee=self.max_fee)


class PoolSnapshotModel(BaseModel):
    """Everything needed to quote one pool."""

    pool: PoolModel
    tick_arrays: list[TickArrayModel] = Field(alias="tickArrays", min_length=1)
    oracle: OracleModel | None = None
    transfer_fee_a: TransferFeeModel | None = Field(default=None, alias="transferFeeA")
    transfer_fee_b: TransferFeeModel | None = Field(default=None, alias="transferFeeB")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def check_oracle_matches_fee_tier(self) -> PoolSnapshotModel:
        if self.pool.adaptive_fee_enabled and self.oracle is None:
            raise ValueError("Adaptive fee pools require an oracle snapshot")
        if not self.pool.adaptive_fee_enabled and self.oracle is not None:
            raise ValueError("Static fee pools take no oracle snapshot")
        return self

    def to_accounts(self) -> list[TickArrayAccount]:
        return [tick_array.to_account(self.pool.address) for tick_array in self.tick_arrays]


class SwapQuoteRequest(PoolSnapshotModel):
    """Single-pool quote request.

    token_mint is the input mint when amount_specified_is_input is true and
    the output mint otherwise.
    """

    token_mint: Pubkey = Field(alias="tokenMint")
    amount: U64
    amount_specified_is_input: bool = Field(default=True, alias="amountSpecifiedIsInput")
    slippage_bps: int = Field(default=0, alias="slippageBps", ge=0, le=10_000)
    sqrt_price_limit: U128 | None = Field(default=None, alias="sqrtPriceLimit")
    timestamp: U64 | None = None
    fallback_tick_array: UseFallbackTickArray | None = Field(default=None, alias="fallbackTickArray")
    variant: SwapVariant = SwapVariant.V2


class TwoHopQuoteRequest(BaseModel):
    """Two-hop quote request; the intermediate mint is inferred from the pools."""

    hop_one: PoolSnapshotModel = Field(alias="hopOne")
    hop_two: PoolSnapshotModel = Field(alias="hopTwo")
    token_mint: Pubkey = Field(alias="tokenMint")
    amount: U64
    amount_specified_is_input: bool = Field(default=True, alias="amountSpecifiedIsInput")
    slippage_bps: int = Field(default=0, alias="slippageBps", ge=0, le=10_000)
    timestamp: U64 | None = None

    model_config = {"populate_by_name": True}


class PoolTokenPairModel(BaseModel):
    address: str
    token_mint_a: str = Field(alias="tokenMintA")
    token_mint_b: str = Field(alias="tokenMintB")

    model_config = {"populate_by_name": True}

    def to_pair(self) -> PoolTokenPair:
        return PoolTokenPair(self.address, self.token_mint_a, self.token_mint_b)


class RouteRequest(BaseModel):
    """Path query over a set of pools."""

    pools: list[PoolTokenPairModel]
    pairs: list[tuple[str, str]] = Field(min_length=1)
    intermediate_tokens: list[str] | None = Field(default=None, alias="intermediateTokens")

    model_config = {"populate_by_name": True}


# --- Responses ---


class SwapQuoteResponse(BaseModel):
    """Quote estimates and swap instruction inputs."""

    pool: str
    a_to_b: bool = Field(serialization_alias="aToB")
    amount: str
    amount_specified_is_input: bool = Field(serialization_alias="amountSpecifiedIsInput")
    other_amount_threshold: str = Field(serialization_alias="otherAmountThreshold")
    sqrt_price_limit: str = Field(serialization_alias="sqrtPriceLimit")
    estimated_amount_in: str = Field(serialization_alias="estimatedAmountIn")
    estimated_amount_out: str = Field(serialization_alias="estimatedAmountOut")
    estimated_fee_amount: str = Field(serialization_alias="estimatedFeeAmount")
    estimated_end_sqrt_price: str = Field(serialization_alias="estimatedEndSqrtPrice")
    estimated_end_tick_index: int = Field(serialization_alias="estimatedEndTickIndex")
    estimated_fee_rate_min: int = Field(serialization_alias="estimatedFeeRateMin")
    estimated_fee_rate_max: int = Field(serialization_alias="estimatedFeeRateMax")
    oracle: str
    tick_arrays: list[str] = Field(serialization_alias="tickArrays")
    supplemental_tick_arrays: list[str] = Field(serialization_alias="supplementalTickArrays")
    next_adaptive_fee_variables: AdaptiveFeeVariablesModel | None = Field(
        default=None, serialization_alias="nextAdaptiveFeeVariables"
    )
    transfer_fee_in: str = Field(default="0", serialization_alias="transferFeeIn")
    transfer_fee_out: str = Field(default="0", serialization_alias="transferFeeOut")

    @classmethod
    def from_quote(cls, quote: SwapQuote, accounts: SwapAccounts) -> SwapQuoteResponse:
        next_variables = None
        if quote.next_adaptive_fee_info is not None:
            next_variables = AdaptiveFeeVariablesModel.from_state(
                quote.next_adaptive_fee_info.variables
            )
        return cls(
            pool=quote.pool,
            a_to_b=quote.a_to_b,
            amount=str(quote.amount),
            amount_specified_is_input=quote.amount_specified_is_input,
            other_amount_threshold=str(quote.other_amount_threshold),
            sqrt_price_limit=str(quote.sqrt_price_limit),
            estimated_amount_in=str(quote.estimated_amount_in),
            estimated_amount_out=str(quote.estimated_amount_out),
            estimated_fee_amount=str(quote.estimated_fee_amount),
            estimated_end_sqrt_price=str(quote.estimated_end_sqrt_price),
            estimated_end_tick_index=quote.estimated_end_tick_index,
            estimated_fee_rate_min=quote.estimated_fee_rate_min,
            estimated_fee_rate_max=quote.estimated_fee_rate_max,
            oracle=accounts.oracle,
            tick_arrays=list(accounts.tick_arrays),
            supplemental_tick_arrays=list(accounts.supplemental_tick_arrays),
            next_adaptive_fee_variables=next_variables,
            transfer_fee_in=str(quote.transfer_fee_in),
            transfer_fee_out=str(quote.transfer_fee_out),
        )


class TwoHopQuoteResponse(BaseModel):
    amount: str
    amount_specified_is_input: bool = Field(serialization_alias="amountSpecifiedIsInput")
    other_amount_threshold: str = Field(serialization_alias="otherAmountThreshold")
    estimated_amount_in: str = Field(serialization_alias="estimatedAmountIn")
    estimated_amount_out: str = Field(serialization_alias="estimatedAmountOut")
    estimated_intermediate_amount: str = Field(serialization_alias="estimatedIntermediateAmount")
    accounts: list[str]
    hop_one: SwapQuoteResponse = Field(serialization_alias="hopOne")
    hop_two: SwapQuoteResponse = Field(serialization_alias="hopTwo")

    @classmethod
    def from_quote(
        cls,
        quote: TwoHopSwapQuote,
        accounts_one: SwapAccounts,
        accounts_two: SwapAccounts,
    ) -> TwoHopQuoteResponse:
        return cls(
            amount=str(quote.amount),
            amount_specified_is_input=quote.amount_specified_is_input,
            other_amount_threshold=str(quote.other_amount_threshold),
            estimated_amount_in=str(quote.estimated_amount_in),
            estimated_amount_out=str(quote.estimated_amount_out),
            estimated_intermediate_amount=str(quote.estimated_intermediate_amount),
            accounts=list(quote.accounts),
            hop_one=SwapQuoteResponse.from_quote(quote.quote_one, accounts_one),
            hop_two=SwapQuoteResponse.from_quote(quote.quote_two, accounts_two),
        )


class PathModel(BaseModel):
    start_token_mint: str = Field(serialization_alias="startTokenMint")
    end_token_mint: str = Field(serialization_alias="endTokenMint")
    edges: list[str]

    @classmethod
    def from_path(cls, path: Path) -> PathModel:
        return cls(
            start_token_mint=path.start_token_mint,
            end_token_mint=path.end_token_mint,
            edges=path.pool_addresses,
        )


class RouteEntryModel(BaseModel):
    search_id: str = Field(serialization_alias="searchId")
    paths: list[PathModel]


class RouteResponse(BaseModel):
    routes: list[RouteEntryModel]


class ErrorResponse(BaseModel):
    """Body of a rejected quote."""

    error: str
    message: str
    code: int | None = None


__all__ = [
    # Requests
    "PoolModel",
    "InitializedTickModel",
    "TickArrayModel",
    "AdaptiveFeeConstantsModel",
    "AdaptiveFeeVariablesModel",
    "OracleModel",
    "TransferFeeModel",
    "PoolSnapshotModel",
    "SwapQuoteRequest",
    "TwoHopQuoteRequest",
    "PoolTokenPairModel",
    "RouteRequest",
    # Responses
    "SwapQuoteResponse",
    "TwoHopQuoteResponse",
    "PathModel",
    "RouteEntryModel",
    "RouteResponse",
    "ErrorResponse",
]
