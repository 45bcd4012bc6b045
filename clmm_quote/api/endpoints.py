"""API endpoints for the quote service."""

from __future__ import annotations

import asyncio
import time

import structlog
from fastapi import APIRouter, Depends, HTTPException

from clmm_quote.api.models import (
    PathModel,
    PoolSnapshotModel,
    RouteEntryModel,
    RouteRequest,
    RouteResponse,
    SwapQuoteRequest,
    SwapQuoteResponse,
    TwoHopQuoteRequest,
    TwoHopQuoteResponse,
)
from clmm_quote.config import QuoteConfig
from clmm_quote.errors import QuoteError
from clmm_quote.models.enums import SwapVariant, UseFallbackTickArray
from clmm_quote.models.state import PoolState
from clmm_quote.quote.accounts import build_swap_accounts
from clmm_quote.quote.slippage import Percentage
from clmm_quote.quote.swap import (
    SwapQuote,
    SwapQuoteParams,
    get_swap_direction,
    swap_quote_with_params,
)
from clmm_quote.quote.two_hop import two_hop_swap_quote_from_swap_quotes
from clmm_quote.routing.pool_graph import PoolGraphBuilder
from clmm_quote.tick_array.addressing import select_fallback_tick_array

logger = structlog.get_logger()

router = APIRouter()


def get_config() -> QuoteConfig:
    """Dependency provider for the quote configuration.

    Override this in tests to pin a configuration:
        app.dependency_overrides[get_config] = lambda: QuoteConfig(...)
    """
    return QuoteConfig.from_env()


def _swap_direction(pool: PoolState, token_mint: str, amount_specified_is_input: bool) -> bool:
    a_to_b = get_swap_direction(pool, token_mint, amount_specified_is_input)
    if a_to_b is None:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "InvalidTokenMint",
                "message": f"Mint {token_mint} is not traded by pool {pool.address}",
            },
        )
    return a_to_b


def _quote_snapshot(
    snapshot: PoolSnapshotModel,
    a_to_b: bool,
    amount: int,
    amount_specified_is_input: bool,
    slippage: Percentage,
    timestamp: int,
    config: QuoteConfig,
    sqrt_price_limit: int | None = None,
    fallback_policy: UseFallbackTickArray | None = None,
) -> SwapQuote:
    pool = snapshot.pool.to_state()
    tick_arrays = snapshot.to_accounts()
    oracle = snapshot.oracle.to_state(pool.address) if snapshot.oracle is not None else None
    transfer_fee_a = transfer_fee_b = None
    if snapshot.transfer_fee_a is not None:
        transfer_fee_a = snapshot.transfer_fee_a.to_state()
    if snapshot.transfer_fee_b is not None:
        transfer_fee_b = snapshot.transfer_fee_b.to_state()

    fallback = select_fallback_tick_array(
        fallback_policy or config.fallback_tick_array,
        pool.tick_current_index,
        tick_arrays[0].start_tick_index,
        pool.tick_spacing,
        a_to_b,
        config.program_id,
        pool.address,
    )

    params = SwapQuoteParams(
        pool=pool,
        amount=amount,
        a_to_b=a_to_b,
        amount_specified_is_input=amount_specified_is_input,
        tick_arrays=tick_arrays,
        sqrt_price_limit=sqrt_price_limit,
        timestamp=timestamp,
        oracle=oracle,
        fallback_tick_array=fallback.address if fallback is not None else None,
        transfer_fee_a=transfer_fee_a,
        transfer_fee_b=transfer_fee_b,
        config=config,
    )
    return swap_quote_with_params(params, slippage)


def _request_timestamp(timestamp: int | None) -> int:
    """Requests without a timestamp are quoted at the current wall-clock second."""
    return timestamp if timestamp is not None else int(time.time())


def _rejected(err: QuoteError, **context: object) -> HTTPException:
    logger.warning(
        "quote_rejected",
        error=type(err).__name__,
        message=str(err),
        code=err.code,
        **context,
    )
    return HTTPException(
        status_code=400,
        detail={"error": type(err).__name__, "message": str(err), "code": err.code},
    )


def _swap_quote(request: SwapQuoteRequest, config: QuoteConfig) -> SwapQuoteResponse:
    a_to_b = _swap_direction(
        request.pool.to_state(), request.token_mint, request.amount_specified_is_input
    )
    quote = _quote_snapshot(
        request,
        a_to_b,
        request.amount,
        request.amount_specified_is_input,
        Percentage.from_bps(request.slippage_bps),
        _request_timestamp(request.timestamp),
        config,
        sqrt_price_limit=request.sqrt_price_limit,
        fallback_policy=request.fallback_tick_array,
    )
    accounts = build_swap_accounts(quote, request.variant, config)
    return SwapQuoteResponse.from_quote(quote, accounts)


def _two_hop_quote(request: TwoHopQuoteRequest, config: QuoteConfig) -> TwoHopQuoteResponse:
    slippage = Percentage.from_bps(request.slippage_bps)
    timestamp = _request_timestamp(request.timestamp)
    is_input = request.amount_specified_is_input
    pool_one = request.hop_one.pool.to_state()
    pool_two = request.hop_two.pool.to_state()

    if is_input:
        # Front to back: hop two spends hop one's estimated output
        a_to_b_one = _swap_direction(pool_one, request.token_mint, True)
        quote_one = _quote_snapshot(
            request.hop_one, a_to_b_one, request.amount, True, slippage, timestamp, config
        )
        a_to_b_two = _swap_direction(pool_two, quote_one.output_token_mint, True)
        quote_two = _quote_snapshot(
            request.hop_two,
            a_to_b_two,
            quote_one.estimated_amount_out,
            True,
            slippage,
            timestamp,
            config,
        )
    else:
        # Back to front: hop one must produce hop two's estimated input
        a_to_b_two = _swap_direction(pool_two, request.token_mint, False)
        quote_two = _quote_snapshot(
            request.hop_two, a_to_b_two, request.amount, False, slippage, timestamp, config
        )
        a_to_b_one = _swap_direction(pool_one, quote_two.input_token_mint, False)
        quote_one = _quote_snapshot(
            request.hop_one,
            a_to_b_one,
            quote_two.estimated_amount_in,
            False,
            slippage,
            timestamp,
            config,
        )

    quote = two_hop_swap_quote_from_swap_quotes(quote_one, quote_two, config)
    return TwoHopQuoteResponse.from_quote(
        quote,
        build_swap_accounts(quote_one, SwapVariant.V2, config),
        build_swap_accounts(quote_two, SwapVariant.V2, config),
    )


@router.post("/quote/swap", response_model_by_alias=True)
async def quote_swap(
    request: SwapQuoteRequest,
    config: QuoteConfig = Depends(get_config),
) -> SwapQuoteResponse:
    """Quote a swap on a single pool.

    Error Handling:
        - Invalid request schema: Returns 422 Validation Error (Pydantic)
        - Mint not in pool or quote failure: Returns 400 with error name and code
    """
    logger.info(
        "received_swap_quote_request",
        pool=request.pool.address,
        token_mint=request.token_mint,
        amount=request.amount,
        amount_specified_is_input=request.amount_specified_is_input,
        tick_arrays=len(request.tick_arrays),
    )

    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, _swap_quote, request, config)
    except QuoteError as err:
        raise _rejected(err, pool=request.pool.address) from err


@router.post("/quote/two-hop", response_model_by_alias=True)
async def quote_two_hop(
    request: TwoHopQuoteRequest,
    config: QuoteConfig = Depends(get_config),
) -> TwoHopQuoteResponse:
    """Quote a swap routed through two pools."""
    logger.info(
        "received_two_hop_quote_request",
        pool_one=request.hop_one.pool.address,
        pool_two=request.hop_two.pool.address,
        token_mint=request.token_mint,
        amount=request.amount,
        amount_specified_is_input=request.amount_specified_is_input,
    )

    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, _two_hop_quote, request, config)
    except QuoteError as err:
        raise _rejected(
            err, pool_one=request.hop_one.pool.address, pool_two=request.hop_two.pool.address
        ) from err


@router.post("/routes", response_model_by_alias=True)
async def find_routes(request: RouteRequest) -> RouteResponse:
    """Find direct and two-hop paths for each requested mint pair."""
    logger.info("received_route_request", pools=len(request.pools), pairs=len(request.pairs))

    graph = PoolGraphBuilder.build_pool_graph(pool.to_pair() for pool in request.pools)
    results = graph.get_paths_for_pairs(request.pairs, request.intermediate_tokens)
    return RouteResponse(
        routes=[
            RouteEntryModel(search_id=search_id, paths=[PathModel.from_path(p) for p in paths])
            for search_id, paths in results
        ]
    )


__all__ = ["router", "get_config", "quote_swap", "quote_two_hop", "find_routes"]
