"""Two-hop swap quotes composed from two single-pool quotes."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from clmm_quote.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from clmm_quote.errors import (
    AmountSpecifiedMismatch,
    DuplicateTwoHopPool,
    IntermediateTokenAmountMismatch,
    InvalidIntermediaryMint,
)
from clmm_quote.quote.accounts import resolve_oracle_address
from clmm_quote.quote.swap import SwapQuote

logger = structlog.get_logger()


@dataclass(frozen=True)
class TwoHopSwapQuote:
    """Chained quote: hop one's output is hop two's input.

    For exact input, amount is the input of hop one and the threshold
    bounds the output of hop two. For exact output, amount is the output of
    hop two and the threshold bounds the input of hop one.
    """

    amount: int
    other_amount_threshold: int
    amount_specified_is_input: bool
    a_to_b_one: bool
    a_to_b_two: bool
    sqrt_price_limit_one: int
    sqrt_price_limit_two: int
    tick_arrays_one: tuple[str, str, str]
    tick_arrays_two: tuple[str, str, str]
    supplemental_tick_arrays_one: tuple[str, ...]
    supplemental_tick_arrays_two: tuple[str, ...]
    estimated_amount_in: int
    estimated_amount_out: int
    estimated_intermediate_amount: int
    estimated_fee_amount_one: int
    estimated_fee_amount_two: int
    quote_one: SwapQuote
    quote_two: SwapQuote
    accounts: tuple[str, ...] = ()


def two_hop_swap_quote_from_swap_quotes(
    quote_one: SwapQuote,
    quote_two: SwapQuote,
    config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
) -> TwoHopSwapQuote:
    """Combine two single-pool quotes into a two-hop quote.

    Exact-in quotes must be computed front to back (hop two quoted on hop
    one's estimated output); exact-out quotes back to front.

    Args:
        quote_one: Quote for the first pool
        quote_two: Quote for the second pool
        config: Quote configuration, for oracle address derivation

    Returns:
        TwoHopSwapQuote

    Raises:
        AmountSpecifiedMismatch: If the quotes disagree on exact in/out
        DuplicateTwoHopPool: If both quotes use the same pool
        InvalidIntermediaryMint: If hop one's output mint is not hop two's input mint
        IntermediateTokenAmountMismatch: If the intermediate amounts differ
    """
    is_input = quote_one.amount_specified_is_input
    if quote_two.amount_specified_is_input != is_input:
        raise AmountSpecifiedMismatch("Both hops must specify the same side of the swap")

    if quote_one.pool == quote_two.pool:
        raise DuplicateTwoHopPool(f"Both hops use pool {quote_one.pool}")

    if quote_one.output_token_mint != quote_two.input_token_mint:
        raise InvalidIntermediaryMint(
            f"Hop one outputs {quote_one.output_token_mint}, "
            f"hop two takes {quote_two.input_token_mint}"
        )

    if is_input:
        intermediate_amount = quote_one.estimated_amount_out
        matched = quote_two.amount == intermediate_amount
        amount = quote_one.amount
        other_amount_threshold = quote_two.other_amount_threshold
    else:
        intermediate_amount = quote_two.estimated_amount_in
        matched = quote_one.amount == intermediate_amount
        amount = quote_two.amount
        other_amount_threshold = quote_one.other_amount_threshold
    if not matched:
        raise IntermediateTokenAmountMismatch(
            f"Hop one output {quote_one.estimated_amount_out} != "
            f"hop two input {quote_two.estimated_amount_in}"
        )

    seen: dict[str, None] = {}
    for address in (
        quote_one.pool,
        quote_two.pool,
        resolve_oracle_address(quote_one, config),
        resolve_oracle_address(quote_two, config),
        *quote_one.tick_arrays,
        *quote_one.supplemental_tick_arrays,
        *quote_two.tick_arrays,
        *quote_two.supplemental_tick_arrays,
    ):
        seen.setdefault(address, None)

    logger.info(
        "two_hop_quoted",
        pool_one=quote_one.pool,
        pool_two=quote_two.pool,
        amount_specified_is_input=is_input,
        estimated_amount_in=quote_one.estimated_amount_in,
        estimated_amount_out=quote_two.estimated_amount_out,
    )

    return TwoHopSwapQuote(
        amount=amount,
        other_amount_threshold=other_amount_threshold,
        amount_specified_is_input=is_input,
        a_to_b_one=quote_one.a_to_b,
        a_to_b_two=quote_two.a_to_b,
        sqrt_price_limit_one=quote_one.sqrt_price_limit,
        sqrt_price_limit_two=quote_two.sqrt_price_limit,
        tick_arrays_one=quote_one.tick_arrays,
        tick_arrays_two=quote_two.tick_arrays,
        supplemental_tick_arrays_one=quote_one.supplemental_tick_arrays,
        supplemental_tick_arrays_two=quote_two.supplemental_tick_arrays,
        estimated_amount_in=quote_one.estimated_amount_in,
        estimated_amount_out=quote_two.estimated_amount_out,
        estimated_intermediate_amount=intermediate_amount,
        estimated_fee_amount_one=quote_one.estimated_fee_amount,
        estimated_fee_amount_two=quote_two.estimated_fee_amount,
        quote_one=quote_one,
        quote_two=quote_two,
        accounts=tuple(seen),
    )


__all__ = ["TwoHopSwapQuote", "two_hop_swap_quote_from_swap_quotes"]
