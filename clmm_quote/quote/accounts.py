"""Account lists for the swap instruction variants consuming a quote."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from clmm_quote.config import DEFAULT_QUOTE_CONFIG, QuoteConfig
from clmm_quote.models.enums import SwapVariant
from clmm_quote.quote.swap import SwapQuote
from clmm_quote.tick_array.pda import get_oracle_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapAccounts:
    """Pool-owned accounts one swap instruction reads.

    Attributes:
        variant: Instruction variant the accounts were built for
        pool: Pool address
        oracle: Oracle address (derived even for static fee pools)
        tick_arrays: The three fixed tick array slots
        supplemental_tick_arrays: Extra tick arrays, V2 only
    """

    variant: SwapVariant
    pool: str
    oracle: str
    tick_arrays: tuple[str, str, str]
    supplemental_tick_arrays: tuple[str, ...] = ()

    @property
    def addresses(self) -> list[str]:
        """All addresses, deduplicated in slot order."""
        seen: dict[str, None] = {}
        for address in (self.pool, self.oracle, *self.tick_arrays, *self.supplemental_tick_arrays):
            seen.setdefault(address, None)
        return list(seen)


def resolve_oracle_address(quote: SwapQuote, config: QuoteConfig = DEFAULT_QUOTE_CONFIG) -> str:
    """Oracle address carried by the quote, or derived from its pool."""
    if quote.oracle is not None:
        return quote.oracle
    return get_oracle_address(config.program_id, quote.pool).address


def build_swap_accounts(
    quote: SwapQuote,
    variant: SwapVariant = SwapVariant.V2,
    config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
) -> SwapAccounts:
    """Lay out a quote's accounts for an instruction variant.

    V1 has no supplemental slot, so any supplemental tick arrays on the
    quote are dropped with a warning; the swap then fails on-chain if the
    price moves into them.

    Args:
        quote: Swap quote
        variant: Instruction variant
        config: Quote configuration, for the program id

    Returns:
        SwapAccounts
    """
    supplemental: tuple[str, ...] = ()
    if variant == SwapVariant.V2:
        supplemental = quote.supplemental_tick_arrays
    elif quote.supplemental_tick_arrays:
        logger.warning(
            "supplemental_tick_arrays_dropped",
            pool=quote.pool,
            variant=variant.value,
            dropped=list(quote.supplemental_tick_arrays),
        )

    return SwapAccounts(
        variant=variant,
        pool=quote.pool,
        oracle=resolve_oracle_address(quote, config),
        tick_arrays=quote.tick_arrays,
        supplemental_tick_arrays=supplemental,
    )


__all__ = ["SwapAccounts", "resolve_oracle_address", "build_swap_accounts"]
