"""Single-pool and two-hop swap quotes."""

from clmm_quote.quote.accounts import SwapAccounts, build_swap_accounts, resolve_oracle_address
from clmm_quote.quote.slippage import ZERO_SLIPPAGE, Percentage, adjust_for_slippage
from clmm_quote.quote.swap import (
    SwapQuote,
    SwapQuoteParams,
    SwapResult,
    calculate_swap_amounts_from_quote,
    compute_swap,
    get_swap_direction,
    simulate_swap,
    swap_quote_with_params,
)
from clmm_quote.quote.two_hop import TwoHopSwapQuote, two_hop_swap_quote_from_swap_quotes

__all__ = [
    # Single pool
    "SwapQuoteParams",
    "SwapResult",
    "SwapQuote",
    "compute_swap",
    "simulate_swap",
    "swap_quote_with_params",
    "get_swap_direction",
    "calculate_swap_amounts_from_quote",
    # Two hop
    "TwoHopSwapQuote",
    "two_hop_swap_quote_from_swap_quotes",
    # Slippage
    "Percentage",
    "ZERO_SLIPPAGE",
    "adjust_for_slippage",
    # Instruction accounts
    "SwapAccounts",
    "build_swap_accounts",
    "resolve_oracle_address",
]
