"""Swap quoting and routing for concentrated liquidity pools."""

from clmm_quote.quote.swap import SwapQuote, SwapQuoteParams, swap_quote_with_params
from clmm_quote.quote.two_hop import TwoHopSwapQuote, two_hop_swap_quote_from_swap_quotes

__version__ = "0.1.0"
__all__ = [
    "SwapQuote",
    "SwapQuoteParams",
    "swap_quote_with_params",
    "TwoHopSwapQuote",
    "two_hop_swap_quote_from_swap_quotes",
    "__version__",
]
