"""Quote configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from clmm_quote.constants import (
    FEE_RATE_HARD_LIMIT,
    MAX_FEE_RATE,
    MAX_PROTOCOL_FEE_RATE,
    MAX_REFERENCE_AGE,
    MAX_SWAP_TICK_ARRAYS,
    WHIRLPOOL_PROGRAM_ID,
)
from clmm_quote.models.enums import ProtocolVersion, UseFallbackTickArray


@dataclass(frozen=True)
class QuoteConfig:
    """Centralized configuration for quote computation.

    Holds every tunable the quote engine reads, so tests can run against
    alternative program revisions without patching module constants.

    Attributes:
        program_id: Pool program used to derive tick array and oracle addresses
        max_swap_tick_arrays: Tick arrays a single swap instruction accepts (default: 3)
        fee_rate_hard_limit: Clamp for static + adaptive fee rate (default: 100,000 = 10%)
        max_fee_rate: Largest base fee rate a fee tier may be configured with
            (default: 60,000 = 6%)
        max_protocol_fee_rate: Largest protocol fee rate (default: 2,500 = 25%)
        max_reference_age: Seconds after which the volatility reference resets
        protocol_version: Adaptive fee oracle behavior to reproduce
        fallback_tick_array: Default fallback tick array policy for quotes
    """

    program_id: str = WHIRLPOOL_PROGRAM_ID
    max_swap_tick_arrays: int = MAX_SWAP_TICK_ARRAYS

    # Fee limits
    fee_rate_hard_limit: int = FEE_RATE_HARD_LIMIT
    max_fee_rate: int = MAX_FEE_RATE
    max_protocol_fee_rate: int = MAX_PROTOCOL_FEE_RATE

    # Adaptive fee oracle
    max_reference_age: int = MAX_REFERENCE_AGE
    protocol_version: ProtocolVersion = ProtocolVersion.V2

    # Tick array selection
    fallback_tick_array: UseFallbackTickArray = UseFallbackTickArray.NEVER

    @classmethod
    def from_env(cls) -> QuoteConfig:
        """Build a configuration from environment variables.

        Recognized variables (all optional):
        - CLMM_PROGRAM_ID: Pool program address
        - CLMM_PROTOCOL_VERSION: "v1" or "v2"
        - CLMM_FALLBACK_TICK_ARRAY: "never", "always" or "situational"
        - CLMM_FEE_RATE_HARD_LIMIT: Integer fee rate clamp

        Raises:
            ValueError: If a variable holds an unrecognized value
        """
        return cls(
            program_id=os.environ.get("CLMM_PROGRAM_ID", WHIRLPOOL_PROGRAM_ID),
            protocol_version=ProtocolVersion(
                os.environ.get("CLMM_PROTOCOL_VERSION", ProtocolVersion.V2.value).lower()
            ),
            fallback_tick_array=UseFallbackTickArray(
                os.environ.get("CLMM_FALLBACK_TICK_ARRAY", UseFallbackTickArray.NEVER.value).lower()
            ),
            fee_rate_hard_limit=int(
                os.environ.get("CLMM_FEE_RATE_HARD_LIMIT", str(FEE_RATE_HARD_LIMIT))
            ),
        )


# Default configuration instance
DEFAULT_QUOTE_CONFIG = QuoteConfig()

__all__ = ["QuoteConfig", "DEFAULT_QUOTE_CONFIG"]
