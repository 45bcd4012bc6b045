"""Enumerations shared by configuration, quoting and the HTTP layer."""

from enum import Enum


class ProtocolVersion(str, Enum):
    """Settlement program revision that a fee tier was created under.

    The revisions disagree on how the adaptive fee oracle records major
    swaps, so the caller must pick the one matching the pool's program.
    """

    V1 = "v1"
    V2 = "v2"


class UseFallbackTickArray(str, Enum):
    """When to attach the tick array behind the current one to a quote."""

    NEVER = "never"
    ALWAYS = "always"
    SITUATIONAL = "situational"


class SwapVariant(str, Enum):
    """Swap instruction shape that consumes a quote."""

    # Exactly three tick-array slots
    V1 = "v1"
    # Three slots plus a variable-length supplemental list
    V2 = "v2"


__all__ = ["ProtocolVersion", "UseFallbackTickArray", "SwapVariant"]
