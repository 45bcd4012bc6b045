"""Slippage tolerance as an exact fraction."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Percentage:
    """A tolerance stored as numerator / denominator, e.g. 1/100 for 1%.

    Raises:
        ValueError: If the denominator is not positive or the numerator is negative
    """

    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        if self.denominator <= 0:
            raise ValueError(f"Denominator must be positive, got {self.denominator}")
        if self.numerator < 0:
            raise ValueError(f"Numerator must be non-negative, got {self.numerator}")

    @classmethod
    def from_fraction(cls, numerator: int, denominator: int) -> Percentage:
        return cls(numerator, denominator)

    @classmethod
    def from_decimal(cls, percent: Decimal | str | int) -> Percentage:
        """Build from a percent value, so Decimal("0.5") is 0.5%."""
        numerator, denominator = Decimal(percent).as_integer_ratio()
        return cls(numerator, denominator * 100)

    @classmethod
    def from_bps(cls, bps: int) -> Percentage:
        return cls(bps, 10_000)

    def to_decimal(self) -> Decimal:
        """Percent value of this tolerance."""
        return Decimal(self.numerator) * 100 / Decimal(self.denominator)


ZERO_SLIPPAGE = Percentage(0, 1)


def adjust_for_slippage(amount: int, slippage: Percentage, adjust_up: bool) -> int:
    """Widen amount by a slippage tolerance.

    Rounds down in both directions: an upward adjustment computes
    amount * (1 + s) and a downward one amount / (1 + s).

    Args:
        amount: Quoted amount
        slippage: Tolerance
        adjust_up: True for a maximum input, False for a minimum output

    Returns:
        Adjusted amount
    """
    numerator, denominator = slippage.numerator, slippage.denominator
    if adjust_up:
        return amount * (denominator + numerator) // denominator
    return amount * denominator // (denominator + numerator)


__all__ = ["Percentage", "ZERO_SLIPPAGE", "adjust_for_slippage"]
