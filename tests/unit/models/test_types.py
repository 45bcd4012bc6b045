"""Tests for the HTTP integer and public key types."""

import pytest
from pydantic import BaseModel, ValidationError

from clmm_quote.constants import U64_MAX
from clmm_quote.models.types import I32, U64, U128, Pubkey
from tests.helpers import POOL_SOL_USDC, SOL


class Amounts(BaseModel):
    amount: U64
    liquidity: U128 = 0
    tick: I32 = 0


class Account(BaseModel):
    address: Pubkey


class TestIntegerTypes:
    """Tests for U64, U128 and I32."""

    def test_decimal_string(self) -> None:
        """Decimal strings are parsed."""
        assert Amounts(amount="18446744073709551615").amount == U64_MAX

    def test_plain_int(self) -> None:
        """JSON integers are accepted too."""
        assert Amounts(amount=5, liquidity=2**100, tick=-443636).tick == -443636

    def test_u128_beyond_u64(self) -> None:
        """U128 holds values a u64 cannot."""
        assert Amounts(amount=0, liquidity=str(2**127)).liquidity == 2**127

    @pytest.mark.parametrize("value", [str(U64_MAX + 1), "-1", -1])
    def test_u64_out_of_range(self, value: object) -> None:
        """Values outside [0, 2^64) are rejected."""
        with pytest.raises(ValidationError, match="out of range"):
            Amounts(amount=value)

    def test_i32_out_of_range(self) -> None:
        """Tick indices must fit an i32."""
        with pytest.raises(ValidationError, match="I32 out of range"):
            Amounts(amount=0, tick=2**31)

    def test_bool_rejected(self) -> None:
        """Booleans are not integers here."""
        with pytest.raises(ValidationError, match="got bool"):
            Amounts(amount=True)

    @pytest.mark.parametrize("value", ["1.5", "0x10", "abc"])
    def test_non_decimal_string(self, value: str) -> None:
        """Only base-10 integer strings are accepted."""
        with pytest.raises(ValidationError, match="decimal integer string"):
            Amounts(amount=value)

    def test_float_rejected(self) -> None:
        """Floats are neither strings nor ints."""
        with pytest.raises(ValidationError, match="must be string or int"):
            Amounts(amount=1.0)


class TestPubkey:
    """Tests for the Pubkey type."""

    @pytest.mark.parametrize("address", [SOL, POOL_SOL_USDC])
    def test_valid(self, address: str) -> None:
        """32-byte base58 keys pass through unchanged."""
        assert Account(address=address).address == address

    def test_not_base58(self) -> None:
        """Characters outside the base58 alphabet are rejected."""
        with pytest.raises(ValidationError, match="not base58"):
            Account(address="0OIl")

    def test_wrong_length(self) -> None:
        """Keys must decode to exactly 32 bytes."""
        with pytest.raises(ValidationError, match="32 bytes"):
            Account(address="abc")

    def test_not_string(self) -> None:
        """Non-string values are rejected."""
        with pytest.raises(ValidationError, match="must be a string"):
            Account(address=123)
