"""Shared type definitions for the HTTP models.

Large integers travel as decimal strings so JSON clients without
arbitrary-precision numbers can round-trip them; plain JSON integers are
accepted too.
"""

from typing import Annotated, Any

import base58
from pydantic import BeforeValidator, Field

from clmm_quote.constants import U64_MAX, U128_MAX

I32_MIN = -(2**31)
I32_MAX = 2**31 - 1


def _parse_int(value: Any, type_name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{type_name} must be an integer, got bool")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{type_name} must be string or int, got {type(value).__name__}")
    try:
        return int(value)
    except ValueError as err:
        raise ValueError(f"{type_name} must be a decimal integer string: '{value}'") from err


def _range_validator(type_name: str, minimum: int, maximum: int):
    def validate(value: Any) -> int:
        int_value = _parse_int(value, type_name)
        if int_value < minimum or int_value > maximum:
            raise ValueError(f"{type_name} out of range: {value} not in [{minimum}, {maximum}]")
        return int_value

    return validate


validate_u64 = _range_validator("U64", 0, U64_MAX)
validate_u128 = _range_validator("U128", 0, U128_MAX)
validate_i32 = _range_validator("I32", I32_MIN, I32_MAX)
validate_i128 = _range_validator("I128", -(2**127), 2**127 - 1)


def validate_pubkey(value: Any) -> str:
    """Validate a base58-encoded 32-byte public key.

    Raises:
        ValueError: If value is not base58 or does not decode to 32 bytes
    """
    if not isinstance(value, str):
        raise ValueError(f"Public key must be a string, got {type(value).__name__}")
    try:
        raw = base58.b58decode(value)
    except ValueError as err:
        raise ValueError(f"Public key is not base58: '{value}'") from err
    if len(raw) != 32:
        raise ValueError(f"Public key must decode to 32 bytes, got {len(raw)}: '{value}'")
    return value


# 64-bit unsigned integer (token amounts, timestamps)
U64 = Annotated[int, BeforeValidator(validate_u64), Field(description="u64 as decimal string")]

# 128-bit unsigned integer (sqrt prices, liquidity, fee growth)
U128 = Annotated[int, BeforeValidator(validate_u128), Field(description="u128 as decimal string")]

# 128-bit signed integer (liquidity net)
I128 = Annotated[int, BeforeValidator(validate_i128), Field(description="i128 as decimal string")]

# 32-bit signed integer (tick indices)
I32 = Annotated[int, BeforeValidator(validate_i32)]

# Solana-style public key
Pubkey = Annotated[str, BeforeValidator(validate_pubkey)]


__all__ = [
    "U64",
    "U128",
    "I128",
    "I32",
    "Pubkey",
    "validate_u64",
    "validate_u128",
    "validate_i128",
    "validate_i32",
    "validate_pubkey",
]
