"""Program-derived addresses for pool-owned accounts.

Tick arrays and oracles live at addresses derived from the pool program id
and a list of seeds. Derivation hashes the seeds with a one-byte "bump",
trying bumps from 255 downward until the hash is not a valid ed25519 point
(so no private key can exist for it). Addresses are base58 strings.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

import base58

_PDA_MARKER = b"ProgramDerivedAddress"
_MAX_SEED_LENGTH = 32

# ed25519 field prime and curve constant d = -121665 / 121666
_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P

TICK_ARRAY_SEED = b"tick_array"
ORACLE_SEED = b"oracle"


@dataclass(frozen=True)
class ProgramDerivedAddress:
    """A derived address with the bump that produced it."""

    address: str
    bump: int


def decode_pubkey(address: str) -> bytes:
    """Decode a base58 public key.

    Raises:
        ValueError: If the string is not base58 or not 32 bytes long
    """
    raw = base58.b58decode(address)
    if len(raw) != 32:
        raise ValueError(f"Public key must be 32 bytes, got {len(raw)}: {address}")
    return raw


def encode_pubkey(raw: bytes) -> str:
    """Encode 32 bytes as a base58 public key."""
    return base58.b58encode(raw).decode("ascii")


def is_on_curve(raw: bytes) -> bool:
    """Whether 32 bytes decompress to a point on the ed25519 curve.

    Mirrors point decompression: the y coordinate is the low 255 bits and
    the point exists iff (y^2 - 1) / (d * y^2 + 1) is a square mod p.
    """
    y = (int.from_bytes(raw, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    if u == 0:
        return True
    ratio = u * pow(v, _P - 2, _P) % _P
    return pow(ratio, (_P - 1) // 2, _P) == 1


def find_program_address(seeds: list[bytes], program_id: str) -> ProgramDerivedAddress:
    """Derive the canonical (highest bump) address for seeds under a program.

    Args:
        seeds: Seed byte strings, each at most 32 bytes
        program_id: Base58 program id

    Returns:
        ProgramDerivedAddress with the base58 address and bump

    Raises:
        ValueError: If a seed is too long or no bump yields an off-curve hash
    """
    for seed in seeds:
        if len(seed) > _MAX_SEED_LENGTH:
            raise ValueError(f"Seed longer than {_MAX_SEED_LENGTH} bytes: {seed!r}")

    program_bytes = decode_pubkey(program_id)
    prefix = b"".join(seeds)
    for bump in range(255, -1, -1):
        digest = hashlib.sha256(prefix + bytes([bump]) + program_bytes + _PDA_MARKER).digest()
        if not is_on_curve(digest):
            return ProgramDerivedAddress(address=encode_pubkey(digest), bump=bump)
    raise ValueError(f"No viable bump for seeds under program {program_id}")


def get_tick_array_address(
    program_id: str, pool_address: str, start_tick_index: int
) -> ProgramDerivedAddress:
    """Address of the tick array starting at start_tick_index."""
    return find_program_address(
        [TICK_ARRAY_SEED, decode_pubkey(pool_address), str(start_tick_index).encode("ascii")],
        program_id,
    )


def get_oracle_address(program_id: str, pool_address: str) -> ProgramDerivedAddress:
    """Address of the pool's adaptive fee oracle."""
    return find_program_address([ORACLE_SEED, decode_pubkey(pool_address)], program_id)


__all__ = [
    "ProgramDerivedAddress",
    "TICK_ARRAY_SEED",
    "ORACLE_SEED",
    "decode_pubkey",
    "encode_pubkey",
    "is_on_curve",
    "find_program_address",
    "get_tick_array_address",
    "get_oracle_address",
]
