"""Conversions between tick indices and Q64.64 square-root prices.

A tick index t corresponds to the price 1.0001^t, stored on chain as
sqrt(1.0001^t) * 2^64. Both directions are computed with integer-only
algorithms so results match the settlement program exactly:

- tick -> sqrt price multiplies precomputed sqrt(1.0001^(2^i)) factors for
  every set bit of |t| (Q96 factors for positive ticks, Q64 for negative).
- sqrt price -> tick takes a 14-bit-precision log2, converts it to
  log base sqrt(1.0001) and resolves the two candidate ticks around the
  error margin by recomputing the upper candidate's price.
"""

from __future__ import annotations

from clmm_quote.constants import (
    MAX_SQRT_PRICE_X64,
    MAX_TICK_INDEX,
    MIN_SQRT_PRICE_X64,
    MIN_TICK_INDEX,
)
from clmm_quote.errors import SqrtPriceOutOfBounds, TickIndexOutOfBounds

# sqrt(1.0001^(2^i)) in Q96 for i = 1..18, applied to positive ticks
_POSITIVE_RATIO_X96 = (
    79236085330515764027303304731,
    79244008939048815603706035061,
    79259858533276714757314932305,
    79291567232598584799939703904,
    79355022692464371645785046466,
    79482085999252804386437311141,
    79736823300114093921829183326,
    80248749790819932309965073892,
    81282483887344747381513967011,
    83390072131320151908154831281,
    87770609709833776024991924138,
    97234110755111693312479820773,
    119332217159966728226237229890,
    179736315981702064433883588727,
    407748233172238350107850275304,
    2098478828474011932436660412517,
    55581415166113811149459800483533,
    38992368544603139932233054999993551,
)
_POSITIVE_BIT0_X96 = 79232123823359799118286999567
_ONE_X96 = 1 << 96

# 1 / sqrt(1.0001^(2^i)) in Q64 for i = 1..18, applied to negative ticks
_NEGATIVE_RATIO_X64 = (
    18444899583751176498,
    18443055278223354162,
    18439367220385604838,
    18431993317065449817,
    18417254355718160513,
    18387811781193591352,
    18329067761203520168,
    18212142134806087854,
    17980523815641551639,
    17526086738831147013,
    16651378430235024244,
    15030750278693429944,
    12247334978882834399,
    8131365268884726200,
    3584323654723342297,
    696457651847595233,
    26294789957452057,
    37481735321082,
)
_NEGATIVE_BIT0_X64 = 18445821805675392311
_ONE_X64 = 1 << 64

# log_{sqrt(1.0001)}(2) in Q32
_LOG_B_2_X32 = 59543866431248
_LOG_B_P_ERR_MARGIN_LOWER_X64 = 184467440737095516
_LOG_B_P_ERR_MARGIN_UPPER_X64 = 15793534762490258745
_BIT_PRECISION = 14


def _sqrt_price_positive(tick: int) -> int:
    ratio = _POSITIVE_BIT0_X96 if tick & 1 else _ONE_X96
    for bit, factor in enumerate(_POSITIVE_RATIO_X96, start=1):
        if tick & (1 << bit):
            ratio = (ratio * factor) >> 96
    return ratio >> 32


def _sqrt_price_negative(tick: int) -> int:
    tick = abs(tick)
    ratio = _NEGATIVE_BIT0_X64 if tick & 1 else _ONE_X64
    for bit, factor in enumerate(_NEGATIVE_RATIO_X64, start=1):
        if tick & (1 << bit):
            ratio = (ratio * factor) >> 64
    return ratio


def _sqrt_price_unchecked(tick: int) -> int:
    if tick > 0:
        return _sqrt_price_positive(tick)
    return _sqrt_price_negative(tick)


def tick_index_to_sqrt_price_x64(tick_index: int) -> int:
    """Convert a tick index to its Q64.64 square-root price.

    Args:
        tick_index: Tick in [MIN_TICK_INDEX, MAX_TICK_INDEX]

    Returns:
        sqrt(1.0001^tick_index) * 2^64, rounded down

    Raises:
        TickIndexOutOfBounds: If tick_index is outside the tick range
    """
    if tick_index < MIN_TICK_INDEX or tick_index > MAX_TICK_INDEX:
        raise TickIndexOutOfBounds(
            f"Tick index {tick_index} outside [{MIN_TICK_INDEX}, {MAX_TICK_INDEX}]"
        )
    return _sqrt_price_unchecked(tick_index)


def sqrt_price_x64_to_tick_index(sqrt_price_x64: int) -> int:
    """Convert a Q64.64 square-root price to the tick whose band contains it.

    The result is the greatest tick t with tick_index_to_sqrt_price_x64(t)
    <= sqrt_price_x64, so exact tick prices round-trip and prices between
    two ticks floor to the lower one.

    Args:
        sqrt_price_x64: Price in [MIN_SQRT_PRICE_X64, MAX_SQRT_PRICE_X64]

    Returns:
        Tick index

    Raises:
        SqrtPriceOutOfBounds: If the price is outside the supported range
    """
    if sqrt_price_x64 < MIN_SQRT_PRICE_X64 or sqrt_price_x64 > MAX_SQRT_PRICE_X64:
        raise SqrtPriceOutOfBounds(
            f"sqrt price {sqrt_price_x64} outside "
            f"[{MIN_SQRT_PRICE_X64}, {MAX_SQRT_PRICE_X64}]"
        )

    msb = sqrt_price_x64.bit_length() - 1
    log2p_integer_x32 = (msb - 64) << 32

    # Normalize to [1, 2) in Q63 and square repeatedly to extract fraction bits
    if msb >= 64:
        r = sqrt_price_x64 >> (msb - 63)
    else:
        r = sqrt_price_x64 << (63 - msb)

    bit = 0x8000000000000000
    log2p_fraction_x64 = 0
    for _ in range(_BIT_PRECISION):
        r *= r
        is_r_more_than_two = r >> 127
        r >>= 63 + is_r_more_than_two
        log2p_fraction_x64 += bit * is_r_more_than_two
        bit >>= 1

    log2p_x32 = log2p_integer_x32 + (log2p_fraction_x64 >> 32)
    logbp_x64 = log2p_x32 * _LOG_B_2_X32

    tick_low = (logbp_x64 - _LOG_B_P_ERR_MARGIN_LOWER_X64) >> 64
    tick_high = (logbp_x64 + _LOG_B_P_ERR_MARGIN_UPPER_X64) >> 64

    if tick_low == tick_high:
        return tick_low
    # tick_high can be one past MAX_TICK_INDEX at the top of the range
    if _sqrt_price_unchecked(tick_high) <= sqrt_price_x64:
        return tick_high
    return tick_low


__all__ = ["tick_index_to_sqrt_price_x64", "sqrt_price_x64_to_tick_index"]
