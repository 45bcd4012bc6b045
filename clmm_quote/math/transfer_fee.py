"""Token-2022 transfer fee amounts.

A mint with a transfer fee withholds part of every transfer, so the amount
the pool sees differs from the amount the trader sends or receives:

    excluded, fee = transfer_fee_excluded_amount(sent, transfer_fee)
    included, fee = transfer_fee_included_amount(wanted, transfer_fee)

Both helpers accept None for mints without a transfer fee.
"""

from __future__ import annotations

from clmm_quote.constants import TRANSFER_FEE_BPS_DENOMINATOR
from clmm_quote.math.checked import checked_u64, div_round_up_if
from clmm_quote.models.state import TransferFee


def transfer_fee_excluded_amount(amount: int, transfer_fee: TransferFee | None) -> tuple[int, int]:
    """Amount that arrives when amount is transferred.

    The fee rounds up and is capped at max_fee.

    Returns:
        Tuple of (amount after fee, fee)
    """
    if transfer_fee is None or amount == 0 or transfer_fee.fee_bps == 0:
        return amount, 0
    fee = div_round_up_if(amount * transfer_fee.fee_bps, TRANSFER_FEE_BPS_DENOMINATOR, True)
    fee = min(fee, transfer_fee.max_fee)
    return amount - fee, fee


def transfer_fee_included_amount(amount: int, transfer_fee: TransferFee | None) -> tuple[int, int]:
    """Amount to transfer so that amount arrives after the fee.

    Returns:
        Tuple of (amount before fee, fee)

    Raises:
        TokenMaxExceeded: If the amount before fee does not fit in u64
    """
    if transfer_fee is None or amount == 0 or transfer_fee.fee_bps == 0:
        return amount, 0
    if transfer_fee.fee_bps >= TRANSFER_FEE_BPS_DENOMINATOR:
        # Whole transfer is withheld up to the cap
        fee = transfer_fee.max_fee
    else:
        gross = div_round_up_if(
            amount * TRANSFER_FEE_BPS_DENOMINATOR,
            TRANSFER_FEE_BPS_DENOMINATOR - transfer_fee.fee_bps,
            True,
        )
        fee = min(gross - amount, transfer_fee.max_fee)
    return checked_u64(amount + fee), fee


__all__ = ["transfer_fee_excluded_amount", "transfer_fee_included_amount"]
