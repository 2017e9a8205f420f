"""Splits a payback between the funded balance and the residual fee balance."""

from decimal import Decimal
from typing import Any, Tuple

from app.core.enums import DistributionPriority
from app.core.money import ZERO, round_cents, to_decimal


def allocate_payback(
    amount: Any,
    priority: DistributionPriority,
    remaining_payback_amount: Any,
    remaining_fee_amount: Any,
    funding_payback_amount: Any = ZERO,
    residual_fee_amount: Any = ZERO,
) -> Tuple[Decimal, Decimal]:
    """
    Split a payback amount into its funded and fee portions.

    FUND pays the funded balance first: everything goes to it while it
    covers the payback or no fee is left, otherwise the remaining fee is
    taken first and the rest goes to the funded balance. FEE is the mirror
    image. BOTH splits pro rata between the funding's payback amount and
    its residual fees.

    Args:
        amount: Payback amount to split
        priority: Distribution priority of the payback plan
        remaining_payback_amount: Funded balance still to collect
        remaining_fee_amount: Residual fee balance still to collect
        funding_payback_amount: Funding payback amount (BOTH only)
        residual_fee_amount: Total residual fees of the funding (BOTH only)

    Returns:
        Tuple of (funded_amount, fee_amount) adding up to ``amount``

    Raises:
        ValueError: If the priority is unknown
    """
    amount = round_cents(amount)
    remaining_payback = to_decimal(remaining_payback_amount)
    remaining_fee = to_decimal(remaining_fee_amount)

    if priority == DistributionPriority.FUND:
        if remaining_payback >= amount or remaining_fee <= 0:
            return amount, ZERO
        if remaining_fee >= amount:
            return ZERO, amount
        fee = round_cents(max(remaining_fee, ZERO))
        return amount - fee, fee

    if priority == DistributionPriority.FEE:
        if remaining_fee >= amount or remaining_payback <= 0:
            return ZERO, amount
        if remaining_payback >= amount:
            return amount, ZERO
        funded = round_cents(max(remaining_payback, ZERO))
        return funded, amount - funded

    if priority == DistributionPriority.BOTH:
        payback = to_decimal(funding_payback_amount)
        denominator = payback + to_decimal(residual_fee_amount)
        if denominator == 0:
            return ZERO, amount
        funded = round_cents(amount * payback / denominator)
        return funded, amount - funded

    raise ValueError(f"Unknown distribution priority: {priority}")
