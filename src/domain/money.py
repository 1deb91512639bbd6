"""Money rounding and VAT / withholding tax computation

All currency values are Decimals rounded half away from zero to the centavo.
The tax rates are fixed for this jurisdiction and are not per-client inputs.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

VAT_RATE = Decimal("0.12")
WITHHOLDING_TAX_RATE = Decimal("0.05")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() keeps floats at their shortest repr (0.1 -> "0.1", not 0.1000000000000000055...)
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    """Round to 2 decimal places, halves away from zero (1.005 -> 1.01, -1.005 -> -1.01)"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AmountBreakdown:
    """
    Monetary fields of one invoice

    base, vat and total are rounded independently, so base + vat can differ
    from total by one centavo. Consumers must not re-derive total from the
    rounded parts.
    """

    base: Decimal
    vat: Decimal
    total: Decimal
    withholding: Decimal
    net: Decimal


def calculate_amounts(
    rate: Number,
    vat_inclusive: bool,
    has_withholding_tax: bool = False,
) -> AmountBreakdown:
    """
    Derive invoice amounts from the rate for one billing period

    Args:
        rate: Contractual rate already scaled to one billing period
        vat_inclusive: True when the rate already contains VAT
        has_withholding_tax: Deduct creditable withholding tax from the total

    Returns:
        AmountBreakdown with every field rounded to the centavo
    """
    rate = to_decimal(rate)

    if vat_inclusive:
        total = rate
        base = total / (1 + VAT_RATE)
        vat = total - base
    else:
        base = rate
        vat = base * VAT_RATE
        total = base + vat

    base = round2(base)
    vat = round2(vat)
    total = round2(total)

    withholding = round2(base * WITHHOLDING_TAX_RATE) if has_withholding_tax else ZERO
    net = round2(total - withholding)

    return AmountBreakdown(
        base=base,
        vat=vat,
        total=total,
        withholding=withholding,
        net=net,
    )
