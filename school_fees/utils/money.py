"""
Money arithmetic for fee computation.

Every monthly equivalent is quantized once, to the currency quantum with
ROUND_HALF_UP. Everything derived from it afterwards is a sum or a
difference of quantized values, so totals always equal the sum of
their lines.

Each helper takes an optional ``quantum``; services pass the one from
their injected settings, and the process settings are the fallback.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from school_fees.config.settings import settings
from school_fees.models.base.enums import BillingCycle

Number = Union[Decimal, int, str]


def _quantum(quantum: Optional[Decimal]) -> Decimal:
    return quantum if quantum is not None else settings.MONEY_QUANTUM


def zero(quantum: Optional[Decimal] = None) -> Decimal:
    """Zero at the scale of the currency quantum."""
    return Decimal(0).quantize(_quantum(quantum))


def to_money(value: Optional[Number], quantum: Optional[Decimal] = None) -> Decimal:
    """Convert to Decimal and round half-up to the currency quantum."""
    if value is None:
        return zero(quantum)
    return Decimal(str(value)).quantize(_quantum(quantum), rounding=ROUND_HALF_UP)


def floor_zero(value: Decimal, quantum: Optional[Decimal] = None) -> Decimal:
    """max(0, value), keeping the quantized scale."""
    return value if value > 0 else zero(quantum)


def monthly_equivalent(
    amount: Number,
    billing_cycle: BillingCycle,
    quantum: Optional[Decimal] = None,
) -> Decimal:
    """
    Normalize a per-cycle fee to one month.

    MONTHLY x1, QUARTERLY /3, HALF_YEARLY /6, YEARLY /12.
    """
    cycle = BillingCycle(billing_cycle)
    return to_money(Decimal(str(amount)) / cycle.divisor, quantum)


def line_amount(
    monthly: Decimal,
    discount: Optional[Number],
    quantum: Optional[Decimal] = None,
) -> Decimal:
    """Monthly amount less the line discount, never negative."""
    return floor_zero(monthly - to_money(discount, quantum), quantum)


def total(values: Iterable[Decimal], quantum: Optional[Decimal] = None) -> Decimal:
    return sum(values, zero(quantum))
