from decimal import Decimal

import pytest

from school_fees.models.base.enums import BillingCycle
from school_fees.utils.date_utils import DateUtilsError, due_date_for, month_range
from school_fees.utils.money import floor_zero, line_amount, monthly_equivalent, to_money, total, zero


@pytest.mark.parametrize(
    "amount, cycle, expected",
    [
        ("5000", BillingCycle.MONTHLY, "5000.00"),
        ("12000", BillingCycle.YEARLY, "1000.00"),
        ("9000", BillingCycle.QUARTERLY, "3000.00"),
        ("6000", BillingCycle.HALF_YEARLY, "1000.00"),
        ("1000", BillingCycle.QUARTERLY, "333.33"),
        ("1000", BillingCycle.HALF_YEARLY, "166.67"),
        ("100", BillingCycle.YEARLY, "8.33"),
    ],
)
def test_monthly_equivalent_by_cycle(amount, cycle, expected):
    assert monthly_equivalent(amount, cycle) == Decimal(expected)


def test_rounding_is_half_up():
    assert to_money("2.675") == Decimal("2.68")
    assert to_money("2.665") == Decimal("2.67")
    # 30 / 12 = 2.5 exactly at two places
    assert monthly_equivalent("30", BillingCycle.YEARLY) == Decimal("2.50")
    # 0.06 / 12 = 0.005 rounds up, not to even
    assert monthly_equivalent("0.06", BillingCycle.YEARLY) == Decimal("0.01")


def test_line_amount_is_floored_at_zero():
    assert line_amount(Decimal("5000.00"), Decimal("500")) == Decimal("4500.00")
    assert line_amount(Decimal("100.00"), Decimal("250")) == Decimal("0.00")
    assert line_amount(Decimal("100.00"), None) == Decimal("100.00")


def test_monthly_equivalent_accepts_cycle_values():
    assert monthly_equivalent(Decimal("1200"), "YEARLY") == Decimal("100.00")


def test_month_range_and_due_date():
    first, last = month_range(2024, 2)
    assert (first.day, last.day) == (1, 29)
    assert due_date_for(2024, 6, 15).day == 15
    assert due_date_for(2023, 2, 31).day == 28

    with pytest.raises(DateUtilsError):
        month_range(2024, 13)


def test_whole_unit_quantum():
    unit = Decimal("1")

    assert str(zero(unit)) == "0"
    assert str(to_money(None, unit)) == "0"
    assert monthly_equivalent("1000", BillingCycle.QUARTERLY, unit) == Decimal("333")
    assert str(monthly_equivalent("1000", BillingCycle.HALF_YEARLY, unit)) == "167"
    assert str(floor_zero(Decimal("-5"), unit)) == "0"
    assert str(line_amount(Decimal("333"), "0", unit)) == "333"
    assert str(total([], unit)) == "0"
