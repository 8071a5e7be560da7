from datetime import date
from decimal import Decimal

import pytest

from school_fees.core.exceptions import ErrorCode, StoreUnavailableError
from school_fees.models import AllocationStatus, FeeAllocation, Payment, PaymentMethod
from school_fees.repositories.store import SqlAlchemyFeeStore
from school_fees.schemas.payment import PaymentCreate
from school_fees.services.billing import AllocationMaterializerService, FeeAllocationService
from school_fees.services.payment import PaymentService

PAID_ON = date(2024, 6, 10)


class FailingUpdateStore(SqlAlchemyFeeStore):
    """Store that loses its connection while applying a payment."""

    def update_allocation(self, allocation, data, commit=True):
        raise StoreUnavailableError("connection reset", operation="update")


@pytest.fixture
def sharma(store, seed, snapshot_settings):
    """Family with two children and a 1000 family discount, May and June materialized."""
    family = seed.family("Sharma", discount="1000")
    seed.standard_student(family, "Asha")
    seed.standard_student(family, "Ravi")

    materializer = AllocationMaterializerService(store, snapshot_settings)
    materializer.materialize_monthly_allocations(5, 2024)
    materializer.materialize_monthly_allocations(6, 2024)
    return family


def pay(store, settings, family, amount, **kwargs):
    request = PaymentCreate(
        family_id=family.id,
        amount=Decimal(amount),
        method=PaymentMethod.UPI,
        payment_date=PAID_ON,
        **kwargs,
    )
    return PaymentService(store, settings).record_payment(request)


def statement(store, settings, family, month, year=2024):
    return FeeAllocationService(store, settings).get_family_statement(family.id, month, year).data


def test_payment_settles_oldest_period_first(store, snapshot_settings, sharma):
    result = pay(store, snapshot_settings, sharma, "10000")

    assert result.is_success
    assert result.data.amount_applied == Decimal("10000.00")
    assert result.data.unapplied_amount == Decimal("0")
    assert result.data.payment.method == PaymentMethod.UPI

    may = statement(store, snapshot_settings, sharma, 5)
    assert may.outstanding == Decimal("0")
    assert {a.status for a in may.allocations} == {AllocationStatus.PAID}
    assert all(a.paid_date == PAID_ON for a in may.allocations)

    june = statement(store, snapshot_settings, sharma, 6)
    assert june.amount_paid == Decimal("0")
    assert june.outstanding == Decimal("10000.00")


def test_family_discount_closes_out_the_period(store, snapshot_settings, sharma):
    # May allocations sum to 11000; the 1000 family discount covers the rest
    result = pay(store, snapshot_settings, sharma, "10000")

    may_rows = [a for a in result.data.allocations if a.month == 5]
    assert len(may_rows) == 4
    assert all(a.is_paid for a in may_rows)
    assert sum(a.amount_paid for a in may_rows) == Decimal("10000.00")
    assert {a.payment_id for a in may_rows} == {result.data.payment.id}


def test_partial_payment(store, snapshot_settings, sharma):
    result = pay(store, snapshot_settings, sharma, "3000")

    assert result.data.amount_applied == Decimal("3000.00")
    may = statement(store, snapshot_settings, sharma, 5)
    assert may.amount_paid == Decimal("3000.00")
    assert may.outstanding == Decimal("7000.00")

    # 3000 never matches a run of balances exactly, so one row is left partial
    statuses = [a.status for a in may.allocations]
    assert statuses.count(AllocationStatus.PARTIAL) == 1
    assert AllocationStatus.PENDING in statuses


def test_overpayment_is_left_unapplied(store, seed, snapshot_settings):
    family = seed.family("Mehta")
    seed.standard_student(family, "Kiran")
    AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(6, 2024)

    result = pay(store, snapshot_settings, family, "6000")

    assert result.data.amount_applied == Decimal("5500.00")
    assert result.data.unapplied_amount == Decimal("500.00")
    assert all(a.status == AllocationStatus.PAID for a in result.data.allocations)


def test_explicit_allocations(store, session, snapshot_settings, sharma):
    target = session.query(FeeAllocation).filter_by(month=6, amount=Decimal("1000.00")).first()

    result = pay(store, snapshot_settings, sharma, "1000", allocation_ids=[target.id])

    [applied] = result.data.allocations
    assert applied.id == target.id
    assert applied.status == AllocationStatus.PAID
    assert applied.payment_id == result.data.payment.id
    assert statement(store, snapshot_settings, sharma, 5).amount_paid == Decimal("0")


def test_payment_already_paid_allocation_is_unapplied(store, session, snapshot_settings, sharma):
    target = session.query(FeeAllocation).filter_by(month=6).first()
    FeeAllocationService(store, snapshot_settings).mark_allocation_paid(target.id)

    result = pay(store, snapshot_settings, sharma, "500", allocation_ids=[target.id])

    assert result.data.amount_applied == Decimal("0")
    assert result.data.unapplied_amount == Decimal("500.00")
    assert result.data.allocations == []


def test_allocation_of_another_family_is_rejected(store, seed, session, snapshot_settings, sharma):
    other = seed.family("Mehta")
    seed.standard_student(other, "Kiran")
    AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(6, 2024)
    sharma_ids = {s.id for s in sharma.students}
    foreign = session.query(FeeAllocation).filter(~FeeAllocation.student_id.in_(sharma_ids)).first()

    result = pay(store, snapshot_settings, sharma, "1000", allocation_ids=[foreign.id])

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert session.query(Payment).count() == 0


def test_unknown_allocation_is_not_found(store, snapshot_settings, sharma):
    result = pay(store, snapshot_settings, sharma, "1000", allocation_ids=["missing"])

    assert result.error.code == ErrorCode.NOT_FOUND
    assert result.error.details["resource_type"] == "FeeAllocation"


@pytest.mark.parametrize("amount", ["0", "-50"])
def test_non_positive_amount_is_rejected(store, snapshot_settings, sharma, amount):
    result = pay(store, snapshot_settings, sharma, amount)

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert result.error.status_code == 400


def test_unknown_family_is_not_found(store, snapshot_settings):
    request = PaymentCreate(family_id="missing", amount=Decimal("100"))

    result = PaymentService(store, snapshot_settings).record_payment(request)

    assert result.error.code == ErrorCode.NOT_FOUND
    assert result.error.details["resource_type"] == "Family"


def test_failure_rolls_back_the_whole_payment(session, snapshot_settings, sharma):
    failing = FailingUpdateStore(session)

    result = PaymentService(failing, snapshot_settings).record_payment(
        PaymentCreate(family_id=sharma.id, amount=Decimal("10000"))
    )

    assert result.error.code == ErrorCode.STORE_UNAVAILABLE
    assert session.query(Payment).count() == 0
    assert all(a.amount_paid == Decimal("0") for a in session.query(FeeAllocation))


def test_payment_across_periods_respects_each_family_discount(store, snapshot_settings, sharma):
    # May and June each gross 11000 with a 1000 family discount, 10000 net apiece
    result = pay(store, snapshot_settings, sharma, "20000")

    assert result.is_success
    assert result.data.amount_applied == Decimal("20000.00")
    assert result.data.unapplied_amount == Decimal("0")

    for month in (5, 6):
        period = statement(store, snapshot_settings, sharma, month)
        assert period.amount_paid == Decimal("10000.00")
        assert period.outstanding == Decimal("0")
        assert {a.status for a in period.allocations} == {AllocationStatus.PAID}


def test_payment_spilling_into_next_period(store, snapshot_settings, sharma):
    result = pay(store, snapshot_settings, sharma, "15000")

    assert result.data.unapplied_amount == Decimal("0")

    may = statement(store, snapshot_settings, sharma, 5)
    assert may.amount_paid == Decimal("10000.00")
    assert may.outstanding == Decimal("0")

    june = statement(store, snapshot_settings, sharma, 6)
    assert june.amount_paid == Decimal("5000.00")
    assert june.outstanding == Decimal("5000.00")
    assert [a.status for a in june.allocations].count(AllocationStatus.PENDING) >= 2
