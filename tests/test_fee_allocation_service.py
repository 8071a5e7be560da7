from datetime import date, timedelta
from decimal import Decimal

import pytest

from school_fees.core.exceptions import ErrorCode
from school_fees.models import AllocationStatus, FeeAllocation
from school_fees.services.billing import AllocationMaterializerService, FeeAllocationService


@pytest.fixture
def materialized(store, seed, snapshot_settings):
    """Two families; the first with two children and a 1000 discount."""
    sharma = seed.family("Sharma", discount="1000")
    asha = seed.standard_student(sharma, "Asha")
    ravi = seed.standard_student(sharma, "Ravi")
    mehta = seed.family("Mehta")
    kiran = seed.standard_student(mehta, "Kiran")

    materializer = AllocationMaterializerService(store, snapshot_settings)
    materializer.materialize_monthly_allocations(5, 2024)
    materializer.materialize_monthly_allocations(6, 2024)
    return {"sharma": sharma, "mehta": mehta, "asha": asha, "ravi": ravi, "kiran": kiran}


def test_list_allocations_filters(store, snapshot_settings, materialized):
    service = FeeAllocationService(store, snapshot_settings)

    assert len(service.list_allocations().data) == 12
    assert len(service.list_allocations(family_id=materialized["sharma"].id).data) == 8
    assert len(service.list_allocations(student_id=materialized["kiran"].id, month=6, year=2024).data) == 2
    assert service.list_allocations(status=AllocationStatus.PAID).data == []


def test_list_allocations_newest_period_first(store, snapshot_settings, materialized):
    allocations = FeeAllocationService(store, snapshot_settings).list_allocations(
        student_id=materialized["asha"].id
    ).data

    assert [(a.month, a.year) for a in allocations] == [(6, 2024), (6, 2024), (5, 2024), (5, 2024)]


def test_family_statement_applies_discount_once(store, snapshot_settings, materialized):
    statement = FeeAllocationService(store, snapshot_settings).get_family_statement(
        materialized["sharma"].id, 6, 2024
    ).data

    assert statement.allocated_gross == Decimal("11000.00")
    assert statement.family_discount_applied == Decimal("1000.00")
    assert statement.net_payable == Decimal("10000.00")
    assert statement.amount_paid == Decimal("0")
    assert statement.outstanding == Decimal("10000.00")
    assert len(statement.allocations) == 4


def test_snapshot_policy_keeps_past_discount(store, session, snapshot_settings, materialized):
    family = materialized["sharma"]
    family.discount_amount = Decimal("3000")
    session.commit()

    statement = FeeAllocationService(store, snapshot_settings).get_family_statement(family.id, 6, 2024).data

    assert statement.discount_policy == "snapshot"
    assert statement.family_discount == Decimal("1000.00")
    assert statement.net_payable == Decimal("10000.00")


def test_retroactive_policy_uses_current_discount(store, session, retroactive_settings, materialized):
    family = materialized["sharma"]
    family.discount_amount = Decimal("3000")
    session.commit()

    statement = FeeAllocationService(store, retroactive_settings).get_family_statement(family.id, 6, 2024).data

    assert statement.discount_policy == "retroactive"
    assert statement.family_discount == Decimal("3000.00")
    assert statement.net_payable == Decimal("8000.00")


def test_statement_validates_period_and_family(store, snapshot_settings, materialized):
    service = FeeAllocationService(store, snapshot_settings)

    assert service.get_family_statement(materialized["sharma"].id, 13, 2024).error.code == ErrorCode.VALIDATION_ERROR
    assert service.get_family_statement("missing", 6, 2024).error.code == ErrorCode.NOT_FOUND


def test_mark_paid_and_unpaid(store, session, snapshot_settings, materialized):
    service = FeeAllocationService(store, snapshot_settings)
    allocation = session.query(FeeAllocation).filter_by(month=6).first()

    paid = service.mark_allocation_paid(allocation.id, date(2024, 6, 10)).data
    assert paid.status == AllocationStatus.PAID
    assert paid.is_paid is True
    assert paid.amount_paid == paid.amount
    assert paid.balance == Decimal("0")
    assert paid.paid_date == date(2024, 6, 10)

    unpaid = service.mark_allocation_unpaid(allocation.id).data
    assert unpaid.is_paid is False
    assert unpaid.amount_paid == Decimal("0")
    assert unpaid.paid_date is None
    # due 2024-06-15, long past
    assert unpaid.status == AllocationStatus.OVERDUE


def test_mark_paid_unknown_allocation(store, snapshot_settings):
    result = FeeAllocationService(store, snapshot_settings).mark_allocation_paid("missing")

    assert result.error.code == ErrorCode.NOT_FOUND
    assert result.error.details["resource_type"] == "FeeAllocation"


def test_overdue_sweep(store, session, snapshot_settings, materialized):
    service = FeeAllocationService(store, snapshot_settings)
    may = session.query(FeeAllocation).filter_by(month=5).first()
    service.mark_allocation_paid(may.id)

    result = service.mark_overdue_allocations(date(2024, 6, 1)).data

    assert result.updated == 5
    overdue = service.list_allocations(status=AllocationStatus.OVERDUE).data
    assert {(a.month, a.year) for a in overdue} == {(5, 2024)}

    # already overdue rows are not counted again
    assert service.mark_overdue_allocations(date(2024, 6, 1)).data.updated == 0
    assert service.mark_overdue_allocations(date(2024, 6, 15) + timedelta(days=1)).data.updated == 6
