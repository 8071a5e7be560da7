import logging
from datetime import date
from decimal import Decimal

import pytest

from school_fees.core.exceptions import ErrorCode
from school_fees.models import AllocationStatus, FamilyDiscountSnapshot, FeeAllocation
from school_fees.repositories.store import SqlAlchemyFeeStore
from school_fees.services.billing import AllocationMaterializerService


class BlindDuplicateCheckStore(SqlAlchemyFeeStore):
    """Reports every allocation as missing, like a concurrent run that lost the race."""

    def allocation_exists(self, student_id, subscription_id, month, year):
        return False


class FailAfterStore(SqlAlchemyFeeStore):
    """Fails on the n-th allocation insert."""

    def __init__(self, session, fail_on):
        super().__init__(session)
        self.fail_on = fail_on
        self.inserts = 0

    def create_allocation(self, allocation):
        self.inserts += 1
        if self.inserts == self.fail_on:
            raise RuntimeError("worker killed")
        return super().create_allocation(allocation)


def test_materializes_active_subscriptions(store, seed, snapshot_settings, session):
    family = seed.family()
    seed.standard_student(family)

    result = AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(6, 2024)

    assert result.is_success
    summary = result.data
    assert (summary.month, summary.year) == (6, 2024)
    assert summary.created == 2
    assert summary.skipped == 0
    assert summary.total_amount == Decimal("5500.00")
    assert summary.students_processed == 1

    allocations = session.query(FeeAllocation).all()
    assert sorted(a.amount for a in allocations) == [Decimal("1000.00"), Decimal("4500.00")]
    for allocation in allocations:
        assert allocation.status == AllocationStatus.PENDING
        assert allocation.is_paid is False
        assert allocation.amount_paid == Decimal("0")
        assert allocation.due_date == date(2024, 6, 15)


def test_second_run_is_idempotent(store, seed, snapshot_settings, session):
    family = seed.family()
    seed.standard_student(family, "Asha")
    seed.standard_student(family, "Ravi")
    service = AllocationMaterializerService(store, snapshot_settings)

    first = service.materialize_monthly_allocations(6, 2024).data
    second = service.materialize_monthly_allocations(6, 2024).data

    assert first.created == 4
    assert second.created == 0
    assert second.skipped == 4
    assert second.total_amount == Decimal("0")
    assert session.query(FeeAllocation).count() == 4


def test_family_discount_is_not_baked_into_allocations(store, seed, snapshot_settings, session):
    family = seed.family(discount="1000")
    seed.standard_student(family)

    summary = AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(6, 2024).data

    assert summary.total_amount == Decimal("5500.00")
    assert sum(a.amount for a in session.query(FeeAllocation)) == Decimal("5500.00")


def test_subscriptions_outside_the_period_are_ignored(store, seed, snapshot_settings, session):
    family = seed.family()
    student = seed.student(family)
    seed.subscription(student, course=seed.course("Ended"), start=date(2024, 1, 1), end=date(2024, 5, 31))
    seed.subscription(student, course=seed.course("Future"), start=date(2024, 7, 1))
    mid_month = seed.subscription(student, course=seed.course("Joined"), start=date(2024, 6, 20))
    left = seed.subscription(
        student, course=seed.course("Left"), start=date(2024, 1, 1), end=date(2024, 6, 3)
    )

    summary = AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(6, 2024).data

    assert summary.created == 2
    assert {a.subscription_id for a in session.query(FeeAllocation)} == {mid_month.id, left.id}


def test_student_without_subscriptions_in_period_is_not_processed(store, seed, snapshot_settings):
    family = seed.family()
    student = seed.student(family)
    seed.subscription(student, course=seed.course(), start=date(2023, 1, 1), end=date(2023, 12, 31))

    summary = AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(6, 2024).data

    assert summary.students_processed == 0
    assert summary.created == 0


def test_walks_students_in_batches(store, seed, snapshot_settings, session):
    # MATERIALIZE_BATCH_SIZE is 2 in the fixture
    family = seed.family()
    course = seed.course()
    for name in ("A", "B", "C", "D", "E"):
        seed.subscription(seed.student(family, name=name), course=course)

    summary = AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(6, 2024).data

    assert summary.students_processed == 5
    assert summary.created == 5
    assert summary.total_amount == Decimal("25000.00")


def test_concurrent_insert_counts_as_skipped(session, seed, snapshot_settings):
    family = seed.family()
    seed.standard_student(family)
    AllocationMaterializerService(SqlAlchemyFeeStore(session), snapshot_settings).materialize_monthly_allocations(6, 2024)

    racing = BlindDuplicateCheckStore(session)
    result = AllocationMaterializerService(racing, snapshot_settings).materialize_monthly_allocations(6, 2024)

    assert result.is_success
    assert result.data.created == 0
    assert result.data.skipped == 2
    assert session.query(FeeAllocation).count() == 2


def test_rerun_after_partial_failure_resumes(session, seed, snapshot_settings):
    family = seed.family()
    seed.standard_student(family, "Asha")
    seed.standard_student(family, "Ravi")

    failed = AllocationMaterializerService(
        FailAfterStore(session, fail_on=3), snapshot_settings
    ).materialize_monthly_allocations(6, 2024)

    assert not failed.is_success
    assert failed.error.code == ErrorCode.INTERNAL_ERROR
    assert session.query(FeeAllocation).count() == 2

    resumed = AllocationMaterializerService(
        SqlAlchemyFeeStore(session), snapshot_settings
    ).materialize_monthly_allocations(6, 2024).data

    assert resumed.created == 2
    assert resumed.skipped == 2
    assert session.query(FeeAllocation).count() == 4


@pytest.mark.parametrize(
    "month, year",
    [(13, 2024), (0, 2024), (None, 2024), (6, None), (6, 24), (6, 20245), ("6", 2024), (True, 2024)],
)
def test_invalid_period_is_rejected(store, snapshot_settings, month, year):
    result = AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(month, year)

    assert not result.is_success
    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert result.error.status_code == 400


def test_snapshot_policy_records_family_discount_once(store, seed, snapshot_settings, session):
    family = seed.family(discount="750")
    seed.standard_student(family, "Asha")
    seed.standard_student(family, "Ravi")
    service = AllocationMaterializerService(store, snapshot_settings)

    service.materialize_monthly_allocations(6, 2024)
    service.materialize_monthly_allocations(6, 2024)

    [snapshot] = session.query(FamilyDiscountSnapshot).all()
    assert snapshot.family_id == family.id
    assert (snapshot.month, snapshot.year) == (6, 2024)
    assert snapshot.discount_amount == Decimal("750.00")


def test_retroactive_policy_records_no_snapshot(store, seed, retroactive_settings, session):
    family = seed.family(discount="750")
    seed.standard_student(family)

    AllocationMaterializerService(store, retroactive_settings).materialize_monthly_allocations(6, 2024)

    assert session.query(FamilyDiscountSnapshot).count() == 0


def test_run_logs_its_summary_at_info(store, seed, snapshot_settings, caplog):
    seed.standard_student(seed.family())
    caplog.set_level(logging.INFO)

    result = AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(6, 2024)

    assert result.is_success
    [record] = [r for r in caplog.records if r.getMessage() == "materialize monthly allocations completed"]
    assert record.allocations_created == 2
    assert record.allocations_skipped == 0
    assert record.total_amount == "5500.00"


def test_only_listed_students_are_materialized(store, seed, snapshot_settings, session):
    family = seed.family()
    asha = seed.standard_student(family, "Asha")
    ravi = seed.standard_student(family, "Ravi")
    service = AllocationMaterializerService(store, snapshot_settings)

    subset = service.materialize_monthly_allocations(6, 2024, student_ids=[asha.id]).data

    assert subset.students_processed == 1
    assert subset.created == 2
    assert {a.student_id for a in session.query(FeeAllocation)} == {asha.id}

    rest = service.materialize_monthly_allocations(6, 2024, student_ids=[]).data

    assert rest.created == 2
    assert rest.skipped == 2
    assert {a.student_id for a in session.query(FeeAllocation)} == {asha.id, ravi.id}


def test_unknown_listed_students_are_ignored(store, seed, snapshot_settings):
    seed.standard_student(seed.family())

    summary = AllocationMaterializerService(store, snapshot_settings).materialize_monthly_allocations(
        6, 2024, student_ids=["missing"]
    ).data

    assert summary.students_processed == 0
    assert summary.created == 0
