"""
Monthly Allocation Materializer

Batch job that turns every subscription active during a billing period
into a persisted FeeAllocation. The job is idempotent: an allocation is
created at most once per (student, subscription, month, year), so it can
be re-run after a partial failure and resumes where it stopped.
"""

from decimal import Decimal
from typing import Any, Optional, Sequence, Set, Tuple

from school_fees.config.settings import Settings, get_settings
from school_fees.core.exceptions import ConflictRetryableError, InvalidArgumentError
from school_fees.models.base.enums import AllocationStatus
from school_fees.models.billing.family_discount_snapshot import FamilyDiscountSnapshot
from school_fees.models.billing.fee_allocation import FeeAllocation
from school_fees.models.student.student import Student
from school_fees.repositories.store.fee_store import FeeStore
from school_fees.schemas.billing.allocation import MaterializationSummary
from school_fees.services.base import BaseService, ServiceResult
from school_fees.services.fee_structure.fee_calculation_service import price_subscription
from school_fees.utils.date_utils import due_date_for, month_range
from school_fees.utils.money import to_money, zero


def validate_billing_period(month: Any, year: Any) -> Tuple[int, int]:
    """
    Check a (month, year) billing period.

    Raises:
        InvalidArgumentError: Missing values, non-integers, month outside
            1-12 or a year that is not four digits
    """
    errors = {}
    if month is None:
        errors["month"] = ["month is required"]
    elif isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        errors["month"] = ["month must be an integer between 1 and 12"]

    if year is None:
        errors["year"] = ["year is required"]
    elif isinstance(year, bool) or not isinstance(year, int) or not 1000 <= year <= 9999:
        errors["year"] = ["year must be a four-digit integer"]

    if errors:
        field = next(iter(errors))
        raise InvalidArgumentError(
            f"Invalid billing period: {errors[field][0]}",
            field=field,
            field_errors=errors,
        )
    return month, year


class _RunTotals:
    """Counters of one materializer run."""

    def __init__(self, quantum: Decimal):
        self.created = 0
        self.skipped = 0
        self.total_amount: Decimal = zero(quantum)
        self.students_processed = 0

    def as_dict(self):
        # "created" is a LogRecord attribute and cannot be passed as extra
        return {
            "allocations_created": self.created,
            "allocations_skipped": self.skipped,
            "total_amount": str(self.total_amount),
            "students_processed": self.students_processed,
        }


class AllocationMaterializerService(BaseService):
    """
    Creates the monthly FeeAllocation rows for a billing period.

    The family discount is never baked into allocation rows. Under the
    ``snapshot`` policy the discount in force is frozen per family and
    period alongside the allocations instead.
    """

    def __init__(self, store: FeeStore, config: Optional[Settings] = None):
        super().__init__(store)
        self.settings = config or get_settings()

    def materialize_monthly_allocations(
        self,
        month: Any,
        year: Any,
        student_ids: Optional[Sequence[str]] = None,
    ) -> ServiceResult[MaterializationSummary]:
        """
        Materialize allocations for every student with a subscription
        active at any point during the month.

        Each allocation is committed on its own. A duplicate rejected by
        the store (a concurrent run got there first) counts as skipped.

        Args:
            month: Billing month, 1-12
            year: Four-digit billing year
            student_ids: Only materialize these students; None or empty means everyone

        Returns:
            ServiceResult with the run summary
        """
        totals = _RunTotals(self.settings.MONEY_QUANTUM)
        try:
            month, year = validate_billing_period(month, year)
            period_start, period_end = month_range(year, month)
            due_date = due_date_for(year, month, self.settings.ALLOCATION_DUE_DAY)
            snapshotted: Set[str] = set()

            self._logger.info(
                "Materializing monthly allocations",
                extra={
                    "month": month,
                    "year": year,
                    "batch_size": self.settings.MATERIALIZE_BATCH_SIZE,
                    "student_filter": len(student_ids) if student_ids else None,
                },
            )

            after_id = None
            while True:
                batch = self.store.find_billable_students(
                    period_start,
                    period_end,
                    after_id=after_id,
                    limit=self.settings.MATERIALIZE_BATCH_SIZE,
                    student_ids=student_ids,
                )
                if not batch:
                    break

                for student in batch:
                    if self.settings.FAMILY_DISCOUNT_POLICY == "snapshot" and student.family_id not in snapshotted:
                        self._snapshot_family_discount(student.family_id, month, year)
                        snapshotted.add(student.family_id)

                    self._materialize_student(student, month, year, due_date, totals)
                    totals.students_processed += 1

                after_id = batch[-1].id

            summary = MaterializationSummary(
                month=month,
                year=year,
                created=totals.created,
                skipped=totals.skipped,
                total_amount=totals.total_amount,
                students_processed=totals.students_processed,
            )
            self._log_operation("materialize monthly allocations", f"{month}/{year}", totals.as_dict())
            return ServiceResult.success(summary, message="Monthly allocations materialized")

        except Exception as e:
            return self._handle_exception(
                e,
                "materialize monthly allocations",
                f"{month}/{year}",
                additional_context={"progress": totals.as_dict()},
            )

    def _materialize_student(
        self,
        student: Student,
        month: int,
        year: int,
        due_date,
        totals: _RunTotals,
    ) -> None:
        period_start, period_end = month_range(year, month)
        subscriptions = self.store.get_active_subscriptions(student.id, period_start, until=period_end)

        for subscription in subscriptions:
            if self.store.allocation_exists(student.id, subscription.id, month, year):
                totals.skipped += 1
                continue

            line = price_subscription(self.store, subscription, self.settings.MONEY_QUANTUM)
            allocation = FeeAllocation(
                student_id=student.id,
                subscription_id=subscription.id,
                month=month,
                year=year,
                amount=line.line_amount,
                amount_paid=zero(self.settings.MONEY_QUANTUM),
                is_paid=False,
                status=AllocationStatus.PENDING,
                due_date=due_date,
            )
            try:
                self.store.create_allocation(allocation)
            except ConflictRetryableError:
                self._logger.info(
                    "Allocation created concurrently, skipping",
                    extra={
                        "student_id": student.id,
                        "subscription_id": subscription.id,
                        "month": month,
                        "year": year,
                    },
                )
                totals.skipped += 1
                continue

            totals.created += 1
            totals.total_amount += line.line_amount

    def _snapshot_family_discount(self, family_id: str, month: int, year: int) -> None:
        """Freeze the family's current discount for the period, once."""
        if self.store.find_discount_snapshot(family_id, month, year) is not None:
            return

        family = self.store.get_family(family_id)
        try:
            self.store.create_discount_snapshot(
                FamilyDiscountSnapshot(
                    family_id=family.id,
                    month=month,
                    year=year,
                    discount_amount=to_money(family.discount_amount, self.settings.MONEY_QUANTUM),
                )
            )
        except ConflictRetryableError:
            self._logger.debug(
                "Family discount snapshot already taken",
                extra={"family_id": family_id, "month": month, "year": year},
            )
