"""
Fee Allocation Repository

Persistence for materialized monthly fee allocations: duplicate checks
for the materializer, filtered listings, family period lookups and the
overdue sweep.
"""

from datetime import date as Date
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from school_fees.models.base.enums import AllocationStatus, UNPAID_STATUSES
from school_fees.models.billing.fee_allocation import FeeAllocation
from school_fees.models.student.student import Student
from school_fees.repositories.base.base_repository import BaseRepository


class FeeAllocationRepository(BaseRepository[FeeAllocation]):
    """Fee allocation data access."""

    def __init__(self, session: Session):
        super().__init__(FeeAllocation, session)

    def exists_for_period(
        self,
        student_id: str,
        subscription_id: str,
        month: int,
        year: int,
    ) -> bool:
        """True if an allocation already exists for the (student, subscription, period) key."""
        with self.db_operation("exists_for_period", rollback=False):
            query = self.db.query(FeeAllocation.id).filter(
                FeeAllocation.student_id == student_id,
                FeeAllocation.subscription_id == subscription_id,
                FeeAllocation.month == month,
                FeeAllocation.year == year,
            )
            return self.db.query(query.exists()).scalar()

    def find_by_ids(self, allocation_ids: Sequence[str]) -> List[FeeAllocation]:
        """Allocations with the given ids, in no particular order."""
        if not allocation_ids:
            return []
        with self.db_operation("find_by_ids", rollback=False):
            return (
                self.db.query(FeeAllocation)
                .filter(FeeAllocation.id.in_(list(allocation_ids)))
                .all()
            )

    def find_filtered(
        self,
        student_id: Optional[str] = None,
        family_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[AllocationStatus] = None,
    ) -> List[FeeAllocation]:
        """
        Allocations matching every given filter.

        Ordered newest period first, then by due date.
        """
        with self.db_operation("find_filtered", rollback=False):
            query = self.db.query(FeeAllocation)
            if family_id is not None:
                query = query.join(Student, Student.id == FeeAllocation.student_id).filter(
                    Student.family_id == family_id
                )
            if student_id is not None:
                query = query.filter(FeeAllocation.student_id == student_id)
            if month is not None:
                query = query.filter(FeeAllocation.month == month)
            if year is not None:
                query = query.filter(FeeAllocation.year == year)
            if status is not None:
                query = query.filter(FeeAllocation.status == status)

            return query.order_by(
                FeeAllocation.year.desc(),
                FeeAllocation.month.desc(),
                FeeAllocation.due_date.asc(),
                FeeAllocation.id.asc(),
            ).all()

    def find_for_family_period(self, family_id: str, month: int, year: int) -> List[FeeAllocation]:
        """Every allocation of the family's students for one billing period."""
        with self.db_operation("find_for_family_period", rollback=False):
            return (
                self.db.query(FeeAllocation)
                .join(Student, Student.id == FeeAllocation.student_id)
                .filter(
                    Student.family_id == family_id,
                    FeeAllocation.month == month,
                    FeeAllocation.year == year,
                )
                .order_by(FeeAllocation.student_id, FeeAllocation.id)
                .all()
            )

    def find_unpaid_for_family(self, family_id: str) -> List[FeeAllocation]:
        """Unpaid allocations of a family, oldest billing period first."""
        with self.db_operation("find_unpaid_for_family", rollback=False):
            return (
                self.db.query(FeeAllocation)
                .join(Student, Student.id == FeeAllocation.student_id)
                .filter(
                    Student.family_id == family_id,
                    FeeAllocation.status.in_(UNPAID_STATUSES),
                )
                .order_by(
                    FeeAllocation.year.asc(),
                    FeeAllocation.month.asc(),
                    FeeAllocation.due_date.asc(),
                    FeeAllocation.id.asc(),
                )
                .all()
            )

    def mark_overdue(self, as_of: Date) -> int:
        """
        Move pending and partially paid allocations past their due date to OVERDUE.

        Returns:
            Number of rows updated
        """
        with self.db_operation("mark_overdue"):
            updated = (
                self.db.query(FeeAllocation)
                .filter(
                    FeeAllocation.status.in_(
                        [AllocationStatus.PENDING, AllocationStatus.PARTIAL]
                    ),
                    FeeAllocation.due_date < as_of,
                )
                .update(
                    {FeeAllocation.status: AllocationStatus.OVERDUE},
                    synchronize_session=False,
                )
            )
            self.db.commit()
            # Bulk update bypasses the identity map
            self.db.expire_all()
            return updated
