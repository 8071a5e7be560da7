"""
Student Repository

Student lookups for the fee calculator and the paged student scan used
by the monthly allocation materializer.
"""

from datetime import date as Date
from typing import List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session

from school_fees.models.student.student import Student
from school_fees.models.student.subscription import Subscription
from school_fees.repositories.base.base_repository import BaseRepository


class StudentRepository(BaseRepository[Student]):
    """Student data access."""

    def __init__(self, session: Session):
        super().__init__(Student, session)

    def find_by_family(self, family_id: str) -> List[Student]:
        """Students of a family, ordered by name then id."""
        with self.db_operation("find_by_family", rollback=False):
            return (
                self.db.query(Student)
                .filter(Student.family_id == family_id)
                .order_by(Student.name, Student.id)
                .all()
            )

    def find_billable(
        self,
        period_start: Date,
        period_end: Date,
        after_id: Optional[str] = None,
        limit: int = 200,
        student_ids: Optional[Sequence[str]] = None,
    ) -> List[Student]:
        """
        Students with at least one subscription active during a period.

        Keyset-paginated on id so that callers can walk the whole
        institute in bounded batches.

        Args:
            period_start: First day of the period
            period_end: Last day of the period
            after_id: Return students with an id greater than this
            limit: Batch size
            student_ids: Restrict to these students; None or empty means everyone

        Returns:
            Up to ``limit`` students ordered by id
        """
        with self.db_operation("find_billable", rollback=False):
            overlapping = (
                self.db.query(Subscription.id)
                .filter(
                    Subscription.student_id == Student.id,
                    Subscription.start_date <= period_end,
                    or_(
                        Subscription.end_date.is_(None),
                        Subscription.end_date >= period_start,
                    ),
                )
                .exists()
            )
            query = self.db.query(Student).filter(overlapping)
            if student_ids:
                query = query.filter(Student.id.in_(list(student_ids)))
            if after_id is not None:
                query = query.filter(Student.id > after_id)
            return query.order_by(Student.id).limit(limit).all()
