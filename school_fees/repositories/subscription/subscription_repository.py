"""
Subscription Repository

Date-windowed subscription queries. A subscription is active on day D
when start_date <= D and end_date is null or >= D.
"""

from datetime import date as Date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from school_fees.models.student.subscription import Subscription
from school_fees.repositories.base.base_repository import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Subscription data access."""

    def __init__(self, session: Session):
        super().__init__(Subscription, session)

    def find_active(
        self,
        student_id: str,
        as_of: Date,
        until: Optional[Date] = None,
    ) -> List[Subscription]:
        """
        Subscriptions of a student active on ``as_of``.

        When ``until`` is given, returns subscriptions active at any
        point in the window [as_of, until] instead.
        """
        window_end = until or as_of
        with self.db_operation("find_active", rollback=False):
            return (
                self.db.query(Subscription)
                .options(
                    joinedload(Subscription.course),
                    joinedload(Subscription.service),
                )
                .filter(
                    Subscription.student_id == student_id,
                    Subscription.start_date <= window_end,
                    or_(
                        Subscription.end_date.is_(None),
                        Subscription.end_date >= as_of,
                    ),
                )
                .order_by(Subscription.start_date, Subscription.id)
                .all()
            )

    def find_by_student(
        self,
        student_id: str,
        active_on: Optional[Date] = None,
    ) -> List[Subscription]:
        """All subscriptions of a student, optionally only those active on a date."""
        if active_on is not None:
            return self.find_active(student_id, active_on)
        return self.find_by_criteria(
            {"student_id": student_id},
            limit=None,
            order_by=["start_date", "id"],
        )
