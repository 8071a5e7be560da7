"""
Subscription model.

Links a student to exactly one course or service for a date range.
Subscriptions are ended by setting end_date and are never hard-deleted
while allocations reference them.
"""

from datetime import date as Date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    CheckConstraint,
    Date as SQLDate,
    ForeignKey,
    Index,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_fees.models.base.base_model import TimestampModel
from school_fees.models.base.enums import OfferingType

if TYPE_CHECKING:
    from school_fees.models.student.student import Student
    from school_fees.models.catalog.course import Course
    from school_fees.models.catalog.service import Service


class Subscription(TimestampModel):
    """Enrolment of a student in a course or a service."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint(
            "(course_id IS NULL) <> (service_id IS NULL)",
            name="ck_subscriptions_one_offering",
        ),
        CheckConstraint("discount_amount >= 0", name="ck_subscriptions_discount_non_negative"),
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date",
            name="ck_subscriptions_date_range",
        ),
        Index("ix_subscriptions_student_dates", "student_id", "start_date", "end_date"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("students.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    service_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("services.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    start_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    end_date: Mapped[Optional[Date]] = mapped_column(SQLDate, nullable=True)
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Flat discount subtracted from this subscription's monthly fee",
    )

    student: Mapped["Student"] = relationship("Student", back_populates="subscriptions")
    course: Mapped[Optional["Course"]] = relationship("Course")
    service: Mapped[Optional["Service"]] = relationship("Service")

    @property
    def offering_type(self) -> Optional[OfferingType]:
        """Course or service, None when the row breaks the one-offering rule."""
        if self.course_id and not self.service_id:
            return OfferingType.COURSE
        if self.service_id and not self.course_id:
            return OfferingType.SERVICE
        return None

    @property
    def offering_id(self) -> Optional[str]:
        return self.course_id or self.service_id

    def is_active_on(self, day: Date) -> bool:
        """Active iff start_date <= day and (no end_date or end_date >= day)."""
        return self.start_date <= day and (self.end_date is None or self.end_date >= day)

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, student_id={self.student_id}, "
            f"offering={self.offering_id}, start={self.start_date}, end={self.end_date})>"
        )
