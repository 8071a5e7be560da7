"""
Student core model.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_fees.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from school_fees.models.student.family import Family
    from school_fees.models.student.subscription import Subscription
    from school_fees.models.billing.fee_allocation import FeeAllocation


class Student(TimestampModel):
    """
    Student enrolled at the institute.

    Belongs to exactly one family and holds subscriptions to courses
    and services.
    """

    __tablename__ = "students"

    family_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("families.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    grade: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    family: Mapped["Family"] = relationship("Family", back_populates="students")
    subscriptions: Mapped[List["Subscription"]] = relationship(
        "Subscription",
        back_populates="student",
    )
    allocations: Mapped[List["FeeAllocation"]] = relationship(
        "FeeAllocation",
        back_populates="student",
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.name}, grade={self.grade})>"
