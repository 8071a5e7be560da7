"""
Family model.

A family groups sibling students and carries the flat discount that is
subtracted once per billing period from the family's combined fee.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, CheckConstraint, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_fees.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from school_fees.models.student.student import Student
    from school_fees.models.billing.payment import Payment


class Family(TimestampModel):
    """Household owning zero or more students."""

    __tablename__ = "families"
    __table_args__ = (
        CheckConstraint("discount_amount >= 0", name="ck_families_discount_non_negative"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Flat discount applied once per billing period",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    students: Mapped[List["Student"]] = relationship(
        "Student",
        back_populates="family",
        order_by="Student.name",
    )
    payments: Mapped[List["Payment"]] = relationship(
        "Payment",
        back_populates="family",
    )

    def __repr__(self) -> str:
        return f"<Family(id={self.id}, name={self.name})>"
