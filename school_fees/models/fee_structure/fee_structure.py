"""
Fee Structure Model

Pricing for a single course or service: an amount charged once per
billing cycle.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    CheckConstraint,
    Enum,
    ForeignKey,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_fees.models.base.base_model import TimestampModel
from school_fees.models.base.enums import BillingCycle

if TYPE_CHECKING:
    from school_fees.models.catalog.course import Course
    from school_fees.models.catalog.service import Service


class FeeStructure(TimestampModel):
    """
    Fee Structure Model

    Owned by exactly one course or one service. The amount covers one
    billing cycle; the calculator normalizes it to a monthly equivalent.
    """

    __tablename__ = "fee_structures"
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_fee_structures_amount_non_negative"),
        CheckConstraint(
            "(course_id IS NULL) <> (service_id IS NULL)",
            name="ck_fee_structures_one_offering",
        ),
    )

    # Foreign Keys
    course_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )
    service_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )

    # Charges
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    billing_cycle: Mapped[BillingCycle] = mapped_column(
        Enum(BillingCycle, name="billing_cycle_enum"),
        nullable=False,
        default=BillingCycle.MONTHLY,
    )

    # Relationships
    course: Mapped[Optional["Course"]] = relationship(
        "Course",
        back_populates="fee_structure",
    )
    service: Mapped[Optional["Service"]] = relationship(
        "Service",
        back_populates="fee_structure",
    )

    def __repr__(self) -> str:
        return (
            f"<FeeStructure(id={self.id}, amount={self.amount}, "
            f"billing_cycle={self.billing_cycle})>"
        )
