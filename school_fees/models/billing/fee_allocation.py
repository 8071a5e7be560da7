"""
Fee Allocation Model

A materialized monthly obligation of one student for one subscription.
Rows are created by the monthly materializer and afterwards only change
in their payment fields.
"""

from datetime import date as Date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date as SQLDate,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_fees.models.base.base_model import TimestampModel
from school_fees.models.base.enums import AllocationStatus

if TYPE_CHECKING:
    from school_fees.models.billing.payment import Payment
    from school_fees.models.student.student import Student
    from school_fees.models.student.subscription import Subscription


class FeeAllocation(TimestampModel):
    """
    Fee owed by a student for one subscription in one billing period.

    The family discount is never stored here; it is applied when a
    family's allocations are aggregated.
    """

    __tablename__ = "fee_allocations"
    __table_args__ = (
        UniqueConstraint(
            "student_id",
            "subscription_id",
            "month",
            "year",
            name="uq_fee_allocations_student_subscription_period",
        ),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_fee_allocations_month"),
        CheckConstraint("amount >= 0", name="ck_fee_allocations_amount_non_negative"),
        CheckConstraint("amount_paid >= 0", name="ck_fee_allocations_paid_non_negative"),
        Index("ix_fee_allocations_period", "year", "month"),
        Index("ix_fee_allocations_status_due", "status", "due_date"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("students.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    subscription_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("subscriptions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    payment_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Billing period
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    # Amounts
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    amount_paid: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        default=Decimal("0.00"),
    )

    # Status
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[AllocationStatus] = mapped_column(
        Enum(AllocationStatus, name="allocation_status_enum"),
        nullable=False,
        default=AllocationStatus.PENDING,
        index=True,
    )
    due_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    paid_date: Mapped[Optional[Date]] = mapped_column(SQLDate, nullable=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student", back_populates="allocations")
    subscription: Mapped["Subscription"] = relationship("Subscription")
    payment: Mapped[Optional["Payment"]] = relationship(
        "Payment",
        back_populates="allocations",
    )

    @property
    def balance(self) -> Decimal:
        """Amount still owed on this allocation."""
        remaining = self.amount - (self.amount_paid or Decimal("0"))
        return remaining if remaining > 0 else Decimal("0.00")

    def __repr__(self) -> str:
        return (
            f"<FeeAllocation(id={self.id}, student_id={self.student_id}, "
            f"period={self.month}/{self.year}, amount={self.amount}, status={self.status})>"
        )
