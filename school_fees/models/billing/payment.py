"""
Payment Model

Family-level payment that settles one or more fee allocations.
"""

from datetime import date as Date
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date as SQLDate,
    Enum,
    ForeignKey,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_fees.models.base.base_model import TimestampModel
from school_fees.models.base.enums import PaymentMethod

if TYPE_CHECKING:
    from school_fees.models.billing.fee_allocation import FeeAllocation
    from school_fees.models.student.family import Family


class Payment(TimestampModel):
    """Money received from a family."""

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )

    family_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("families.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )
    method: Mapped[PaymentMethod] = mapped_column(
        Enum(PaymentMethod, name="payment_method_enum"),
        nullable=False,
    )
    reference: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Bank/UPI/cheque reference supplied by the payer",
    )
    payment_date: Mapped[Date] = mapped_column(SQLDate, nullable=False, index=True)

    family: Mapped["Family"] = relationship("Family", back_populates="payments")
    allocations: Mapped[List["FeeAllocation"]] = relationship(
        "FeeAllocation",
        back_populates="payment",
    )

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, family_id={self.family_id}, "
            f"amount={self.amount}, method={self.method})>"
        )
