"""
Family discount snapshot.

Freezes a family's discount for one billing period so that later
changes to the family discount do not rewrite past statements.
"""

from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from school_fees.models.base.base_model import TimestampModel


class FamilyDiscountSnapshot(TimestampModel):
    """Family discount in force for a (month, year) billing period."""

    __tablename__ = "family_discount_snapshots"
    __table_args__ = (
        UniqueConstraint(
            "family_id",
            "month",
            "year",
            name="uq_family_discount_snapshots_family_period",
        ),
        CheckConstraint("discount_amount >= 0", name="ck_family_discount_snapshots_non_negative"),
    )

    family_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<FamilyDiscountSnapshot(family_id={self.family_id}, "
            f"period={self.month}/{self.year}, discount={self.discount_amount})>"
        )
