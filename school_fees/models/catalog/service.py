"""
Service model.

Non-academic offerings such as transport, meals or activities.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_fees.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from school_fees.models.fee_structure.fee_structure import FeeStructure


class Service(TimestampModel):
    """Billable service students can subscribe to."""

    __tablename__ = "services"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    fee_structure: Mapped[Optional["FeeStructure"]] = relationship(
        "FeeStructure",
        back_populates="service",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name={self.name})>"
