"""
Fee calculation result schemas.

Typed results of the per-student calculator and the per-family
aggregator. Totals are checked against their breakdowns when the
result is built.
"""

from datetime import date as Date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, model_validator

from school_fees.models.base.enums import BillingCycle, OfferingType
from school_fees.schemas.common.base import BaseSchema

__all__ = [
    "FeeLineItem",
    "StudentFeeResult",
    "FamilyFeeResult",
]


class FeeLineItem(BaseSchema):
    """Monthly contribution of one active subscription."""

    subscription_id: str
    offering_type: OfferingType
    offering_id: str
    offering_name: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = Field(
        None,
        description="None when the offering has no fee structure",
    )
    base_amount: Decimal = Field(..., ge=0, description="Fee structure amount per billing cycle")
    monthly_amount: Decimal = Field(..., ge=0, description="Monthly equivalent of base_amount")
    discount_applied: Decimal = Field(..., ge=0, description="Subscription discount actually subtracted")
    line_amount: Decimal = Field(..., ge=0, description="monthly_amount - discount_applied")


class StudentFeeResult(BaseSchema):
    """Monthly fee of one student, before any family discount."""

    student_id: str
    student_name: str
    family_id: str
    as_of: Date
    subtotal: Decimal = Field(..., ge=0)
    item_discount_total: Decimal = Field(..., ge=0)
    total: Decimal = Field(..., ge=0)
    breakdown: List[FeeLineItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_breakdown_sums(self) -> "StudentFeeResult":
        """Breakdown lines must add up exactly to the totals."""
        lines = sum((item.line_amount for item in self.breakdown), Decimal("0"))
        if lines != self.total:
            raise ValueError(f"Breakdown sums to {lines}, total is {self.total}")
        monthly = sum((item.monthly_amount for item in self.breakdown), Decimal("0"))
        if monthly != self.subtotal:
            raise ValueError(f"Monthly amounts sum to {monthly}, subtotal is {self.subtotal}")
        return self


class FamilyFeeResult(BaseSchema):
    """Monthly fee of a family with the family discount applied once."""

    family_id: str
    family_name: str
    as_of: Date
    family_gross: Decimal = Field(..., ge=0)
    family_discount: Decimal = Field(..., ge=0, description="Configured family discount")
    family_discount_applied: Decimal = Field(..., ge=0)
    family_net: Decimal = Field(..., ge=0)
    per_student: List[StudentFeeResult] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_family_totals(self) -> "FamilyFeeResult":
        gross = sum((student.total for student in self.per_student), Decimal("0"))
        if gross != self.family_gross:
            raise ValueError(f"Student totals sum to {gross}, family gross is {self.family_gross}")
        if self.family_net != self.family_gross - self.family_discount_applied:
            raise ValueError("family_net must equal family_gross - family_discount_applied")
        return self
