"""
Fee allocation schemas: materialization requests and summaries,
allocation views, status changes and family period statements.
"""

from datetime import date as Date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from school_fees.models.base.enums import AllocationStatus
from school_fees.schemas.common.base import BaseSchema, BaseResponseSchema

__all__ = [
    "MaterializeRequest",
    "MaterializationSummary",
    "AllocationResponse",
    "MarkPaidRequest",
    "MarkOverdueRequest",
    "MarkOverdueResult",
    "FamilyStatement",
]


class MaterializeRequest(BaseSchema):
    """
    Billing period to materialize.

    Range checks happen in the materializer so that a bad month or year
    is reported as an invalid argument like every other caller sees it.
    """

    month: Optional[int] = Field(None, description="Billing month (1-12)")
    year: Optional[int] = Field(None, description="Four-digit billing year")
    student_ids: Optional[List[str]] = Field(
        None,
        description="Only materialize these students; omit for everyone",
    )


class MaterializationSummary(BaseSchema):
    """Outcome of one materializer run."""

    month: int
    year: int
    created: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)
    total_amount: Decimal = Field(..., ge=0, description="Sum of newly created allocation amounts")
    students_processed: int = Field(..., ge=0)


class AllocationResponse(BaseResponseSchema):
    """A materialized monthly obligation."""

    student_id: str
    subscription_id: str
    month: int
    year: int
    amount: Decimal
    amount_paid: Decimal
    balance: Decimal
    is_paid: bool
    status: AllocationStatus
    due_date: Date
    paid_date: Optional[Date] = None
    payment_id: Optional[str] = None


class MarkPaidRequest(BaseSchema):
    paid_date: Optional[Date] = Field(None, description="Defaults to today")


class MarkOverdueRequest(BaseSchema):
    as_of: Optional[Date] = Field(None, description="Defaults to today")


class MarkOverdueResult(BaseSchema):
    as_of: Date
    updated: int = Field(..., ge=0)


class FamilyStatement(BaseSchema):
    """What a family owes for one billing period, family discount included."""

    family_id: str
    month: int
    year: int
    discount_policy: str
    allocated_gross: Decimal = Field(..., ge=0)
    family_discount: Decimal = Field(..., ge=0, description="Discount in force for the period")
    family_discount_applied: Decimal = Field(..., ge=0)
    net_payable: Decimal = Field(..., ge=0)
    amount_paid: Decimal = Field(..., ge=0)
    outstanding: Decimal = Field(..., ge=0)
    allocations: List[AllocationResponse] = Field(default_factory=list)
