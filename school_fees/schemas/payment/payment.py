"""
Family payment schemas.
"""

from datetime import date as Date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from school_fees.models.base.enums import PaymentMethod
from school_fees.schemas.billing.allocation import AllocationResponse
from school_fees.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "PaymentCreate",
    "PaymentResponse",
    "PaymentResult",
]


class PaymentCreate(BaseCreateSchema):
    """
    Payment received from a family.

    Without ``allocation_ids`` the amount is applied to the family's
    unpaid allocations, oldest billing period first.
    """

    family_id: str = Field(..., description="Paying family")
    amount: Decimal = Field(..., description="Amount received")
    method: PaymentMethod = Field(PaymentMethod.CASH, description="Payment method")
    reference: Optional[str] = Field(None, max_length=100, description="Bank/UPI/cheque reference")
    payment_date: Optional[Date] = Field(None, description="Defaults to today")
    allocation_ids: Optional[List[str]] = Field(
        None,
        description="Allocations to settle, in order",
    )


class PaymentResponse(BaseResponseSchema):
    family_id: str
    amount: Decimal
    method: PaymentMethod
    reference: Optional[str] = None
    payment_date: Date


class PaymentResult(BaseSchema):
    """Recorded payment and how it was applied."""

    payment: PaymentResponse
    amount_applied: Decimal = Field(..., ge=0)
    unapplied_amount: Decimal = Field(..., ge=0)
    allocations: List[AllocationResponse] = Field(
        default_factory=list,
        description="Allocations whose payment state changed",
    )
