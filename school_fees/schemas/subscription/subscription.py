"""
Subscription schemas: enrolment, unenrolment and views.
"""

from datetime import date as Date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from school_fees.models.base.enums import OfferingType
from school_fees.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "SubscriptionCreate",
    "SubscriptionEnd",
    "SubscriptionResponse",
]


class SubscriptionCreate(BaseCreateSchema):
    """Enrol a student in exactly one course or service."""

    course_id: Optional[str] = Field(None, description="Course to subscribe to")
    service_id: Optional[str] = Field(None, description="Service to subscribe to")
    start_date: Optional[Date] = Field(None, description="Defaults to today")
    discount_amount: Decimal = Field(
        Decimal("0.00"),
        description="Flat discount on the subscription's monthly fee",
    )


class SubscriptionEnd(BaseSchema):
    end_date: Optional[Date] = Field(None, description="Last active day, defaults to today")


class SubscriptionResponse(BaseResponseSchema):
    student_id: str
    course_id: Optional[str] = None
    service_id: Optional[str] = None
    offering_type: Optional[OfferingType] = None
    start_date: Date
    end_date: Optional[Date] = None
    discount_amount: Decimal
