"""
SQLAlchemy models for the school fee engine.

Importing this package registers every table on ``Base.metadata``.
"""

from school_fees.models.base import Base, BaseModel, TimestampModel
from school_fees.models.base.enums import (
    AllocationStatus,
    BillingCycle,
    OfferingType,
    PaymentMethod,
)
from school_fees.models.student import Family, Student, Subscription
from school_fees.models.catalog import Course, Service
from school_fees.models.fee_structure import FeeStructure
from school_fees.models.billing import FamilyDiscountSnapshot, FeeAllocation, Payment

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "AllocationStatus",
    "BillingCycle",
    "OfferingType",
    "PaymentMethod",
    "Family",
    "Student",
    "Subscription",
    "Course",
    "Service",
    "FeeStructure",
    "FamilyDiscountSnapshot",
    "FeeAllocation",
    "Payment",
]
