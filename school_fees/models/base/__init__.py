"""
Base models package.

Provides the declarative base, abstract base classes and enums
for all database models.
"""

from school_fees.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
)
from school_fees.models.base.enums import (
    AllocationStatus,
    BillingCycle,
    OfferingType,
    PaymentMethod,
    UNPAID_STATUSES,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "AllocationStatus",
    "BillingCycle",
    "OfferingType",
    "PaymentMethod",
    "UNPAID_STATUSES",
]
