"""
Database enums shared by models and schemas.
"""

import enum
from decimal import Decimal


class BillingCycle(str, enum.Enum):
    """How often a fee structure amount is charged."""
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    HALF_YEARLY = "HALF_YEARLY"
    YEARLY = "YEARLY"

    @property
    def months(self) -> int:
        """Number of months one charge covers."""
        return _CYCLE_MONTHS[self]

    @property
    def divisor(self) -> Decimal:
        return Decimal(self.months)


_CYCLE_MONTHS = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.QUARTERLY: 3,
    BillingCycle.HALF_YEARLY: 6,
    BillingCycle.YEARLY: 12,
}


class AllocationStatus(str, enum.Enum):
    """Payment state of a monthly fee allocation."""
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class PaymentMethod(str, enum.Enum):
    """Payment method enumeration."""
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CARD = "CARD"
    UPI = "UPI"
    CHEQUE = "CHEQUE"
    OTHER = "OTHER"


class OfferingType(str, enum.Enum):
    """What a subscription is attached to."""
    COURSE = "course"
    SERVICE = "service"


UNPAID_STATUSES = (
    AllocationStatus.PENDING,
    AllocationStatus.PARTIAL,
    AllocationStatus.OVERDUE,
)
