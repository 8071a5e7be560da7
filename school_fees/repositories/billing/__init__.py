"""
Billing repositories package.
"""

from school_fees.repositories.billing.fee_allocation_repository import FeeAllocationRepository
from school_fees.repositories.billing.family_discount_snapshot_repository import (
    FamilyDiscountSnapshotRepository,
)
from school_fees.repositories.billing.payment_repository import PaymentRepository

__all__ = [
    "FeeAllocationRepository",
    "FamilyDiscountSnapshotRepository",
    "PaymentRepository",
]
