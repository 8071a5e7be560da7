"""
Billing Models Package

Fee allocations, payments and per-period family discount snapshots.
"""

from school_fees.models.billing.family_discount_snapshot import FamilyDiscountSnapshot
from school_fees.models.billing.fee_allocation import FeeAllocation
from school_fees.models.billing.payment import Payment

__all__ = [
    "FamilyDiscountSnapshot",
    "FeeAllocation",
    "Payment",
]
