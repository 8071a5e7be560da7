"""
Billing service layer.

- Monthly allocation materialization (idempotent batch job)
- Allocation listings, family period statements and status changes
"""

from school_fees.services.billing.allocation_materializer_service import (
    AllocationMaterializerService,
    validate_billing_period,
)
from school_fees.services.billing.fee_allocation_service import FeeAllocationService

__all__ = [
    "AllocationMaterializerService",
    "FeeAllocationService",
    "validate_billing_period",
]
