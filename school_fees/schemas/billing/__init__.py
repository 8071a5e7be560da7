"""
Billing schemas package.
"""

from school_fees.schemas.billing.allocation import (
    AllocationResponse,
    FamilyStatement,
    MarkOverdueRequest,
    MarkOverdueResult,
    MarkPaidRequest,
    MaterializationSummary,
    MaterializeRequest,
)

__all__ = [
    "AllocationResponse",
    "FamilyStatement",
    "MarkOverdueRequest",
    "MarkOverdueResult",
    "MarkPaidRequest",
    "MaterializationSummary",
    "MaterializeRequest",
]
