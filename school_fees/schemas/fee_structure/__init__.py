"""
Fee calculation schemas package.
"""

from __future__ import annotations

from school_fees.schemas.fee_structure.fee_calculation import (
    FamilyFeeResult,
    FeeLineItem,
    StudentFeeResult,
)

__all__ = [
    "FamilyFeeResult",
    "FeeLineItem",
    "StudentFeeResult",
]
