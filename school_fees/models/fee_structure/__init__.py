"""
Fee structure models package.
"""

from school_fees.models.fee_structure.fee_structure import FeeStructure

__all__ = [
    "FeeStructure",
]
