"""
Fee structure repositories package.
"""

from school_fees.repositories.fee_structure.fee_structure_repository import (
    CourseRepository,
    FeeStructureRepository,
    ServiceRepository,
)

__all__ = [
    "CourseRepository",
    "FeeStructureRepository",
    "ServiceRepository",
]
