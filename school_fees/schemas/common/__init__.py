"""
Common schema building blocks.
"""

from school_fees.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
)

__all__ = [
    "BaseCreateSchema",
    "BaseResponseSchema",
    "BaseSchema",
]
