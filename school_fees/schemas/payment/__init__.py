"""
Payment schemas package.
"""

from school_fees.schemas.payment.payment import (
    PaymentCreate,
    PaymentResponse,
    PaymentResult,
)

__all__ = [
    "PaymentCreate",
    "PaymentResponse",
    "PaymentResult",
]
