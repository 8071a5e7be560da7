"""
Payment service layer.
"""

from school_fees.services.payment.payment_service import PaymentService

__all__ = [
    "PaymentService",
]
