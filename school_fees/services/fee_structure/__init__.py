"""
Fee calculation service layer.

Per-student monthly fee calculation and per-family aggregation with the
family discount applied once per billing period.
"""

from school_fees.services.fee_structure.fee_calculation_service import (
    FeeCalculationService,
    price_subscription,
)

__all__ = [
    "FeeCalculationService",
    "price_subscription",
]
