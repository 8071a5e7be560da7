"""
Subscription service layer.
"""

from school_fees.services.subscription.subscription_service import SubscriptionService

__all__ = [
    "SubscriptionService",
]
