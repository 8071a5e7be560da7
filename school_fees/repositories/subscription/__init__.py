"""
Subscription repositories package.
"""

from school_fees.repositories.subscription.subscription_repository import (
    SubscriptionRepository,
)

__all__ = [
    "SubscriptionRepository",
]
