"""
Subscription schemas package.
"""

from school_fees.schemas.subscription.subscription import (
    SubscriptionCreate,
    SubscriptionEnd,
    SubscriptionResponse,
)

__all__ = [
    "SubscriptionCreate",
    "SubscriptionEnd",
    "SubscriptionResponse",
]
