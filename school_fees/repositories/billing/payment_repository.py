"""
Payment Repository
"""

from typing import List

from sqlalchemy.orm import Session

from school_fees.models.billing.payment import Payment
from school_fees.repositories.base.base_repository import BaseRepository


class PaymentRepository(BaseRepository[Payment]):
    """Family payment records."""

    def __init__(self, session: Session):
        super().__init__(Payment, session)

    def find_by_family(self, family_id: str) -> List[Payment]:
        """Payments of a family, most recent first."""
        return self.find_by_criteria(
            {"family_id": family_id},
            limit=None,
            order_by=["-payment_date", "-created_at"],
        )
