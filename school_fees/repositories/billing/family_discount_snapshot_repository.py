"""
Family Discount Snapshot Repository
"""

from typing import Optional

from sqlalchemy.orm import Session

from school_fees.models.billing.family_discount_snapshot import FamilyDiscountSnapshot
from school_fees.repositories.base.base_repository import BaseRepository


class FamilyDiscountSnapshotRepository(BaseRepository[FamilyDiscountSnapshot]):
    """Per-period family discount snapshots."""

    def __init__(self, session: Session):
        super().__init__(FamilyDiscountSnapshot, session)

    def find_for_period(
        self,
        family_id: str,
        month: int,
        year: int,
    ) -> Optional[FamilyDiscountSnapshot]:
        with self.db_operation("find_for_period", rollback=False):
            return (
                self.db.query(FamilyDiscountSnapshot)
                .filter(
                    FamilyDiscountSnapshot.family_id == family_id,
                    FamilyDiscountSnapshot.month == month,
                    FamilyDiscountSnapshot.year == year,
                )
                .first()
            )
