"""
Family Repository
"""

from typing import List

from sqlalchemy.orm import Session

from school_fees.models.student.family import Family
from school_fees.models.student.student import Student
from school_fees.repositories.base.base_repository import BaseRepository


class FamilyRepository(BaseRepository[Family]):
    """Family lookups used by the fee aggregator and payments."""

    def __init__(self, session: Session):
        super().__init__(Family, session)

    def get_student_ids(self, family_id: str) -> List[str]:
        """IDs of every student belonging to the family."""
        with self.db_operation("get_student_ids", rollback=False):
            rows = (
                self.db.query(Student.id)
                .filter(Student.family_id == family_id)
                .order_by(Student.id)
                .all()
            )
            return [row[0] for row in rows]
