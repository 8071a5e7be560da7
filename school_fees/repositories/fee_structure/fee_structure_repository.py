"""
Fee Structure Repository

Resolves the fee structure owned by a course or a service.
"""

from typing import Optional

from sqlalchemy.orm import Session

from school_fees.models.catalog.course import Course
from school_fees.models.catalog.service import Service
from school_fees.models.fee_structure.fee_structure import FeeStructure
from school_fees.repositories.base.base_repository import BaseRepository


class FeeStructureRepository(BaseRepository[FeeStructure]):
    """Fee structure lookups."""

    def __init__(self, session: Session):
        super().__init__(FeeStructure, session)

    def find_for_offering(
        self,
        course_id: Optional[str] = None,
        service_id: Optional[str] = None,
    ) -> Optional[FeeStructure]:
        """
        Fee structure of a course or service.

        Args:
            course_id: Course identifier
            service_id: Service identifier

        Returns:
            The fee structure, or None when the offering has none
        """
        with self.db_operation("find_for_offering", rollback=False):
            query = self.db.query(FeeStructure)
            if course_id:
                return query.filter(FeeStructure.course_id == course_id).first()
            if service_id:
                return query.filter(FeeStructure.service_id == service_id).first()
            return None


class CourseRepository(BaseRepository[Course]):
    def __init__(self, session: Session):
        super().__init__(Course, session)


class ServiceRepository(BaseRepository[Service]):
    def __init__(self, session: Session):
        super().__init__(Service, session)
