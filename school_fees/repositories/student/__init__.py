"""
Student repositories package.
"""

from school_fees.repositories.student.family_repository import FamilyRepository
from school_fees.repositories.student.student_repository import StudentRepository

__all__ = [
    "FamilyRepository",
    "StudentRepository",
]
