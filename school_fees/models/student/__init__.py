"""
Student Models Package
"""

from school_fees.models.student.family import Family
from school_fees.models.student.student import Student
from school_fees.models.student.subscription import Subscription

__all__ = [
    "Family",
    "Student",
    "Subscription",
]
