"""
Catalog Models Package

Courses and services that students subscribe to.
"""

from school_fees.models.catalog.course import Course
from school_fees.models.catalog.service import Service

__all__ = [
    "Course",
    "Service",
]
