"""
Base repositories package.
"""

from school_fees.repositories.base.base_repository import BaseRepository, ModelType

__all__ = [
    "BaseRepository",
    "ModelType",
]
