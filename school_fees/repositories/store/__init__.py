"""
Fee store: the injected data-access handle used by the fee services.
"""

from school_fees.repositories.store.fee_store import FeeStore
from school_fees.repositories.store.sqlalchemy_store import SqlAlchemyFeeStore

__all__ = [
    "FeeStore",
    "SqlAlchemyFeeStore",
]
