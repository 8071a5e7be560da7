"""
Fee store interface.

The fee services never touch a session or a global connection; they are
handed a ``FeeStore`` and go through it for every read and write. The
SQLAlchemy implementation lives in ``sqlalchemy_store``; tests may
substitute their own subclass.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date as Date
from typing import Any, Dict, List, Optional, Sequence

from school_fees.models.base.enums import AllocationStatus
from school_fees.models.billing.family_discount_snapshot import FamilyDiscountSnapshot
from school_fees.models.billing.fee_allocation import FeeAllocation
from school_fees.models.billing.payment import Payment
from school_fees.models.catalog.course import Course
from school_fees.models.catalog.service import Service
from school_fees.models.fee_structure.fee_structure import FeeStructure
from school_fees.models.student.family import Family
from school_fees.models.student.student import Student
from school_fees.models.student.subscription import Subscription


class FeeStore(ABC):
    """
    Data access boundary of the fee engine.

    ``get_*`` methods raise ``ResourceNotFoundError`` for unknown ids;
    ``find_*`` methods return None or an empty list instead. Any method
    may raise ``StoreUnavailableError`` when the backend cannot be reached.
    """

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Group several writes (made with ``commit=False``) into one commit."""

    # ------------------------------------------------------------------ #
    # Students and families
    # ------------------------------------------------------------------ #

    @abstractmethod
    def get_student(self, student_id: str) -> Student:
        ...

    @abstractmethod
    def get_family(self, family_id: str) -> Family:
        ...

    @abstractmethod
    def get_students_of_family(self, family_id: str) -> List[Student]:
        ...

    @abstractmethod
    def find_billable_students(
        self,
        period_start: Date,
        period_end: Date,
        after_id: Optional[str] = None,
        limit: int = 200,
        student_ids: Optional[Sequence[str]] = None,
    ) -> List[Student]:
        """
        Students with a subscription overlapping the period, keyset-paged by id,
        optionally restricted to ``student_ids``.
        """

    # ------------------------------------------------------------------ #
    # Catalog and subscriptions
    # ------------------------------------------------------------------ #

    @abstractmethod
    def get_course(self, course_id: str) -> Course:
        ...

    @abstractmethod
    def get_service(self, service_id: str) -> Service:
        ...

    @abstractmethod
    def get_fee_structure(
        self,
        course_id: Optional[str] = None,
        service_id: Optional[str] = None,
    ) -> Optional[FeeStructure]:
        ...

    @abstractmethod
    def get_active_subscriptions(
        self,
        student_id: str,
        as_of: Date,
        until: Optional[Date] = None,
    ) -> List[Subscription]:
        """Subscriptions active on ``as_of``, or at any point up to ``until``."""

    @abstractmethod
    def get_subscription(self, subscription_id: str) -> Subscription:
        ...

    @abstractmethod
    def list_subscriptions(
        self,
        student_id: str,
        active_on: Optional[Date] = None,
    ) -> List[Subscription]:
        ...

    @abstractmethod
    def create_subscription(self, subscription: Subscription) -> Subscription:
        ...

    @abstractmethod
    def update_subscription(self, subscription: Subscription, data: Dict[str, Any]) -> Subscription:
        ...

    # ------------------------------------------------------------------ #
    # Allocations
    # ------------------------------------------------------------------ #

    @abstractmethod
    def allocation_exists(
        self,
        student_id: str,
        subscription_id: str,
        month: int,
        year: int,
    ) -> bool:
        ...

    @abstractmethod
    def create_allocation(self, allocation: FeeAllocation) -> FeeAllocation:
        """Insert and commit one allocation; ``ConflictRetryableError`` on a duplicate key."""

    @abstractmethod
    def get_allocation(self, allocation_id: str) -> FeeAllocation:
        ...

    @abstractmethod
    def find_allocations(self, allocation_ids: Sequence[str]) -> List[FeeAllocation]:
        ...

    @abstractmethod
    def list_allocations(
        self,
        student_id: Optional[str] = None,
        family_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[AllocationStatus] = None,
    ) -> List[FeeAllocation]:
        ...

    @abstractmethod
    def get_family_period_allocations(self, family_id: str, month: int, year: int) -> List[FeeAllocation]:
        ...

    @abstractmethod
    def get_unpaid_family_allocations(self, family_id: str) -> List[FeeAllocation]:
        ...

    @abstractmethod
    def update_allocation(
        self,
        allocation: FeeAllocation,
        data: Dict[str, Any],
        commit: bool = True,
    ) -> FeeAllocation:
        ...

    @abstractmethod
    def mark_overdue(self, as_of: Date) -> int:
        ...

    # ------------------------------------------------------------------ #
    # Family discount snapshots and payments
    # ------------------------------------------------------------------ #

    @abstractmethod
    def find_discount_snapshot(
        self,
        family_id: str,
        month: int,
        year: int,
    ) -> Optional[FamilyDiscountSnapshot]:
        ...

    @abstractmethod
    def create_discount_snapshot(self, snapshot: FamilyDiscountSnapshot) -> FamilyDiscountSnapshot:
        """Insert and commit; ``ConflictRetryableError`` if the period already has one."""

    @abstractmethod
    def create_payment(self, payment: Payment, commit: bool = True) -> Payment:
        ...
