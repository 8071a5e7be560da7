"""
SQLAlchemy implementation of the fee store.

Composes the domain repositories over a single session. One store is
built per request (or per job run) from the session handed out by
``get_db``.
"""

from datetime import date as Date
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

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
from school_fees.repositories.billing import (
    FamilyDiscountSnapshotRepository,
    FeeAllocationRepository,
    PaymentRepository,
)
from school_fees.repositories.fee_structure import (
    CourseRepository,
    FeeStructureRepository,
    ServiceRepository,
)
from school_fees.repositories.store.fee_store import FeeStore
from school_fees.repositories.student import FamilyRepository, StudentRepository
from school_fees.repositories.subscription import SubscriptionRepository


class SqlAlchemyFeeStore(FeeStore):
    """Fee store backed by a SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session
        self.students = StudentRepository(session)
        self.families = FamilyRepository(session)
        self.courses = CourseRepository(session)
        self.services = ServiceRepository(session)
        self.fee_structures = FeeStructureRepository(session)
        self.subscriptions = SubscriptionRepository(session)
        self.allocations = FeeAllocationRepository(session)
        self.snapshots = FamilyDiscountSnapshotRepository(session)
        self.payments = PaymentRepository(session)

    def transaction(self):
        return self.allocations.transaction()

    # Students and families

    def get_student(self, student_id: str) -> Student:
        return self.students.get_by_id(student_id)

    def get_family(self, family_id: str) -> Family:
        return self.families.get_by_id(family_id)

    def get_students_of_family(self, family_id: str) -> List[Student]:
        return self.students.find_by_family(family_id)

    def find_billable_students(
        self,
        period_start: Date,
        period_end: Date,
        after_id: Optional[str] = None,
        limit: int = 200,
        student_ids: Optional[Sequence[str]] = None,
    ) -> List[Student]:
        return self.students.find_billable(
            period_start, period_end, after_id=after_id, limit=limit, student_ids=student_ids
        )

    # Catalog and subscriptions

    def get_course(self, course_id: str) -> Course:
        return self.courses.get_by_id(course_id)

    def get_service(self, service_id: str) -> Service:
        return self.services.get_by_id(service_id)

    def get_fee_structure(
        self,
        course_id: Optional[str] = None,
        service_id: Optional[str] = None,
    ) -> Optional[FeeStructure]:
        return self.fee_structures.find_for_offering(course_id=course_id, service_id=service_id)

    def get_active_subscriptions(
        self,
        student_id: str,
        as_of: Date,
        until: Optional[Date] = None,
    ) -> List[Subscription]:
        return self.subscriptions.find_active(student_id, as_of, until=until)

    def get_subscription(self, subscription_id: str) -> Subscription:
        return self.subscriptions.get_by_id(subscription_id)

    def list_subscriptions(
        self,
        student_id: str,
        active_on: Optional[Date] = None,
    ) -> List[Subscription]:
        return self.subscriptions.find_by_student(student_id, active_on=active_on)

    def create_subscription(self, subscription: Subscription) -> Subscription:
        return self.subscriptions.create(subscription)

    def update_subscription(self, subscription: Subscription, data: Dict[str, Any]) -> Subscription:
        return self.subscriptions.update(subscription, data)

    # Allocations

    def allocation_exists(
        self,
        student_id: str,
        subscription_id: str,
        month: int,
        year: int,
    ) -> bool:
        return self.allocations.exists_for_period(student_id, subscription_id, month, year)

    def create_allocation(self, allocation: FeeAllocation) -> FeeAllocation:
        return self.allocations.create(allocation)

    def get_allocation(self, allocation_id: str) -> FeeAllocation:
        return self.allocations.get_by_id(allocation_id)

    def find_allocations(self, allocation_ids: Sequence[str]) -> List[FeeAllocation]:
        return self.allocations.find_by_ids(allocation_ids)

    def list_allocations(
        self,
        student_id: Optional[str] = None,
        family_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[AllocationStatus] = None,
    ) -> List[FeeAllocation]:
        return self.allocations.find_filtered(
            student_id=student_id,
            family_id=family_id,
            month=month,
            year=year,
            status=status,
        )

    def get_family_period_allocations(self, family_id: str, month: int, year: int) -> List[FeeAllocation]:
        return self.allocations.find_for_family_period(family_id, month, year)

    def get_unpaid_family_allocations(self, family_id: str) -> List[FeeAllocation]:
        return self.allocations.find_unpaid_for_family(family_id)

    def update_allocation(
        self,
        allocation: FeeAllocation,
        data: Dict[str, Any],
        commit: bool = True,
    ) -> FeeAllocation:
        return self.allocations.update(allocation, data, commit=commit)

    def mark_overdue(self, as_of: Date) -> int:
        return self.allocations.mark_overdue(as_of)

    # Family discount snapshots and payments

    def find_discount_snapshot(
        self,
        family_id: str,
        month: int,
        year: int,
    ) -> Optional[FamilyDiscountSnapshot]:
        return self.snapshots.find_for_period(family_id, month, year)

    def create_discount_snapshot(self, snapshot: FamilyDiscountSnapshot) -> FamilyDiscountSnapshot:
        return self.snapshots.create(snapshot)

    def create_payment(self, payment: Payment, commit: bool = True) -> Payment:
        return self.payments.create(payment, commit=commit)
