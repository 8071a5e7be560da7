"""
Fee Calculation Service

Computes the monthly fee of a student and of a family:
- Resolves the fee structure of every active subscription
- Normalizes each structure amount to a monthly equivalent
- Subtracts the subscription discount (floored at zero)
- Sums students into a family total and applies the family discount once
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from school_fees.config.settings import Settings, get_settings
from school_fees.core.exceptions import InvalidArgumentError, ResourceNotFoundError
from school_fees.models.student.subscription import Subscription
from school_fees.repositories.store.fee_store import FeeStore
from school_fees.schemas.fee_structure.fee_calculation import (
    FamilyFeeResult,
    FeeLineItem,
    StudentFeeResult,
)
from school_fees.services.base import BaseService, ServiceResult
from school_fees.utils.date_utils import today_utc
from school_fees.utils.money import (
    floor_zero,
    line_amount,
    monthly_equivalent,
    to_money,
    total,
    zero,
)


def price_subscription(
    store: FeeStore,
    subscription: Subscription,
    quantum: Optional[Decimal] = None,
) -> FeeLineItem:
    """
    Monthly line of a single subscription.

    A subscription whose course or service has no fee structure
    contributes a zero line.

    Raises:
        InvalidArgumentError: If the subscription does not reference
            exactly one of a course or a service
    """
    offering_type = subscription.offering_type
    if offering_type is None:
        raise InvalidArgumentError(
            f"Subscription {subscription.id} must reference exactly one of course or service",
            field="subscription_id",
        )

    offering = subscription.course if subscription.course_id else subscription.service
    structure = store.get_fee_structure(
        course_id=subscription.course_id,
        service_id=subscription.service_id,
    )

    if structure is None:
        return FeeLineItem(
            subscription_id=subscription.id,
            offering_type=offering_type,
            offering_id=subscription.offering_id,
            offering_name=getattr(offering, "name", None),
            billing_cycle=None,
            base_amount=zero(quantum),
            monthly_amount=zero(quantum),
            discount_applied=zero(quantum),
            line_amount=zero(quantum),
        )

    monthly = monthly_equivalent(structure.amount, structure.billing_cycle, quantum)
    line = line_amount(monthly, subscription.discount_amount, quantum)
    return FeeLineItem(
        subscription_id=subscription.id,
        offering_type=offering_type,
        offering_id=subscription.offering_id,
        offering_name=getattr(offering, "name", None),
        billing_cycle=structure.billing_cycle,
        base_amount=to_money(structure.amount, quantum),
        monthly_amount=monthly,
        discount_applied=monthly - line,
        line_amount=line,
    )


class FeeCalculationService(BaseService):
    """
    Service for computing monthly student and family fees.

    The family discount is applied only at family level, never per
    student, so siblings do not each receive it.
    """

    def __init__(self, store: FeeStore, config: Optional[Settings] = None):
        super().__init__(store)
        self.settings = config or get_settings()
        self.quantum = self.settings.MONEY_QUANTUM

    # ------------------------------------------------------------------ #
    # Student
    # ------------------------------------------------------------------ #

    def calculate_student_fee(self, student_id: str, as_of: Optional[date] = None) -> StudentFeeResult:
        """
        Monthly fee of one student for the period containing ``as_of``.

        Raises:
            ResourceNotFoundError: Unknown student
            InvalidArgumentError: A subscription breaks the one-offering rule
        """
        as_of = as_of or today_utc()
        student = self.store.get_student(student_id)
        subscriptions = self.store.get_active_subscriptions(student.id, as_of)

        breakdown = [price_subscription(self.store, sub, self.quantum) for sub in subscriptions]

        return StudentFeeResult(
            student_id=student.id,
            student_name=student.name,
            family_id=student.family_id,
            as_of=as_of,
            subtotal=total((item.monthly_amount for item in breakdown), self.quantum),
            item_discount_total=total((item.discount_applied for item in breakdown), self.quantum),
            total=total((item.line_amount for item in breakdown), self.quantum),
            breakdown=breakdown,
        )

    def compute_student_fee(
        self,
        student_id: str,
        as_of: Optional[date] = None,
    ) -> ServiceResult[StudentFeeResult]:
        try:
            result = self.calculate_student_fee(student_id, as_of)
            self._logger.debug(
                "Student fee computed",
                extra={
                    "student_id": student_id,
                    "as_of": str(result.as_of),
                    "total": str(result.total),
                    "lines": len(result.breakdown),
                },
            )
            return ServiceResult.success(result, message="Student fee computed")
        except Exception as e:
            return self._handle_exception(e, "compute student fee", student_id)

    # ------------------------------------------------------------------ #
    # Family
    # ------------------------------------------------------------------ #

    def calculate_family_fee(self, family_id: str, as_of: Optional[date] = None) -> FamilyFeeResult:
        """
        Monthly fee of every student in a family with the family discount applied once.

        A student removed between listing and computing is skipped; any
        other failure fails the whole family.

        Raises:
            ResourceNotFoundError: Unknown family
        """
        as_of = as_of or today_utc()
        family = self.store.get_family(family_id)

        per_student = []
        for student in self.store.get_students_of_family(family.id):
            try:
                per_student.append(self.calculate_student_fee(student.id, as_of))
            except ResourceNotFoundError:
                self._logger.warning(
                    "Student disappeared during family fee computation",
                    extra={"family_id": family.id, "student_id": student.id},
                )

        gross = total((result.total for result in per_student), self.quantum)
        discount = to_money(family.discount_amount, self.quantum)
        applied = min(discount, gross)

        return FamilyFeeResult(
            family_id=family.id,
            family_name=family.name,
            as_of=as_of,
            family_gross=gross,
            family_discount=discount,
            family_discount_applied=applied,
            family_net=floor_zero(gross - discount, self.quantum),
            per_student=per_student,
        )

    def compute_family_fee(
        self,
        family_id: str,
        as_of: Optional[date] = None,
    ) -> ServiceResult[FamilyFeeResult]:
        try:
            result = self.calculate_family_fee(family_id, as_of)
            self._logger.info(
                "Family fee computed",
                extra={
                    "family_id": family_id,
                    "as_of": str(result.as_of),
                    "students": len(result.per_student),
                    "family_gross": str(result.family_gross),
                    "family_net": str(result.family_net),
                },
            )
            return ServiceResult.success(result, message="Family fee computed")
        except Exception as e:
            return self._handle_exception(e, "compute family fee", family_id)
