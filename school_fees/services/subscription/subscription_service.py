"""
Subscription Service

Enrolment of students in courses and services, and unenrolment by
ending the subscription. Subscriptions are never deleted so that
allocations keep pointing at them.
"""

from datetime import date
from typing import List, Optional

from school_fees.config.settings import Settings, get_settings
from school_fees.core.exceptions import InvalidArgumentError
from school_fees.models.student.subscription import Subscription
from school_fees.repositories.store.fee_store import FeeStore
from school_fees.schemas.subscription.subscription import SubscriptionCreate, SubscriptionResponse
from school_fees.services.base import BaseService, ServiceResult
from school_fees.utils.date_utils import today_utc
from school_fees.utils.money import to_money


class SubscriptionService(BaseService):
    """Student subscriptions to courses and services."""

    def __init__(self, store: FeeStore, config: Optional[Settings] = None):
        super().__init__(store)
        self.settings = config or get_settings()

    def enroll(
        self,
        student_id: str,
        request: SubscriptionCreate,
    ) -> ServiceResult[SubscriptionResponse]:
        """
        Subscribe a student to exactly one course or service.

        Returns:
            ServiceResult with the new subscription
        """
        try:
            if bool(request.course_id) == bool(request.service_id):
                raise InvalidArgumentError(
                    "Exactly one of course_id or service_id is required",
                    field="course_id",
                )
            discount = to_money(request.discount_amount, self.settings.MONEY_QUANTUM)
            if discount < 0:
                raise InvalidArgumentError("Discount amount cannot be negative", field="discount_amount")

            student = self.store.get_student(student_id)
            if request.course_id:
                self.store.get_course(request.course_id)
            else:
                self.store.get_service(request.service_id)

            subscription = self.store.create_subscription(
                Subscription(
                    student_id=student.id,
                    course_id=request.course_id,
                    service_id=request.service_id,
                    start_date=request.start_date or today_utc(),
                    discount_amount=discount,
                )
            )
            self._log_operation(
                "enroll student",
                subscription.id,
                {"student_id": student.id, "offering_id": subscription.offering_id},
            )
            return ServiceResult.success(
                SubscriptionResponse.model_validate(subscription),
                message="Student enrolled",
            )
        except Exception as e:
            return self._handle_exception(e, "enroll student", student_id)

    def end_subscription(
        self,
        subscription_id: str,
        end_date: Optional[date] = None,
    ) -> ServiceResult[SubscriptionResponse]:
        """Unenrol: the subscription stays active up to and including ``end_date``."""
        try:
            subscription = self.store.get_subscription(subscription_id)
            if subscription.end_date is not None:
                raise InvalidArgumentError(
                    f"Subscription already ended on {subscription.end_date}",
                    field="end_date",
                )

            end_date = end_date or today_utc()
            if end_date < subscription.start_date:
                raise InvalidArgumentError(
                    "End date cannot be before the subscription start date",
                    field="end_date",
                )

            subscription = self.store.update_subscription(subscription, {"end_date": end_date})
            self._log_operation("end subscription", subscription_id, {"end_date": str(end_date)})
            return ServiceResult.success(SubscriptionResponse.model_validate(subscription))
        except Exception as e:
            return self._handle_exception(e, "end subscription", subscription_id)

    def list_subscriptions(
        self,
        student_id: str,
        active_on: Optional[date] = None,
    ) -> ServiceResult[List[SubscriptionResponse]]:
        try:
            student = self.store.get_student(student_id)
            subscriptions = self.store.list_subscriptions(student.id, active_on=active_on)
            return ServiceResult.success(
                [SubscriptionResponse.model_validate(s) for s in subscriptions],
                metadata={"count": len(subscriptions)},
            )
        except Exception as e:
            return self._handle_exception(e, "list subscriptions", student_id)
