from datetime import date
from decimal import Decimal

import pytest

from school_fees.core.exceptions import ErrorCode
from school_fees.models import OfferingType, Subscription
from school_fees.schemas.subscription import SubscriptionCreate
from school_fees.services.subscription import SubscriptionService


@pytest.fixture
def student(seed):
    return seed.student(seed.family())


def test_enroll_in_course(store, seed, student):
    course = seed.course()

    result = SubscriptionService(store).enroll(
        student.id,
        SubscriptionCreate(course_id=course.id, start_date=date(2024, 6, 1), discount_amount=Decimal("250")),
    )

    assert result.is_success
    subscription = result.data
    assert subscription.student_id == student.id
    assert subscription.offering_type == OfferingType.COURSE
    assert subscription.start_date == date(2024, 6, 1)
    assert subscription.end_date is None
    assert subscription.discount_amount == Decimal("250.00")


def test_enroll_in_service(store, seed, student):
    service = seed.service()

    result = SubscriptionService(store).enroll(
        student.id, SubscriptionCreate(service_id=service.id, start_date=date(2024, 6, 1))
    )

    assert result.data.offering_type == OfferingType.SERVICE
    assert result.data.service_id == service.id


@pytest.mark.parametrize("both", [True, False])
def test_enroll_needs_exactly_one_offering(store, seed, student, both):
    request = (
        SubscriptionCreate(course_id=seed.course().id, service_id=seed.service().id)
        if both
        else SubscriptionCreate()
    )

    result = SubscriptionService(store).enroll(student.id, request)

    assert result.error.code == ErrorCode.VALIDATION_ERROR
    assert result.error.status_code == 400


def test_enroll_rejects_negative_discount(store, seed, student):
    result = SubscriptionService(store).enroll(
        student.id, SubscriptionCreate(course_id=seed.course().id, discount_amount=Decimal("-1"))
    )

    assert result.error.code == ErrorCode.VALIDATION_ERROR


def test_enroll_unknown_course_or_student(store, seed, student):
    service = SubscriptionService(store)

    unknown_course = service.enroll(student.id, SubscriptionCreate(course_id="missing"))
    unknown_student = service.enroll("missing", SubscriptionCreate(course_id=seed.course().id))

    assert unknown_course.error.details["resource_type"] == "Course"
    assert unknown_student.error.details["resource_type"] == "Student"


def test_end_subscription(store, seed, session, student):
    sub = seed.subscription(student, course=seed.course(), start=date(2024, 1, 1))

    result = SubscriptionService(store).end_subscription(sub.id, date(2024, 6, 30))

    assert result.data.end_date == date(2024, 6, 30)
    assert session.get(Subscription, sub.id).is_active_on(date(2024, 7, 1)) is False


def test_end_subscription_twice_is_rejected(store, seed, student):
    sub = seed.subscription(student, course=seed.course(), end=date(2024, 3, 31))

    result = SubscriptionService(store).end_subscription(sub.id, date(2024, 6, 30))

    assert result.error.code == ErrorCode.VALIDATION_ERROR


def test_end_before_start_is_rejected(store, seed, student):
    sub = seed.subscription(student, course=seed.course(), start=date(2024, 6, 1))

    result = SubscriptionService(store).end_subscription(sub.id, date(2024, 5, 31))

    assert result.error.code == ErrorCode.VALIDATION_ERROR


def test_end_unknown_subscription(store):
    result = SubscriptionService(store).end_subscription("missing")

    assert result.error.code == ErrorCode.NOT_FOUND


def test_list_subscriptions(store, seed, student):
    seed.subscription(student, course=seed.course("Old"), start=date(2023, 1, 1), end=date(2023, 12, 31))
    current = seed.subscription(student, course=seed.course("Current"), start=date(2024, 1, 1))
    service = SubscriptionService(store)

    everything = service.list_subscriptions(student.id)
    active = service.list_subscriptions(student.id, active_on=date(2024, 6, 15))

    assert len(everything.data) == 2
    assert everything.metadata["count"] == 2
    assert [s.id for s in active.data] == [current.id]
    assert service.list_subscriptions("missing").error.code == ErrorCode.NOT_FOUND
