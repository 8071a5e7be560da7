"""
Subscription endpoints: enrolment and unenrolment.
"""
from datetime import date as Date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from school_fees.api import deps
from school_fees.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionEnd,
    SubscriptionResponse,
)
from school_fees.services.subscription import SubscriptionService

router = APIRouter(tags=["Subscriptions"])


@router.get("/students/{student_id}/subscriptions", response_model=List[SubscriptionResponse])
def list_subscriptions(
    student_id: str,
    active_on: Optional[Date] = Query(None),
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    return deps.unwrap(service.list_subscriptions(student_id, active_on))


@router.post(
    "/students/{student_id}/subscriptions",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
)
def enroll_student(
    student_id: str,
    request: SubscriptionCreate,
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    return deps.unwrap(service.enroll(student_id, request))


@router.post("/subscriptions/{subscription_id}/end", response_model=SubscriptionResponse)
def end_subscription(
    subscription_id: str,
    request: Optional[SubscriptionEnd] = None,
    service: SubscriptionService = Depends(deps.get_subscription_service),
):
    """End a subscription; it stays billable up to and including the end date."""
    end_date = request.end_date if request else None
    return deps.unwrap(service.end_subscription(subscription_id, end_date))
