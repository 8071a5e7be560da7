"""
Payment endpoints.
"""
from fastapi import APIRouter, Depends, status

from school_fees.api import deps
from school_fees.schemas.payment import PaymentCreate, PaymentResult
from school_fees.services.payment import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("", response_model=PaymentResult, status_code=status.HTTP_201_CREATED)
def record_payment(
    request: PaymentCreate,
    service: PaymentService = Depends(deps.get_payment_service),
):
    """
    Record a family payment and apply it to allocations, oldest billing
    period first unless specific allocations are given.
    """
    return deps.unwrap(service.record_payment(request))
