"""
Dependencies and helpers shared by the v1 routers.

Example usage in a router:
    from fastapi import Depends, APIRouter
    from school_fees.api import deps

    router = APIRouter()

    @router.get("/fees/students/{student_id}")
    def student_fee(student_id: str, service = Depends(deps.get_fee_calculation_service)):
        return deps.unwrap(service.compute_student_fee(student_id))
"""

from typing import TypeVar

from fastapi import HTTPException

from school_fees.dependencies import (
    get_allocation_service,
    get_fee_calculation_service,
    get_materializer_service,
    get_payment_service,
    get_store,
    get_subscription_service,
)
from school_fees.db.session import get_db
from school_fees.services.base import ServiceResult

T = TypeVar("T")


def unwrap(result: ServiceResult[T]) -> T:
    """
    Return the data of a successful result, or raise the HTTP error that
    matches the failure's error code (404, 400, 409, 503, 500).
    """
    if result.is_success:
        return result.data

    error = result.error
    raise HTTPException(status_code=error.status_code, detail=error.to_dict())


__all__ = [
    "get_db",
    "get_store",
    "get_allocation_service",
    "get_fee_calculation_service",
    "get_materializer_service",
    "get_payment_service",
    "get_subscription_service",
    "unwrap",
]
