"""
Fee allocation endpoints: monthly materialization, listings and
payment status changes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from school_fees.api import deps
from school_fees.models.base.enums import AllocationStatus
from school_fees.schemas.billing import (
    AllocationResponse,
    MarkOverdueRequest,
    MarkOverdueResult,
    MarkPaidRequest,
    MaterializationSummary,
    MaterializeRequest,
)
from school_fees.services.billing import AllocationMaterializerService, FeeAllocationService

router = APIRouter(prefix="/allocations", tags=["Fee Allocations"])


@router.post(
    "/materialize",
    response_model=MaterializationSummary,
    status_code=status.HTTP_200_OK,
)
def materialize_allocations(
    request: MaterializeRequest,
    service: AllocationMaterializerService = Depends(deps.get_materializer_service),
):
    """
    Create the allocations of a billing period. Safe to repeat: existing
    allocations are skipped, never duplicated.
    """
    return deps.unwrap(
        service.materialize_monthly_allocations(
            request.month, request.year, student_ids=request.student_ids
        )
    )


@router.get("", response_model=List[AllocationResponse])
def list_allocations(
    student_id: Optional[str] = Query(None),
    family_id: Optional[str] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    allocation_status: Optional[AllocationStatus] = Query(None, alias="status"),
    service: FeeAllocationService = Depends(deps.get_allocation_service),
):
    return deps.unwrap(
        service.list_allocations(
            student_id=student_id,
            family_id=family_id,
            month=month,
            year=year,
            status=allocation_status,
        )
    )


@router.post("/mark-overdue", response_model=MarkOverdueResult)
def mark_overdue(
    request: Optional[MarkOverdueRequest] = None,
    service: FeeAllocationService = Depends(deps.get_allocation_service),
):
    """Flag pending and partially paid allocations past their due date."""
    as_of = request.as_of if request else None
    return deps.unwrap(service.mark_overdue_allocations(as_of))


@router.post("/{allocation_id}/mark-paid", response_model=AllocationResponse)
def mark_paid(
    allocation_id: str,
    request: Optional[MarkPaidRequest] = None,
    service: FeeAllocationService = Depends(deps.get_allocation_service),
):
    paid_date = request.paid_date if request else None
    return deps.unwrap(service.mark_allocation_paid(allocation_id, paid_date))


@router.post("/{allocation_id}/mark-unpaid", response_model=AllocationResponse)
def mark_unpaid(
    allocation_id: str,
    service: FeeAllocationService = Depends(deps.get_allocation_service),
):
    return deps.unwrap(service.mark_allocation_unpaid(allocation_id))
