"""
Fee computation endpoints: monthly fee of a student or a family.
"""
from datetime import date as Date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from school_fees.api import deps
from school_fees.schemas.fee_structure import FamilyFeeResult, StudentFeeResult
from school_fees.services.fee_structure import FeeCalculationService

router = APIRouter(prefix="/fees", tags=["Fees"])


@router.get("/students/{student_id}", response_model=StudentFeeResult)
def get_student_fee(
    student_id: str,
    as_of: Optional[Date] = Query(None, alias="date", description="Defaults to today"),
    service: FeeCalculationService = Depends(deps.get_fee_calculation_service),
):
    """
    Monthly fee of a student with a per-subscription breakdown.
    The family discount is not included.
    """
    return deps.unwrap(service.compute_student_fee(student_id, as_of))


@router.get("/families/{family_id}", response_model=FamilyFeeResult)
def get_family_fee(
    family_id: str,
    as_of: Optional[Date] = Query(None, alias="date", description="Defaults to today"),
    service: FeeCalculationService = Depends(deps.get_fee_calculation_service),
):
    """
    Monthly fee of every student in a family, with the family discount
    applied once to the combined total.
    """
    return deps.unwrap(service.compute_family_fee(family_id, as_of))
