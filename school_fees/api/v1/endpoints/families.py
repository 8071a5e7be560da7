"""
Family endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from school_fees.api import deps
from school_fees.schemas.billing import FamilyStatement
from school_fees.services.billing import FeeAllocationService

router = APIRouter(prefix="/families", tags=["Families"])


@router.get("/{family_id}/statement", response_model=FamilyStatement)
def get_family_statement(
    family_id: str,
    month: Optional[int] = Query(None, description="Billing month (1-12)"),
    year: Optional[int] = Query(None, description="Four-digit billing year"),
    service: FeeAllocationService = Depends(deps.get_allocation_service),
):
    """
    Allocated amount, family discount, payments and outstanding balance
    of a family for one billing period.
    """
    return deps.unwrap(service.get_family_statement(family_id, month, year))
