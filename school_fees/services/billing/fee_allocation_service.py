"""
Fee Allocation Service

Queries and status changes on materialized allocations, plus the family
period statement where the family discount is applied.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from school_fees.config.settings import Settings, get_settings
from school_fees.models.base.enums import AllocationStatus
from school_fees.models.student.family import Family
from school_fees.repositories.store.fee_store import FeeStore
from school_fees.schemas.billing.allocation import (
    AllocationResponse,
    FamilyStatement,
    MarkOverdueResult,
)
from school_fees.services.base import BaseService, ServiceResult
from school_fees.services.billing.allocation_materializer_service import validate_billing_period
from school_fees.utils.date_utils import today_utc
from school_fees.utils.money import floor_zero, to_money, total, zero


class FeeAllocationService(BaseService):
    """Allocation listings, statements and payment status changes."""

    def __init__(self, store: FeeStore, config: Optional[Settings] = None):
        super().__init__(store)
        self.settings = config or get_settings()
        self.quantum = self.settings.MONEY_QUANTUM

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_allocations(
        self,
        student_id: Optional[str] = None,
        family_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[AllocationStatus] = None,
    ) -> ServiceResult[List[AllocationResponse]]:
        try:
            allocations = self.store.list_allocations(
                student_id=student_id,
                family_id=family_id,
                month=month,
                year=year,
                status=status,
            )
            return ServiceResult.success(
                [AllocationResponse.model_validate(a) for a in allocations],
                metadata={"count": len(allocations)},
            )
        except Exception as e:
            return self._handle_exception(e, "list allocations")

    def family_discount_for_period(self, family: Family, month: int, year: int) -> Decimal:
        """
        Family discount that applies to a billing period.

        ``snapshot``: the discount frozen when the period was materialized,
        falling back to the live discount for periods not materialized yet.
        ``retroactive``: always the family's current discount.
        """
        if self.settings.FAMILY_DISCOUNT_POLICY == "snapshot":
            snapshot = self.store.find_discount_snapshot(family.id, month, year)
            if snapshot is not None:
                return to_money(snapshot.discount_amount, self.quantum)
        return to_money(family.discount_amount, self.quantum)

    def build_family_statement(self, family_id: str, month: int, year: int) -> FamilyStatement:
        """
        What a family owes for one period.

        Raises:
            InvalidArgumentError: Bad billing period
            ResourceNotFoundError: Unknown family
        """
        month, year = validate_billing_period(month, year)
        family = self.store.get_family(family_id)
        allocations = self.store.get_family_period_allocations(family.id, month, year)

        gross = total((to_money(a.amount, self.quantum) for a in allocations), self.quantum)
        discount = self.family_discount_for_period(family, month, year)
        applied = min(discount, gross)
        net = gross - applied
        paid = total((to_money(a.amount_paid, self.quantum) for a in allocations), self.quantum)

        return FamilyStatement(
            family_id=family.id,
            month=month,
            year=year,
            discount_policy=self.settings.FAMILY_DISCOUNT_POLICY,
            allocated_gross=gross,
            family_discount=discount,
            family_discount_applied=applied,
            net_payable=net,
            amount_paid=paid,
            outstanding=floor_zero(net - paid, self.quantum),
            allocations=[AllocationResponse.model_validate(a) for a in allocations],
        )

    def get_family_statement(self, family_id: str, month: int, year: int) -> ServiceResult[FamilyStatement]:
        try:
            return ServiceResult.success(self.build_family_statement(family_id, month, year))
        except Exception as e:
            return self._handle_exception(e, "build family statement", family_id)

    # ------------------------------------------------------------------ #
    # Status changes
    # ------------------------------------------------------------------ #

    def mark_allocation_paid(
        self,
        allocation_id: str,
        paid_date: Optional[date] = None,
    ) -> ServiceResult[AllocationResponse]:
        """Settle an allocation in full outside of a recorded payment."""
        try:
            allocation = self.store.get_allocation(allocation_id)
            allocation = self.store.update_allocation(
                allocation,
                {
                    "amount_paid": allocation.amount,
                    "is_paid": True,
                    "status": AllocationStatus.PAID,
                    "paid_date": paid_date or today_utc(),
                },
            )
            self._log_operation("mark allocation paid", allocation_id)
            return ServiceResult.success(AllocationResponse.model_validate(allocation))
        except Exception as e:
            return self._handle_exception(e, "mark allocation paid", allocation_id)

    def mark_allocation_unpaid(self, allocation_id: str) -> ServiceResult[AllocationResponse]:
        """Clear payment state; the allocation is OVERDUE again if its due date has passed."""
        try:
            allocation = self.store.get_allocation(allocation_id)
            status = (
                AllocationStatus.OVERDUE
                if allocation.due_date < today_utc()
                else AllocationStatus.PENDING
            )
            allocation = self.store.update_allocation(
                allocation,
                {
                    "amount_paid": zero(self.quantum),
                    "is_paid": False,
                    "status": status,
                    "paid_date": None,
                    "payment_id": None,
                },
            )
            self._log_operation("mark allocation unpaid", allocation_id, {"status": status.value})
            return ServiceResult.success(AllocationResponse.model_validate(allocation))
        except Exception as e:
            return self._handle_exception(e, "mark allocation unpaid", allocation_id)

    def mark_overdue_allocations(self, as_of: Optional[date] = None) -> ServiceResult[MarkOverdueResult]:
        """Move pending and partially paid allocations past their due date to OVERDUE."""
        as_of = as_of or today_utc()
        try:
            updated = self.store.mark_overdue(as_of)
            self._log_operation("mark overdue allocations", extra={"as_of": str(as_of), "updated": updated})
            return ServiceResult.success(MarkOverdueResult(as_of=as_of, updated=updated))
        except Exception as e:
            return self._handle_exception(e, "mark overdue allocations")
