"""
Payment Service

Records family payments and applies them to fee allocations:
- Explicit allocations in the given order, else the family's unpaid
  allocations oldest period first
- Each allocation receives at most its balance (PAID when covered,
  PARTIAL otherwise), and each billing period at most its statement
  outstanding, so the family discount counts once per period
- Periods whose statement shows nothing outstanding once the family
  discount is counted are closed out as PAID
"""

from decimal import Decimal
from typing import Dict, List, Optional, Set, Tuple

from school_fees.config.settings import Settings, get_settings
from school_fees.core.exceptions import InvalidArgumentError, ResourceNotFoundError
from school_fees.models.base.enums import AllocationStatus
from school_fees.models.billing.fee_allocation import FeeAllocation
from school_fees.models.billing.payment import Payment
from school_fees.repositories.store.fee_store import FeeStore
from school_fees.schemas.billing.allocation import AllocationResponse
from school_fees.schemas.payment.payment import PaymentCreate, PaymentResponse, PaymentResult
from school_fees.services.base import BaseService, ServiceResult
from school_fees.services.billing.fee_allocation_service import FeeAllocationService
from school_fees.utils.date_utils import today_utc
from school_fees.utils.money import to_money, zero


class PaymentService(BaseService):
    """Family payment recording and reconciliation."""

    def __init__(
        self,
        store: FeeStore,
        config: Optional[Settings] = None,
        allocation_service: Optional[FeeAllocationService] = None,
    ):
        super().__init__(store)
        self.settings = config or get_settings()
        self.quantum = self.settings.MONEY_QUANTUM
        self.allocation_service = allocation_service or FeeAllocationService(store, self.settings)

    def record_payment(self, request: PaymentCreate) -> ServiceResult[PaymentResult]:
        """
        Record a payment and apply it to allocations.

        Args:
            request: Payment details and optional target allocations

        Returns:
            ServiceResult with the payment, applied and unapplied amounts
        """
        try:
            family = self.store.get_family(request.family_id)
            amount = to_money(request.amount, self.quantum)
            if amount <= 0:
                raise InvalidArgumentError("Payment amount must be greater than zero", field="amount")

            targets = self._resolve_targets(family.id, request.allocation_ids)
            payment_date = request.payment_date or today_utc()

            changed: Dict[str, FeeAllocation] = {}
            with self.store.transaction():
                payment = self.store.create_payment(
                    Payment(
                        family_id=family.id,
                        amount=amount,
                        method=request.method,
                        reference=request.reference,
                        payment_date=payment_date,
                    ),
                    commit=False,
                )

                remaining, periods = self._apply(payment, targets, amount, changed)
                for month, year in sorted(periods, key=lambda p: (p[1], p[0])):
                    self._reconcile_period(payment, family.id, month, year, changed)

            result = PaymentResult(
                payment=PaymentResponse.model_validate(payment),
                amount_applied=amount - remaining,
                unapplied_amount=remaining,
                allocations=[AllocationResponse.model_validate(a) for a in changed.values()],
            )
            self._log_operation(
                "record payment",
                payment.id,
                {
                    "family_id": family.id,
                    "amount": str(amount),
                    "applied": str(result.amount_applied),
                    "unapplied": str(remaining),
                    "allocations": len(changed),
                },
            )
            return ServiceResult.success(result, message="Payment recorded")

        except Exception as e:
            return self._handle_exception(e, "record payment", request.family_id)

    def _resolve_targets(
        self,
        family_id: str,
        allocation_ids: Optional[List[str]],
    ) -> List[FeeAllocation]:
        if not allocation_ids:
            return self.store.get_unpaid_family_allocations(family_id)

        found = {a.id: a for a in self.store.find_allocations(allocation_ids)}
        missing = [i for i in allocation_ids if i not in found]
        if missing:
            raise ResourceNotFoundError("FeeAllocation", missing[0])

        student_ids = {s.id for s in self.store.get_students_of_family(family_id)}
        foreign = [i for i in allocation_ids if found[i].student_id not in student_ids]
        if foreign:
            raise InvalidArgumentError(
                f"Allocation {foreign[0]} does not belong to family {family_id}",
                field="allocation_ids",
            )

        ordered, seen = [], set()
        for allocation_id in allocation_ids:
            if allocation_id not in seen:
                seen.add(allocation_id)
                ordered.append(found[allocation_id])
        return ordered

    def _apply(
        self,
        payment: Payment,
        targets: List[FeeAllocation],
        amount: Decimal,
        changed: Dict[str, FeeAllocation],
    ) -> Tuple[Decimal, Set[Tuple[int, int]]]:
        """
        Spread the amount over the targets; returns (unapplied, periods touched).

        A period never receives more than its statement outstanding, so the
        family discount is honoured once per period even when one payment
        covers several periods.
        """
        remaining = amount
        periods: Set[Tuple[int, int]] = set()
        room: Dict[Tuple[int, int], Decimal] = {}

        for allocation in targets:
            if allocation.status == AllocationStatus.PAID:
                continue
            if remaining <= 0:
                break

            period = (allocation.month, allocation.year)
            if period not in room:
                statement = self.allocation_service.build_family_statement(
                    payment.family_id, allocation.month, allocation.year
                )
                room[period] = statement.outstanding
            periods.add(period)

            portion = min(remaining, to_money(allocation.balance, self.quantum), room[period])
            if portion <= 0:
                continue

            paid = to_money(allocation.amount_paid, self.quantum) + portion
            settled = paid >= to_money(allocation.amount, self.quantum)

            self.store.update_allocation(
                allocation,
                {
                    "amount_paid": paid,
                    "is_paid": settled,
                    "status": AllocationStatus.PAID if settled else AllocationStatus.PARTIAL,
                    "paid_date": payment.payment_date if settled else None,
                    "payment_id": payment.id,
                },
                commit=False,
            )
            changed[allocation.id] = allocation
            room[period] -= portion
            remaining -= portion

        return remaining, periods

    def _reconcile_period(
        self,
        payment: Payment,
        family_id: str,
        month: int,
        year: int,
        changed: Dict[str, FeeAllocation],
    ) -> None:
        """Close out a period once the family discount covers what is left."""
        statement = self.allocation_service.build_family_statement(family_id, month, year)
        if statement.outstanding > zero(self.quantum):
            return

        for allocation in self.store.get_family_period_allocations(family_id, month, year):
            if allocation.status == AllocationStatus.PAID:
                continue
            self.store.update_allocation(
                allocation,
                {
                    "is_paid": True,
                    "status": AllocationStatus.PAID,
                    "paid_date": payment.payment_date,
                    "payment_id": payment.id,
                },
                commit=False,
            )
            changed[allocation.id] = allocation

        self._logger.info(
            "Billing period settled with family discount",
            extra={
                "family_id": family_id,
                "month": month,
                "year": year,
                "discount_applied": str(statement.family_discount_applied),
            },
        )
