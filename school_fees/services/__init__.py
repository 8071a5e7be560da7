"""
Service layer root package.

Each subpackage implements application use-cases on top of:

- SQLAlchemy models (school_fees.models.*)
- The injected fee store (school_fees.repositories.store)
- Pydantic schemas (school_fees.schemas.*)
- Common service infrastructure (school_fees.services.base)

Typical pattern for a service:

    class SomeService(BaseService):
        def some_use_case(self, ...) -> ServiceResult[...]:
            try:
                entity = self.store.get_student(student_id)
                ...
                return ServiceResult.success(result)
            except Exception as e:
                return self._handle_exception(e, "some use case", student_id)
"""

from school_fees.services.billing import AllocationMaterializerService, FeeAllocationService
from school_fees.services.fee_structure import FeeCalculationService
from school_fees.services.payment import PaymentService
from school_fees.services.subscription import SubscriptionService

__all__ = [
    "AllocationMaterializerService",
    "FeeAllocationService",
    "FeeCalculationService",
    "PaymentService",
    "SubscriptionService",
]
