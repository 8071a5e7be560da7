"""
Base services module for the fee engine.

All services follow consistent patterns for:
- Result handling via ServiceResult
- Error management and logging
- Data access through an injected FeeStore
"""

from school_fees.services.base.service_result import (
    ERROR_STATUS_CODES,
    ServiceResult,
    ServiceError,
    ErrorCode,
    ErrorSeverity,
)

from school_fees.services.base.base_service import BaseService


__all__ = [
    # Service Result Types
    "ERROR_STATUS_CODES",
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    "ErrorSeverity",

    # Base Classes
    "BaseService",
]
