"""
Base service class providing common functionality for all fee services.
"""

from typing import Optional, Dict, Any

from school_fees.core.exceptions import BaseAppException, ErrorCode
from school_fees.core.logging import get_logger
from school_fees.repositories.store.fee_store import FeeStore
from school_fees.services.base.service_result import (
    ServiceResult,
    ServiceError,
    ErrorSeverity,
)


class BaseService:
    """
    Base service with common behaviors:
    - Injected fee store (no global connection)
    - Shared logger
    - Consistent error handling via ServiceResult
    """

    def __init__(self, store: FeeStore):
        """
        Initialize base service.

        Args:
            store: Data access handle for every read and write
        """
        self.store = store
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Application exceptions keep their own error code; anything else
        becomes an INTERNAL_ERROR.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, name, etc.)
            additional_context: Extra context for logging/debugging

        Returns:
            ServiceResult with failure status and error details
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, BaseAppException):
            severity = (
                ErrorSeverity.WARNING
                if exception.error_code in (ErrorCode.NOT_FOUND, ErrorCode.VALIDATION_ERROR)
                else ErrorSeverity.ERROR
            )
            log = self._logger.warning if severity == ErrorSeverity.WARNING else self._logger.error
            log(f"{operation} failed: {exception.message}", extra=context)
            return ServiceResult.from_app_exception(exception, severity=severity)

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra=context,
        )
        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation}",
                details={
                    "error": str(exception),
                    "entity_ref": str(entity_ref) if entity_ref is not None else None,
                },
                severity=ErrorSeverity.CRITICAL,
            )
        )

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log service operation with standardized format.

        Args:
            operation: Description of the operation
            entity_ref: Reference to the entity involved
            extra: Additional context to log
        """
        context = {"operation": operation}
        if entity_ref is not None:
            context["entity_ref"] = str(entity_ref)
        if extra:
            context.update(extra)
        self._logger.info(f"{operation} completed", extra=context)
