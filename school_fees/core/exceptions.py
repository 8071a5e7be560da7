"""
Custom Exceptions for the School Fee Engine

Repositories raise these; services convert them into ServiceResult failures
and the HTTP layer maps them onto status codes.
"""

from typing import Any, Dict, List, Optional
from enum import Enum

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    DATABASE_ERROR = "DATABASE_ERROR"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ResourceNotFoundError(BaseAppException):
    """Raised when a referenced student, family, course, service or allocation does not exist"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.NOT_FOUND, details, 404)
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidArgumentError(BaseAppException):
    """Raised for malformed input or rows that break a data invariant"""

    def __init__(
        self,
        message: str = "Invalid argument",
        field: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if field_errors:
            details["field_errors"] = field_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details, 400)
        self.field = field


class ConflictRetryableError(BaseAppException):
    """Raised when a uniqueness constraint rejects a concurrent insert"""

    def __init__(
        self,
        message: str = "Conflicting write detected",
        table: Optional[str] = None,
        key: Optional[Dict[str, Any]] = None,
    ):
        details = {"table": table, "key": key}
        super().__init__(message, ErrorCode.CONFLICT, details, 409)


class DatabaseError(BaseAppException):
    """Exception raised when database operations fail"""

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        status_code: int = 500
    ):
        details = {
            "operation": operation,
            "table": table
        }
        super().__init__(message, error_code, details, status_code)


class StoreUnavailableError(DatabaseError):
    """Raised when the data store cannot be reached"""

    def __init__(
        self,
        message: str = "Data store unavailable",
        operation: Optional[str] = None,
    ):
        super().__init__(
            message,
            operation=operation,
            error_code=ErrorCode.STORE_UNAVAILABLE,
            status_code=503,
        )


def handle_database_exception(
    exc: SQLAlchemyError,
    operation: Optional[str] = None,
    table: Optional[str] = None,
) -> BaseAppException:
    """Convert SQLAlchemy exceptions to application exceptions"""
    if isinstance(exc, IntegrityError):
        return ConflictRetryableError(f"Duplicate entry: {exc.orig}", table=table)
    if isinstance(exc, (OperationalError, InterfaceError)):
        return StoreUnavailableError(f"Database unreachable: {exc.orig}", operation=operation)
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreUnavailableError("Database connection invalidated", operation=operation)
    return DatabaseError(f"Database error: {exc}", operation=operation, table=table)


__all__ = [
    'ErrorCode',
    'BaseAppException',
    'ResourceNotFoundError',
    'InvalidArgumentError',
    'ConflictRetryableError',
    'DatabaseError',
    'StoreUnavailableError',
    'handle_database_exception',
]
