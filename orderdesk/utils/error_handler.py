"""
Custom error handling for the order entry engine.

This module defines every application exception and provides helpers
for consistent error reporting back to the UI layer.
"""

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """
    Standardized error codes for the application.
    """

    # General errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Order composition errors
    ORDER_VALIDATION_FAILED = "ORDER_VALIDATION_FAILED"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_EMPTY_RESULT = "ORDER_EMPTY_RESULT"
    ORDER_READ_ONLY = "ORDER_READ_ONLY"

    # Submission errors
    SUBMISSION_FAILED = "SUBMISSION_FAILED"
    SUBMISSION_IN_PROGRESS = "SUBMISSION_IN_PROGRESS"

    # Order store errors
    ORDER_STORE_CONNECTION_FAILED = "ORDER_STORE_CONNECTION_FAILED"
    ORDER_STORE_API_ERROR = "ORDER_STORE_API_ERROR"


class ErrorSeverity(Enum):
    """
    Severity levels for errors.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AppException(Exception):
    """
    Base exception for every custom exception in the application.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        is_retryable: bool = False,
        is_critical: bool = False,
    ):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Standardized error code
            details: Additional error information
            status_code: Associated HTTP status code
            severity: Error severity
            is_retryable: Whether the operation can be retried
            is_critical: Whether the error needs immediate attention
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.is_retryable = is_retryable
        self.is_critical = is_critical
        self.timestamp = datetime.now(timezone.utc)
        self.traceback_str = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the exception to a dictionary.

        Returns:
            Dict: Exception representation
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "details": self.details,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
            "is_critical": self.is_critical,
            "timestamp": self.timestamp.isoformat(),
            "traceback": self.traceback_str,
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"


class ValidationException(AppException):
    """
    Exception for a single invalid field.
    """

    def __init__(
        self,
        message: str,
        field: str,
        invalid_value: Any = None,
        expected_format: Optional[str] = None,
        **kwargs,
    ):
        """
        Initialize the validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            invalid_value: Value that caused the error
            expected_format: Expected format
            **kwargs: Extra arguments for AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            status_code=422,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field = field
        self.invalid_value = invalid_value
        self.expected_format = expected_format

        self.details.update(
            {
                "field": field,
                "invalid_value": str(invalid_value) if invalid_value is not None else None,
                "expected_format": expected_format,
            }
        )


class OrderValidationException(AppException):
    """
    Raised when a draft order cannot be submitted.

    Carries every offending field at once so the caller can report each
    error inline next to its input.
    """

    def __init__(self, field_errors: Dict[str, str], **kwargs):
        """
        Initialize the order validation exception.

        Args:
            field_errors: Mapping of field key to human readable message
            **kwargs: Extra arguments for AppException
        """
        fields = ", ".join(field_errors) or "order"
        super().__init__(
            message=f"Order validation failed: {fields}",
            error_code=ErrorCode.ORDER_VALIDATION_FAILED,
            status_code=422,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field_errors = dict(field_errors)
        self.details.update({"field_errors": self.field_errors})


class NotFoundException(AppException):
    """
    Raised when a source order for edit or duplicate does not exist.
    """

    def __init__(self, message: str, resource: str, resource_id: Any = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.ORDER_NOT_FOUND,
            status_code=404,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.resource = resource
        self.resource_id = resource_id
        self.details.update({"resource": resource, "resource_id": str(resource_id) if resource_id else None})


class EmptyResultException(AppException):
    """
    Raised when a persisted order yields no branches to rebuild.
    """

    def __init__(self, message: str = "No items to copy", order_id: Any = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.ORDER_EMPTY_RESULT,
            status_code=422,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.order_id = order_id
        self.details.update({"order_id": str(order_id) if order_id else None})


class ReadOnlyOrderException(AppException):
    """
    Raised when submitting an order the mutability gate has locked.
    """

    def __init__(self, message: str, reason: str, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.ORDER_READ_ONLY,
            status_code=409,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.reason = reason
        self.details.update({"reason": reason})


class SubmissionInProgressException(AppException):
    """
    Raised when submit is called while a previous submit is still running.
    """

    def __init__(self, message: str = "An order submission is already in progress", **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.SUBMISSION_IN_PROGRESS,
            status_code=409,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )


class SubmissionFailedException(AppException):
    """
    Raised when the order store rejects or fails to persist an order.

    The draft is left untouched so the operator can retry.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        order_id: Optional[str] = None,
        retry_suggested: bool = True,
        **kwargs,
    ):
        """
        Initialize the submission exception.

        Args:
            message: Error message
            operation: Operation that failed (create, update)
            order_id: Order being updated, if any
            retry_suggested: Whether retrying makes sense
            **kwargs: Extra arguments for AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.SUBMISSION_FAILED,
            status_code=502,
            severity=ErrorSeverity.HIGH,
            is_retryable=retry_suggested,
            **kwargs,
        )
        self.operation = operation
        self.order_id = order_id
        self.details.update({"operation": operation, "order_id": order_id, "retry_suggested": retry_suggested})


class OrderStoreException(AppException):
    """
    Exception for errors talking to the external order storage service.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        **kwargs,
    ):
        """
        Initialize the order store exception.

        Args:
            message: Error message
            status_code: HTTP status returned by the store, if any
            endpoint: Endpoint that failed
            **kwargs: Extra arguments for AppException
        """
        error_code = ErrorCode.ORDER_STORE_API_ERROR if status_code else ErrorCode.ORDER_STORE_CONNECTION_FAILED
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=503,
            severity=ErrorSeverity.HIGH,
            is_retryable=True,
            **kwargs,
        )
        self.http_status = status_code
        self.endpoint = endpoint
        self.details.update({"http_status": status_code, "endpoint": endpoint})


# === UTILITY FUNCTIONS ===


def create_error_response(exception: Union[AppException, Exception], include_traceback: bool = False) -> Dict[str, Any]:
    """
    Build a standardized error response for the UI layer.

    Args:
        exception: Exception to convert
        include_traceback: Whether to include the traceback

    Returns:
        Dict: Error response
    """
    if isinstance(exception, AppException):
        error_dict = exception.to_dict()
    else:
        error_dict = AppException(
            message=f"{type(exception).__name__}: {exception}",
            details={"original_exception": type(exception).__name__},
        ).to_dict()

    if not include_traceback:
        error_dict.pop("traceback", None)

    return {"error": True, **error_dict}


def log_error(
    exception: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an error consistently.

    Args:
        exception: Exception to log
        context: Additional context
        level: Logging level
    """
    context = context or {}

    log_data = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
        **context,
    }

    if isinstance(exception, AppException):
        message = f"{exception.error_code.value}: {exception.message}"
        log_data.update(
            {
                "error_code": exception.error_code.value,
                "severity": exception.severity.value,
                "is_retryable": exception.is_retryable,
            }
        )
    else:
        message = f"Unhandled exception: {type(exception).__name__}: {str(exception)}"

    logger.log(level, message, extra=log_data)
