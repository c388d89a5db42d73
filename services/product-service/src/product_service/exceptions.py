"""
Custom exceptions for the product service.
Provides structured error handling with rich context for debugging and monitoring.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for routing and handling."""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    AWS_SERVICE = "aws_service"
    CONFIGURATION = "configuration"


@dataclass
class ErrorContext:
    """Rich context for error tracking and debugging."""
    correlation_id: Optional[str] = None
    product_id: Optional[str] = None
    message_id: Optional[str] = None
    field_name: Optional[str] = None
    actual_value: Optional[Any] = None
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    additional_data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert context to dictionary for logging."""
        return {
            "correlation_id": self.correlation_id,
            "product_id": self.product_id,
            "message_id": self.message_id,
            "field_name": self.field_name,
            "actual_value": str(self.actual_value) if self.actual_value is not None else None,
            "timestamp": self.timestamp,
            **self.additional_data,
        }


class ProductServiceError(Exception):
    """Base exception for all product service errors."""

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.VALIDATION,
        retryable: bool = False,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.retryable = retryable
        self.original_exception = original_exception

    def to_dict(self) -> dict:
        """Serialize exception for logging and monitoring."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "retryable": self.retryable,
            "context": self.context.to_dict(),
            "original_exception": str(self.original_exception) if self.original_exception else None,
        }


class ValidationError(ProductServiceError):
    """Raised when product data fails validation."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        actual: Any = None,
        context: Optional[ErrorContext] = None,
    ):
        ctx = context or ErrorContext()
        ctx.field_name = field_name
        ctx.actual_value = actual

        super().__init__(
            message=message,
            context=ctx,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            retryable=False,
        )
        self.field_name = field_name
        self.actual = actual


class ParseError(ProductServiceError):
    """Raised when a request or message body is not a JSON object."""

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            context=context,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            retryable=False,
            original_exception=original_exception,
        )


class ConflictError(ProductServiceError):
    """Raised when a product or stock key already exists."""

    def __init__(
        self,
        message: str,
        product_id: str,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None,
    ):
        ctx = context or ErrorContext()
        ctx.product_id = product_id

        super().__init__(
            message=message,
            context=ctx,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.CONFLICT,
            retryable=False,
            original_exception=original_exception,
        )
        self.product_id = product_id


class BackendError(ProductServiceError):
    """Raised when AWS service calls fail."""

    def __init__(
        self,
        message: str,
        service_name: str,
        operation: str,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None,
    ):
        ctx = context or ErrorContext()
        ctx.additional_data["aws_service"] = service_name
        ctx.additional_data["operation"] = operation

        super().__init__(
            message=message,
            context=ctx,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.AWS_SERVICE,
            retryable=True,
            original_exception=original_exception,
        )
        self.service_name = service_name
        self.operation = operation


class NotifyError(BackendError):
    """Raised when publishing a product notification fails."""

    def __init__(
        self,
        message: str,
        topic_arn: str,
        product_id: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None,
    ):
        ctx = context or ErrorContext()
        ctx.product_id = product_id
        ctx.additional_data["topic_arn"] = topic_arn

        super().__init__(
            message=message,
            service_name="SNS",
            operation="Publish",
            context=ctx,
            original_exception=original_exception,
        )
        self.severity = ErrorSeverity.MEDIUM
        self.topic_arn = topic_arn


class ConfigurationError(ProductServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_key: str,
        context: Optional[ErrorContext] = None,
    ):
        ctx = context or ErrorContext()
        ctx.additional_data["config_key"] = config_key

        super().__init__(
            message=message,
            context=ctx,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            retryable=False,
        )
        self.config_key = config_key
