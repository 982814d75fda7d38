################################################################################
# File Name: error_handler.py
# Purpose/Description: Centralized error handling with classification
# Author: Michael Cornelison
# Creation Date: 2026-01-21
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-01-21    | M. Cornelison | Initial implementation
# 2026-10-12    | M. Cornelison | Classify gRPC status codes, drop retry decorator
#               |              | (superseded by stream RetryPolicy)
# 2026-10-19    | M. Cornelison | Classify by status code and type only, no message text
# ================================================================================
################################################################################

"""
Error handling module.

Provides centralized error handling with:
- Custom exception classes by error type
- Error classification (retryable, auth, config, data, system)
- gRPC status code classification for Compass API failures
- Structured error reporting and batch error collection

Usage:
    from common.error_handler import AuthenticationError, classifyError, handleError

    try:
        result = operation()
    except Exception as e:
        handleError(e)
"""

import logging
import traceback
from enum import Enum
from typing import Any

import grpc

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Categories of errors for classification."""
    RETRYABLE = 'retryable'       # Transient, should retry
    AUTHENTICATION = 'auth'       # Auth failures, re-authenticate and retry
    CONFIGURATION = 'config'      # Config errors, fail fast
    DATA = 'data'                 # Data validation, log and skip
    SYSTEM = 'system'             # Unexpected errors


# gRPC status codes mapped onto error categories
GRPC_STATUS_CATEGORIES: dict[grpc.StatusCode, ErrorCategory] = {
    grpc.StatusCode.UNAUTHENTICATED: ErrorCategory.AUTHENTICATION,
    grpc.StatusCode.PERMISSION_DENIED: ErrorCategory.AUTHENTICATION,
    grpc.StatusCode.UNAVAILABLE: ErrorCategory.RETRYABLE,
    grpc.StatusCode.DEADLINE_EXCEEDED: ErrorCategory.RETRYABLE,
    grpc.StatusCode.RESOURCE_EXHAUSTED: ErrorCategory.RETRYABLE,
    grpc.StatusCode.ABORTED: ErrorCategory.RETRYABLE,
    grpc.StatusCode.INTERNAL: ErrorCategory.RETRYABLE,
    grpc.StatusCode.UNKNOWN: ErrorCategory.RETRYABLE,
    grpc.StatusCode.INVALID_ARGUMENT: ErrorCategory.DATA,
    grpc.StatusCode.NOT_FOUND: ErrorCategory.DATA,
    grpc.StatusCode.FAILED_PRECONDITION: ErrorCategory.DATA,
}


# ================================================================================
# Custom Exception Classes
# ================================================================================

class BaseError(Exception):
    """Base exception for all custom errors."""

    category: ErrorCategory = ErrorCategory.SYSTEM

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def toDict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            'type': self.__class__.__name__,
            'category': self.category.value,
            'message': self.message,
            'details': self.details
        }


class AuthenticationError(BaseError):
    """Authentication/authorization failure."""
    category = ErrorCategory.AUTHENTICATION


class ConfigurationError(BaseError):
    """Configuration validation failure."""
    category = ErrorCategory.CONFIGURATION


class DataError(BaseError):
    """Data validation or processing error."""
    category = ErrorCategory.DATA


# ================================================================================
# Error Classification
# ================================================================================

def getGrpcStatusCode(error: Exception) -> grpc.StatusCode | None:
    """
    Extract the gRPC status code from an error, if it carries one.

    Args:
        error: Exception to inspect

    Returns:
        grpc.StatusCode, or None for non-RPC errors
    """
    codeFunc = getattr(error, 'code', None)
    if not isinstance(error, grpc.RpcError) or not callable(codeFunc):
        return None

    try:
        code = codeFunc()
    except Exception:
        return None

    return code if isinstance(code, grpc.StatusCode) else None


def classifyError(error: Exception) -> ErrorCategory:
    """
    Classify an error into a category.

    Only our own error classes and gRPC status codes can yield
    AUTHENTICATION; the message text is never inspected.

    Args:
        error: Exception to classify

    Returns:
        ErrorCategory for the error
    """
    if isinstance(error, BaseError):
        return error.category

    statusCode = getGrpcStatusCode(error)
    if statusCode is not None:
        return GRPC_STATUS_CATEGORIES.get(statusCode, ErrorCategory.SYSTEM)

    # Socket-level failures outside grpc
    if isinstance(error, (TimeoutError, ConnectionError)):
        return ErrorCategory.RETRYABLE

    return ErrorCategory.SYSTEM


# ================================================================================
# Error Handling
# ================================================================================

def handleError(
    error: Exception,
    context: dict[str, Any] | None = None,
    reraise: bool = True
) -> dict[str, Any]:
    """
    Handle an error with logging and classification.

    Args:
        error: Exception that occurred
        context: Additional context information
        reraise: Whether to re-raise the exception

    Returns:
        Error details dictionary

    Raises:
        The original exception if reraise is True
    """
    category = classifyError(error)
    context = context or {}

    errorDetails = {
        'type': type(error).__name__,
        'category': category.value,
        'message': str(error),
        'context': context,
        'traceback': traceback.format_exc()
    }

    # Log based on category
    if category == ErrorCategory.CONFIGURATION:
        logger.error(f"Configuration error: {error}")
    elif category == ErrorCategory.AUTHENTICATION:
        logger.error(f"Authentication error: {error}")
    elif category == ErrorCategory.DATA:
        logger.warning(f"Data error: {error}")
    elif category == ErrorCategory.RETRYABLE:
        logger.warning(f"Retryable error: {error}")
    else:
        logger.error(f"Error: {error}", exc_info=True)

    if reraise:
        raise error

    return errorDetails


def formatError(error: Exception) -> str:
    """
    Format an error for display/logging.

    Args:
        error: Exception to format

    Returns:
        Formatted error string
    """
    category = classifyError(error)

    if isinstance(error, BaseError):
        details = f" | details={error.details}" if error.details else ""
        return f"[{category.value.upper()}] {error.message}{details}"

    statusCode = getGrpcStatusCode(error)
    if statusCode is not None:
        detailsFunc = getattr(error, 'details', None)
        detail = detailsFunc() if callable(detailsFunc) else str(error)
        return f"[{category.value.upper()}] {statusCode.name}: {detail}"

    return f"[{category.value.upper()}] {type(error).__name__}: {error}"


class ErrorCollector:
    """
    Collects multiple errors during batch processing.

    Useful when you want to continue processing and report all errors at the end.

    Example:
        collector = ErrorCollector()
        for vin in vins:
            try:
                removeVehicle(vin)
            except Exception as e:
                collector.add(e, vin=vin)

        if collector.hasErrors():
            collector.report()
    """

    def __init__(self):
        self.errors: list[dict[str, Any]] = []

    def add(self, error: Exception, **context: Any) -> None:
        """Add an error to the collection."""
        self.errors.append({
            'error': error,
            'category': classifyError(error).value,
            'message': str(error),
            'context': context
        })

    def hasErrors(self) -> bool:
        """Check if any errors were collected."""
        return len(self.errors) > 0

    def count(self) -> int:
        """Get number of collected errors."""
        return len(self.errors)

    def report(self) -> None:
        """Log all collected errors."""
        if not self.errors:
            return

        logger.error(f"Collected {len(self.errors)} errors:")
        for i, err in enumerate(self.errors, 1):
            contextStr = ' '.join(f'{k}={v}' for k, v in err['context'].items())
            suffix = f" | {contextStr}" if contextStr else ""
            logger.error(f"  {i}. [{err['category']}] {err['message']}{suffix}")

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
