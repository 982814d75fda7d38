################################################################################
# File Name: exceptions.py
# Purpose/Description: Compass API client exceptions
# Author: Michael Cornelison
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | M. Cornelison | Initial implementation
# ================================================================================
################################################################################

"""
Compass API exceptions module.

- ApiError: Base exception for API client errors
- ApiNotAvailableError: Generated gRPC modules could not be imported
- ApiNotConnectedError: Call attempted before connect()
- ApiCallError: A one-shot RPC failed
"""

from typing import Any

from common.error_handler import (
    BaseError,
    ConfigurationError,
    ErrorCategory,
    classifyError,
    getGrpcStatusCode,
)


class ApiError(BaseError):
    """Base exception for Compass API client errors."""
    pass


class ApiNotAvailableError(ConfigurationError):
    """Generated Compass API modules are not importable."""
    pass


class ApiNotConnectedError(ApiError):
    """API call attempted before the channel was opened."""
    pass


class ApiCallError(ApiError):
    """
    A one-shot Compass RPC failed.

    The category follows the underlying gRPC status so callers can tell
    authentication failures from transient ones.
    """

    def __init__(
        self,
        operation: str,
        cause: Exception,
        details: dict[str, Any] | None = None
    ):
        statusCode = getGrpcStatusCode(cause)
        merged = {'operation': operation}
        if statusCode is not None:
            merged['status'] = statusCode.name
        merged.update(details or {})

        super().__init__(f"{operation} failed: {_describe(cause)}", details=merged)
        self.operation = operation
        self.cause = cause
        self.category: ErrorCategory = classifyError(cause)


def _describe(error: Exception) -> str:
    detailsFunc = getattr(error, 'details', None)
    if getGrpcStatusCode(error) is not None and callable(detailsFunc):
        return str(detailsFunc())
    return str(error)
