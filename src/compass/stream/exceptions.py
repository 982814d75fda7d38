################################################################################
# File Name: exceptions.py
# Purpose/Description: Exceptions for the realtime stream
# Author: Ralph Agent
# Creation Date: 2026-10-15
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-15    | Ralph Agent  | Initial creation
# ================================================================================
################################################################################

"""
Stream exceptions module.

The supervisor itself never raises for stream failures; it retries. StreamError
is raised by single-attempt callers that need a failed stream to be fatal.
"""

from typing import Any

from common.error_handler import BaseError, ErrorCategory, classifyError


class StreamError(BaseError):
    """A single realtime stream attempt failed."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, details=details)
        self.cause = cause
        self.category: ErrorCategory = (
            classifyError(cause) if cause is not None else ErrorCategory.SYSTEM
        )
