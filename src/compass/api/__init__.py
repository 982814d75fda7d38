################################################################################
# File Name: __init__.py
# Purpose/Description: API subpackage wrapping the Compass gRPC service
# Author: Michael Cornelison
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | M. Cornelison | Initial subpackage creation
# ================================================================================
################################################################################
"""
API Subpackage.

- CompassApiClient: Channel, stub and per-RPC wrappers
- ApiError, ApiCallError, ApiNotAvailableError, ApiNotConnectedError
"""

from .client import CompassApiClient, createSecureChannel
from .exceptions import (
    ApiCallError,
    ApiError,
    ApiNotAvailableError,
    ApiNotConnectedError,
)

__all__ = [
    'CompassApiClient',
    'createSecureChannel',
    'ApiCallError',
    'ApiError',
    'ApiNotAvailableError',
    'ApiNotConnectedError',
]
