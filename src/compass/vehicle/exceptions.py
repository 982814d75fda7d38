################################################################################
# File Name: exceptions.py
# Purpose/Description: Vehicle-related exceptions
# Author: Ralph Agent
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | Ralph Agent  | Initial creation
# ================================================================================
################################################################################

"""
Vehicle exceptions module.

Contains exceptions for VIN handling and the vehicle registry:
- VinValidationError: VIN format is invalid
- VinBatchError: VIN batch is empty or has duplicates
- VinFileError: VIN file could not be read
- RegistryError: Vehicle list could not be fetched
"""

from common.error_handler import BaseError, DataError, ErrorCategory


class VinValidationError(DataError):
    """VIN format is invalid."""
    pass


class VinBatchError(DataError):
    """VIN batch is empty or contains duplicates."""
    pass


class VinFileError(DataError):
    """VIN file could not be opened or parsed."""
    pass


class RegistryError(BaseError):
    """Vehicle list could not be fetched from the Compass API."""
    category = ErrorCategory.SYSTEM
