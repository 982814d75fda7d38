################################################################################
# File Name: __init__.py
# Purpose/Description: Vehicle subpackage for VINs and the vehicle registry
# Author: Ralph Agent
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | Ralph Agent  | Initial subpackage creation
# ================================================================================
################################################################################
"""
Vehicle Subpackage.

This subpackage contains vehicle identification components:
- VIN validation, normalization and decomposition
- VinBatch, the immutable VIN set handed to the stream supervisor
- CSV loading of VIN lists
- VehicleRegistry (GetVehicles flattened to VINs)

Usage:
    from compass.vehicle import VinBatch, isValidVin, VehicleRegistry
"""

from .exceptions import (
    RegistryError,
    VinBatchError,
    VinFileError,
    VinValidationError,
)
from .vin import (
    VIN_LENGTH,
    VinBatch,
    VinParts,
    decomposeVin,
    isValidVin,
    normalizeVin,
    validateVin,
)
from .csv_loader import readVinsFromCsv
from .registry import VehicleRegistry, extractVin

__all__ = [
    # Exceptions
    'RegistryError',
    'VinBatchError',
    'VinFileError',
    'VinValidationError',
    # VIN
    'VIN_LENGTH',
    'VinBatch',
    'VinParts',
    'decomposeVin',
    'isValidVin',
    'normalizeVin',
    'validateVin',
    # Helpers
    'readVinsFromCsv',
    'VehicleRegistry',
    'extractVin',
]
