################################################################################
# File Name: vin.py
# Purpose/Description: VIN validation, decomposition and VIN batches
# Author: Ralph Agent
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | Ralph Agent  | Initial implementation
# ================================================================================
################################################################################

"""
VIN module.

Provides:
- Strict VIN validation (17 characters, A-Z/0-9 without I, O, Q)
- Decomposition into WMI / VDS / VIS segments
- VinBatch, the immutable ordered set of VINs handed to a stream

Validation is a pure function of the string. Input normalization (trimming,
upper-casing) is a separate step applied only at user-input boundaries.

Usage:
    from compass.vehicle.vin import VinBatch, decomposeVin, isValidVin

    if isValidVin('1C4RJFAG0FC625797'):
        parts = decomposeVin('1C4RJFAG0FC625797')
        print(parts.wmi, parts.vds, parts.vis)

    batch = VinBatch.fromIterable(['1C4RJFAG0FC625797'])
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .exceptions import VinBatchError, VinValidationError

# ================================================================================
# Constants
# ================================================================================

VIN_LENGTH = 17

# VINs can only contain specific characters (no I, O, Q)
VALID_VIN_CHARS = frozenset('ABCDEFGHJKLMNPRSTUVWXYZ0123456789')

# Segment boundaries (ISO 3779)
WMI_END = 3
VDS_END = 9


# ================================================================================
# Validation
# ================================================================================

def isValidVin(vin: str) -> bool:
    """
    Check whether a string is a well-formed VIN.

    Args:
        vin: Candidate VIN

    Returns:
        True if the VIN is exactly 17 valid characters
    """
    if not isinstance(vin, str) or len(vin) != VIN_LENGTH:
        return False

    return all(c in VALID_VIN_CHARS for c in vin)


def validateVin(vin: str) -> str:
    """
    Validate a VIN, raising on failure.

    Args:
        vin: Candidate VIN

    Returns:
        The VIN unchanged

    Raises:
        VinValidationError: If the VIN is malformed
    """
    if not isinstance(vin, str) or len(vin) != VIN_LENGTH:
        length = len(vin) if isinstance(vin, str) else None
        raise VinValidationError(
            f"VIN must be {VIN_LENGTH} characters: {vin!r}",
            details={'vin': vin, 'length': length}
        )

    invalid = sorted({c for c in vin if c not in VALID_VIN_CHARS})
    if invalid:
        raise VinValidationError(
            f"VIN contains invalid characters {''.join(invalid)!r}: {vin}",
            details={'vin': vin, 'invalidChars': invalid}
        )

    return vin


def normalizeVin(value: str) -> str:
    """
    Normalize operator input before validation.

    Strips surrounding whitespace, removes inner spaces/dashes and upper-cases.

    Args:
        value: Raw input

    Returns:
        Normalized string (not necessarily a valid VIN)
    """
    return value.strip().upper().replace(' ', '').replace('-', '')


# ================================================================================
# Decomposition
# ================================================================================

@dataclass(frozen=True)
class VinParts:
    """
    VIN segments.

    Attributes:
        wmi: World Manufacturer Identifier (3 characters)
        vds: Vehicle Descriptor Section (6 characters)
        vis: Vehicle Identifier Section (8 characters)
    """
    wmi: str
    vds: str
    vis: str

    def toVin(self) -> str:
        """Reassemble the VIN."""
        return self.wmi + self.vds + self.vis

    def __str__(self) -> str:
        return self.toVin()


def decomposeVin(vin: str) -> VinParts:
    """
    Split a VIN into its WMI, VDS and VIS segments.

    Args:
        vin: Valid VIN

    Returns:
        VinParts for the VIN

    Raises:
        VinValidationError: If the VIN is malformed
    """
    validateVin(vin)
    return VinParts(wmi=vin[:WMI_END], vds=vin[WMI_END:VDS_END], vis=vin[VDS_END:])


# ================================================================================
# VIN Batch
# ================================================================================

@dataclass(frozen=True)
class VinBatch:
    """
    Ordered, duplicate-free, non-empty collection of valid VINs.

    Attributes:
        vins: VINs in the order they were supplied
    """
    vins: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.vins:
            raise VinBatchError("VIN batch must not be empty")

        for vin in self.vins:
            validateVin(vin)

        if len(set(self.vins)) != len(self.vins):
            seen: set[str] = set()
            repeated: set[str] = set()
            for vin in self.vins:
                if vin in seen:
                    repeated.add(vin)
                seen.add(vin)
            duplicates = sorted(repeated)
            raise VinBatchError(
                f"VIN batch contains duplicates: {', '.join(duplicates)}",
                details={'duplicates': duplicates}
            )

    @classmethod
    def fromIterable(cls, vins: Iterable[str], dropDuplicates: bool = False) -> 'VinBatch':
        """
        Build a batch from any iterable of VINs.

        Args:
            vins: VIN strings
            dropDuplicates: Keep only the first occurrence of repeated VINs

        Returns:
            VinBatch

        Raises:
            VinBatchError: If empty, or duplicated and dropDuplicates is False
            VinValidationError: If any VIN is malformed
        """
        items = list(vins)
        if dropDuplicates:
            items = list(dict.fromkeys(items))
        return cls(tuple(items))

    def __len__(self) -> int:
        return len(self.vins)

    def __iter__(self) -> Iterator[str]:
        return iter(self.vins)

    def __contains__(self, vin: object) -> bool:
        return vin in self.vins
