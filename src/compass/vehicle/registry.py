################################################################################
# File Name: registry.py
# Purpose/Description: Vehicle list lookup flattened to a VIN batch
# Author: Ralph Agent
# Creation Date: 2026-10-13
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-13    | Ralph Agent  | Initial creation
# ================================================================================
################################################################################

"""
Vehicle registry module.

GetVehicles returns provider-tagged records: each record carries exactly one
provider sub-message (Jeep, Chrysler, ...) holding the VIN. The registry
extracts the VIN from whichever provider is set, so new providers need no
code change.
"""

import logging
from typing import Any

from compass.session.types import Session

from .exceptions import RegistryError, VinBatchError
from .vin import VinBatch, isValidVin

logger = logging.getLogger(__name__)


def extractVin(record: Any) -> str | None:
    """
    Extract the VIN from a provider-tagged vehicle record.

    Args:
        record: Protobuf vehicle record (or any object with a vin attribute)

    Returns:
        VIN string, or None if the record carries none
    """
    listFields = getattr(record, 'ListFields', None)
    if callable(listFields):
        for _, value in listFields():
            vin = getattr(value, 'vin', None)
            if isinstance(vin, str) and vin:
                return vin

    vin = getattr(record, 'vin', None)
    if isinstance(vin, str) and vin:
        return vin

    return None


class VehicleRegistry:
    """
    Lists vehicles registered with Compass.

    Attributes:
        apiClient: Client exposing getVehicles(session)
    """

    def __init__(self, apiClient: Any):
        self.apiClient = apiClient

    def listVehicles(self, session: Session) -> list[Any]:
        """
        Fetch the raw vehicle records.

        Raises:
            RegistryError: If the call fails
        """
        try:
            vehicles = self.apiClient.getVehicles(session)
        except Exception as e:
            raise RegistryError(f"failed to get vehicles: {e}") from e

        logger.info(f"Received vehicles from Compass API service: {len(vehicles)}")
        return vehicles

    def listVins(self, session: Session) -> VinBatch:
        """
        Fetch the vehicle list and flatten it to a VIN batch.

        Records with no VIN or a malformed VIN are skipped with a warning;
        repeated VINs keep their first position.

        Args:
            session: Authenticated session

        Returns:
            VinBatch in registry order

        Raises:
            RegistryError: If the call fails or no usable VIN is returned
        """
        vins: list[str] = []
        for index, record in enumerate(self.listVehicles(session)):
            vin = extractVin(record)
            if vin is None:
                logger.warning(f"Vehicle record has no VIN | index={index}")
                continue
            if not isValidVin(vin):
                logger.warning(f"Skipping malformed VIN from registry | index={index} | vin={vin}")
                continue
            vins.append(vin)

        try:
            batch = VinBatch.fromIterable(vins, dropDuplicates=True)
        except VinBatchError as e:
            raise RegistryError("no usable VINs returned by Compass API") from e

        logger.info(f"VINs available for streaming: {len(batch)}")
        return batch
