################################################################################
# File Name: operations.py
# Purpose/Description: One-shot Compass vehicle management operations
# Author: Michael Cornelison
# Creation Date: 2026-10-14
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-14    | M. Cornelison | Initial implementation
# 2026-10-16    | M. Cornelison | Batch remove with error collection
# ================================================================================
################################################################################

"""
Vehicle operations module.

Each operation issues one (or, for remove, one per VIN) authenticated Compass
call and prints the result. VINs are validated before any call is made.

Usage:
    from compass.cli.operations import VehicleOperations

    ops = VehicleOperations(apiClient, session, settings)
    ops.checkConsent('1C4RJFAG0FC625797')
"""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from common.error_handler import ErrorCollector, formatError
from compass.session.types import Session
from compass.settings import ClientSettings
from compass.stream.exceptions import StreamError
from compass.stream.sink import ConsoleMessageSink, MessageSink
from compass.stream.supervisor import StreamSupervisor
from compass.stream.types import StreamOutcome
from compass.vehicle.registry import extractVin
from compass.vehicle.vin import VinBatch, validateVin

logger = logging.getLogger(__name__)


def _defaultSupervisorFactory(
    settings: ClientSettings,
    apiClient: Any,
    session: Session,
    sink: MessageSink
) -> StreamSupervisor:
    return StreamSupervisor.fromSettings(settings, apiClient, session, sink)


class VehicleOperations:
    """
    One-shot vehicle management front end over the Compass API client.

    Attributes:
        apiClient: CompassApiClient
        session: Authenticated session
        settings: Client settings
    """

    def __init__(
        self,
        apiClient: Any,
        session: Session,
        settings: ClientSettings,
        outputFunc: Callable[[str], Any] = print,
        supervisorFactory: Callable[..., StreamSupervisor] | None = None
    ):
        """
        Initialize operations.

        Args:
            apiClient: Compass API client
            session: Authenticated session
            settings: Client settings
            outputFunc: Output function (for testing)
            supervisorFactory: Creates the supervisor for streamRealtime (for testing)
        """
        self.apiClient = apiClient
        self.session = session
        self.settings = settings
        self._output = outputFunc
        self._supervisorFactory = supervisorFactory or _defaultSupervisorFactory

    def listVehicles(self) -> list[Any]:
        """Print every registered vehicle and its VIN."""
        vehicles = self.apiClient.getVehicles(self.session)

        self._output(f"number of vehicles: {len(vehicles)}")
        for i, record in enumerate(vehicles):
            self._output(f"{i} {record}")
            self._output(f"VIN: {extractVin(record) or ''}")

        return vehicles

    def onboardVin(self, vin: str) -> Any:
        """
        Sign up a VIN with the configured consent email.

        Raises:
            VinValidationError: If the VIN is malformed
            ConfigurationError: If no consent email is configured
            ApiCallError: If the call fails
        """
        validateVin(vin)
        consentEmail = self.settings.requireConsentEmail()

        self._output(f"using consent email: {consentEmail}")
        response = self.apiClient.batchVehicleSignUp(
            self.session, vin, consentEmail, self.settings.consentRegion
        )
        logger.info(f"Vehicle signed up | vin={vin}")
        self._output(str(response))
        return response

    def checkConsent(self, vin: str) -> Any:
        validateVin(vin)
        response = self.apiClient.checkConsent(self.session, vin)
        self._output(str(response))
        return response

    def checkCompatibility(self, vin: str) -> Any:
        validateVin(vin)
        response = self.apiClient.checkCompatibility(self.session, vin)
        self._output(str(response))
        return response

    def lastReportedPoints(self, vin: str, points: int | None = None) -> Any:
        """
        Print the most recent reported events for a VIN.

        Args:
            vin: VIN to query
            points: Number of points (defaults to lastReportedPoints setting)
        """
        validateVin(vin)
        count = points if points is not None else self.settings.lastReportedPoints
        response = self.apiClient.getLastReportedPoints(self.session, vin, count)

        events = list(getattr(response, 'events', None) or [])
        self._output(f"number of events: {len(events)}")
        for i, event in enumerate(events):
            self._output(f"{i} {event}")
        return response

    def streamRealtime(self, vin: str) -> StreamOutcome:
        """
        Stream realtime data for one VIN until the stream ends.

        Unlike the daemon, a failed attempt is not retried.

        Args:
            vin: VIN to stream

        Returns:
            StreamOutcome of the single attempt

        Raises:
            VinValidationError: If the VIN is malformed
            StreamError: If the stream fails
        """
        batch = VinBatch((validateVin(vin),))
        sink = ConsoleMessageSink(self._output)
        supervisor = self._supervisorFactory(self.settings, self.apiClient, self.session, sink)

        self._output("Receiving stream messages:")
        outcome = supervisor.runOnce(batch)

        if outcome.isFailure:
            raise StreamError(
                f"Error receiving from stream: {formatError(outcome.cause)}",
                cause=outcome.cause,
                details={'vin': vin, 'records': outcome.recordCount}
            )

        self._output("Stream ended.")
        return outcome

    def lockVehicle(self, vin: str) -> Any:
        validateVin(vin)
        response = self.apiClient.lockVehicle(self.session, vin)
        logger.info(f"Lock command issued | vin={vin}")
        self._output("locked")
        return response

    def removeVehicles(self, vins: Iterable[str]) -> ErrorCollector:
        """
        Remove vehicles one call per VIN, continuing past failures.

        Args:
            vins: VINs to remove

        Returns:
            ErrorCollector holding the per-VIN failures
        """
        collector = ErrorCollector()
        removed = 0

        for vin in vins:
            try:
                validateVin(vin)
                response = self.apiClient.removeVehicle(self.session, vin)
            except Exception as e:
                logger.error(f"failed to delete vehicle | vin={vin} | {formatError(e)}")
                collector.add(e, vin=vin)
                continue

            removed += 1
            self._output("removed")
            self._output(str(response))

        logger.info(f"Remove complete | removed={removed} | failed={collector.count()}")
        if collector.hasErrors():
            collector.report()
        return collector
