################################################################################
# File Name: daemon.py
# Purpose/Description: Long-running stream front end with signal handling
# Author: Michael Cornelison
# Creation Date: 2026-10-15
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-15    | M. Cornelison | Initial implementation
# 2026-10-16    | M. Cornelison | Double signal forces exit, periodic stats log
# ================================================================================
################################################################################

"""
Stream daemon module.

Resolves the VIN batch from the vehicle registry, runs the stream supervisor
in its background thread, and waits for it in the main thread so SIGINT and
SIGTERM can be handled there.

Shutdown handling:
- First SIGINT/SIGTERM: stop the supervisor (cancels the in-flight stream)
- Second signal: force immediate exit

Usage:
    from compass.daemon import StreamDaemon

    daemon = StreamDaemon(settings, apiClient, session, authenticator)
    daemon.registerSignalHandlers()
    try:
        stoppedCleanly = daemon.run()
    finally:
        daemon.restoreSignalHandlers()
"""

import logging
import signal
import sys
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from compass.session.types import Session
from compass.stream.sink import LoggingMessageSink, MessageSink
from compass.stream.supervisor import StreamSupervisor
from compass.vehicle.registry import VehicleRegistry

logger = logging.getLogger(__name__)


# ================================================================================
# Constants
# ================================================================================

EXIT_CODE_FORCED = 2
DEFAULT_STATS_LOG_INTERVAL = 300.0
WAIT_POLL_INTERVAL = 1.0


class ShutdownState(Enum):
    """States for shutdown handling."""
    RUNNING = "running"
    SHUTDOWN_REQUESTED = "shutdown_requested"
    FORCE_EXIT = "force_exit"


class StreamDaemon:
    """
    Runs the realtime stream for every registered vehicle until signalled.

    Attributes:
        settings: Client settings
        registry: VehicleRegistry supplying the VIN batch
        supervisor: StreamSupervisor (set by run())
    """

    def __init__(
        self,
        settings: Any,
        apiClient: Any,
        session: Session,
        authenticator: Any | None = None,
        sink: MessageSink | None = None,
        registry: VehicleRegistry | None = None,
        supervisorFactory: Callable[..., StreamSupervisor] | None = None,
        statsLogInterval: float = DEFAULT_STATS_LOG_INTERVAL
    ):
        """
        Initialize the daemon.

        Args:
            settings: Client settings
            apiClient: Compass API client
            session: Authenticated session
            authenticator: SessionAuthenticator used for re-authentication
            sink: Record consumer (defaults to LoggingMessageSink)
            registry: Vehicle registry (defaults to one over apiClient)
            supervisorFactory: Creates the supervisor (for testing)
            statsLogInterval: Seconds between statistics log lines
        """
        self.settings = settings
        self.apiClient = apiClient
        self.session = session
        self.authenticator = authenticator
        self.sink = sink or LoggingMessageSink()
        self.registry = registry or VehicleRegistry(apiClient)
        self.supervisor: StreamSupervisor | None = None

        self._supervisorFactory = supervisorFactory or StreamSupervisor.fromSettings
        self._statsLogInterval = statsLogInterval
        self._shutdownState = ShutdownState.RUNNING
        self._originalSigintHandler: Any = None
        self._originalSigtermHandler: Any = None

    @property
    def shutdownState(self) -> ShutdownState:
        return self._shutdownState

    def run(self) -> bool:
        """
        Stream until a shutdown signal or until the retry policy gives up.

        Returns:
            True if the daemon stopped on request, False if streaming gave up

        Raises:
            RegistryError: If the VIN batch cannot be resolved
        """
        vins = self.registry.listVins(self.session)

        self.supervisor = self._supervisorFactory(
            self.settings, self.apiClient, self.session, self.sink,
            authenticator=self.authenticator
        )

        if self._shutdownState != ShutdownState.RUNNING:
            logger.info("Shutdown requested before streaming started")
            return True

        self.supervisor.start(vins)
        lastStatsLog = datetime.now()

        try:
            while not self.supervisor.join(WAIT_POLL_INTERVAL):
                if (datetime.now() - lastStatsLog).total_seconds() >= self._statsLogInterval:
                    logger.info(f"Stream status | {self.supervisor.getStats().toDict()}")
                    lastStatsLog = datetime.now()
        except KeyboardInterrupt:
            logger.warning("Interrupted, stopping stream")
            self.supervisor.stop()

        return self.supervisor.isStopRequested

    def stop(self) -> None:
        """Request a graceful shutdown."""
        self._shutdownState = ShutdownState.SHUTDOWN_REQUESTED
        if self.supervisor is not None:
            self.supervisor.requestStop()

    # ================================================================================
    # Signal Handling
    # ================================================================================

    def registerSignalHandlers(self) -> None:
        """
        Register handlers for SIGINT (Ctrl+C) and SIGTERM (systemd stop).

        First signal initiates graceful shutdown, second signal forces exit.
        """
        self._originalSigintHandler = signal.signal(
            signal.SIGINT, self._handleShutdownSignal
        )
        # SIGTERM is not available on Windows, only register if available
        if hasattr(signal, 'SIGTERM'):
            self._originalSigtermHandler = signal.signal(
                signal.SIGTERM, self._handleShutdownSignal
            )
        logger.debug("Signal handlers registered")

    def restoreSignalHandlers(self) -> None:
        """Restore the original signal handlers."""
        if self._originalSigintHandler is not None:
            signal.signal(signal.SIGINT, self._originalSigintHandler)
            self._originalSigintHandler = None
        if self._originalSigtermHandler is not None and hasattr(signal, 'SIGTERM'):
            signal.signal(signal.SIGTERM, self._originalSigtermHandler)
            self._originalSigtermHandler = None
        logger.debug("Signal handlers restored")

    def _handleShutdownSignal(self, signum: int, frame: Any | None) -> None:
        """
        Handle SIGINT/SIGTERM.

        Args:
            signum: Signal number received
            frame: Stack frame (unused)
        """
        try:
            signalName = signal.Signals(signum).name
        except ValueError:
            signalName = str(signum)

        if self._shutdownState == ShutdownState.SHUTDOWN_REQUESTED:
            logger.warning(f"Received second signal ({signalName}), forcing immediate exit")
            self._shutdownState = ShutdownState.FORCE_EXIT
            sys.exit(EXIT_CODE_FORCED)

        logger.info(f"Received signal {signalName}, shutting down stream")
        self.stop()
