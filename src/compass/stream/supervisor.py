################################################################################
# File Name: supervisor.py
# Purpose/Description: Keeps the realtime telemetry stream open across failures
# Author: Michael Cornelison
# Creation Date: 2026-10-13
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-13    | M. Cornelison | Initial implementation
# 2026-10-15    | M. Cornelison | Stop token, background thread, re-authentication
# 2026-10-19    | M. Cornelison | Reentrant lock for signal-time stop, keep pending stop
# ================================================================================
################################################################################

"""
Realtime stream supervisor.

Opens a bounded-duration RealtimeRawPointByVins stream for a VIN batch,
forwards every record to a sink, and decides when to reopen:

    IDLE -> OPENING -> STREAMING -> ENDED  -> (end-of-stream delay) -> OPENING
                               \\-> FAILED -> (backoff)            -> OPENING

- A clean end of stream reopens after policy.endOfStreamDelaySeconds (0 by default)
- Any other error, including the attempt deadline, is logged and retried after
  the policy backoff (fixed 5s by default, no attempt cap)
- An UNAUTHENTICATED/PERMISSION_DENIED failure re-acquires the session first
- stop() cancels the in-flight call and interrupts a backoff wait

Usage:
    from compass.stream import StreamSupervisor, LoggingMessageSink, RetryPolicy

    supervisor = StreamSupervisor(apiClient, session, LoggingMessageSink(),
                                  policy=RetryPolicy(), authenticator=authenticator)
    supervisor.run(vinBatch)          # blocks until stop()
"""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from common.error_handler import AuthenticationError, classifyError, formatError
from compass.session.types import Session
from compass.vehicle.vin import VinBatch

from .policy import RetryPolicy
from .sink import MessageSink
from .types import (
    DEFAULT_MAX_STALENESS_MINUTES,
    OutcomeKind,
    StreamOutcome,
    StreamRequest,
    StreamState,
    SupervisorStats,
)

logger = logging.getLogger(__name__)


# ================================================================================
# Constants
# ================================================================================

# Deadline for one whole stream attempt (not per message)
DEFAULT_ATTEMPT_TIMEOUT = 600.0


class StreamSupervisor:
    """
    Supervises the realtime telemetry stream for a fixed VIN batch.

    At most one stream call is outstanding at a time; all VINs share it.

    Attributes:
        apiClient: Client exposing openRealtimeStream(session, request, timeoutSeconds)
        sink: MessageSink receiving every record
        policy: RetryPolicy deciding delays and attempt cap
        authenticator: Optional SessionAuthenticator for re-authentication
    """

    def __init__(
        self,
        apiClient: Any,
        session: Session,
        sink: MessageSink,
        policy: RetryPolicy | None = None,
        authenticator: Any | None = None,
        maxStalenessMinutes: int = DEFAULT_MAX_STALENESS_MINUTES,
        attemptTimeoutSeconds: float = DEFAULT_ATTEMPT_TIMEOUT,
        reauthenticateOnAuthError: bool = True,
        sleepFunc: Callable[[float], Any] | None = None
    ):
        """
        Initialize the supervisor.

        Args:
            apiClient: Compass API client
            session: Authenticated session used for stream calls
            sink: Consumer of telemetry records
            policy: Reconnect policy (defaults to fixed 5s, no cap)
            authenticator: Used to replace the session after auth failures
            maxStalenessMinutes: Staleness bound sent with every request
            attemptTimeoutSeconds: Deadline for each whole stream attempt
            reauthenticateOnAuthError: Re-authenticate on auth failures
            sleepFunc: Delay function (defaults to an interruptible wait)
        """
        self.apiClient = apiClient
        self.sink = sink
        self.policy = policy or RetryPolicy()
        self.authenticator = authenticator

        self._session = session
        self._maxStalenessMinutes = maxStalenessMinutes
        self._attemptTimeout = attemptTimeoutSeconds
        self._reauthenticate = reauthenticateOnAuthError

        # Thread control
        self._stopEvent = threading.Event()
        self._lock = threading.RLock()
        self._thread: threading.Thread | None = None
        self._activeCall: Any | None = None
        self._sleep = sleepFunc or self._stopEvent.wait

        self._stats = SupervisorStats()

    @classmethod
    def fromSettings(
        cls,
        settings: Any,
        apiClient: Any,
        session: Session,
        sink: MessageSink,
        authenticator: Any | None = None
    ) -> 'StreamSupervisor':
        """
        Create a supervisor from ClientSettings.

        Args:
            settings: compass.settings.ClientSettings
            apiClient: Compass API client
            session: Authenticated session
            sink: Consumer of telemetry records
            authenticator: Optional SessionAuthenticator

        Returns:
            Configured StreamSupervisor
        """
        streamSettings = settings.stream
        return cls(
            apiClient,
            session,
            sink,
            policy=RetryPolicy.fromSettings(streamSettings),
            authenticator=authenticator,
            maxStalenessMinutes=streamSettings.maxStalenessMinutes,
            attemptTimeoutSeconds=streamSettings.attemptTimeoutSeconds,
            reauthenticateOnAuthError=streamSettings.reauthenticateOnAuthError,
        )

    # ================================================================================
    # Properties
    # ================================================================================

    @property
    def session(self) -> Session:
        """Session used for the next stream attempt."""
        return self._session

    @property
    def state(self) -> StreamState:
        return self._stats.state

    @property
    def isRunning(self) -> bool:
        return self._stats.state not in (StreamState.IDLE, StreamState.STOPPED)

    @property
    def isStopRequested(self) -> bool:
        return self._stopEvent.is_set()

    def getStats(self) -> SupervisorStats:
        """Get current supervisor statistics."""
        return self._stats

    # ================================================================================
    # Lifecycle
    # ================================================================================

    def run(self, vins: VinBatch | Iterable[str]) -> SupervisorStats:
        """
        Stream until stop() is called or the policy gives up.

        Args:
            vins: VIN batch to stream

        Returns:
            Final SupervisorStats

        Raises:
            VinBatchError: If the batch is empty or has duplicates
            VinValidationError: If a VIN is malformed
        """
        request = self._buildRequest(vins)

        self._stats.startTime = datetime.now()
        logger.info(
            f"Stream supervisor started | vins={len(request.vins)} | "
            f"maxStaleness={request.maxStalenessMinutes}m | "
            f"attemptTimeout={self._attemptTimeout}s"
        )

        try:
            while not self._stopEvent.is_set():
                outcome = self._runAttempt(request)
                if not self._recordOutcome(outcome):
                    break

                delay = self._nextDelay(outcome)
                if delay > 0 and not self._stopEvent.is_set():
                    self._setState(StreamState.BACKOFF)
                    logger.info(f"Reopening stream in {delay:.1f}s")
                    self._sleep(delay)
        finally:
            self._setState(StreamState.STOPPED)
            logger.info(f"Stream supervisor stopped | {self._formatStats()}")

        return self._stats

    def runOnce(self, vins: VinBatch | Iterable[str]) -> StreamOutcome:
        """
        Perform a single stream attempt without reopening.

        Args:
            vins: VIN batch to stream

        Returns:
            StreamOutcome of the attempt
        """
        request = self._buildRequest(vins)
        try:
            outcome = self._runAttempt(request)
            self._recordOutcome(outcome, retrying=False)
            return outcome
        finally:
            self._setState(StreamState.STOPPED)

    def start(self, vins: VinBatch | Iterable[str]) -> bool:
        """
        Run the supervisor loop in a background thread.

        The batch is validated before the thread starts, so malformed input
        raises here.

        Args:
            vins: VIN batch to stream

        Returns:
            True if started, False if already running or already stopped
        """
        batch = vins if isinstance(vins, VinBatch) else VinBatch.fromIterable(vins)

        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                logger.warning("Stream supervisor already running")
                return False

            if self._stopEvent.is_set():
                logger.info("Stop already requested, not starting stream supervisor")
                return False

            self._thread = threading.Thread(
                target=self.run,
                args=(batch,),
                name='StreamSupervisor',
                daemon=True
            )
            self._thread.start()

        return True

    def requestStop(self) -> None:
        """
        Set the stop token and cancel the in-flight stream without waiting.

        Safe to call from a signal handler.
        """
        logger.info("Stopping stream supervisor")
        self._stopEvent.set()

        with self._lock:
            call = self._activeCall

        if call is not None:
            self._cancelCall(call)

    def join(self, timeout: float | None = None) -> bool:
        """
        Wait for the background thread started by start().

        Args:
            timeout: Seconds to wait (None waits forever)

        Returns:
            True if no background thread is running
        """
        with self._lock:
            thread = self._thread

        if thread is None or thread is threading.current_thread():
            return True

        thread.join(timeout)
        return not thread.is_alive()

    def stop(self, timeout: float = 5.0) -> bool:
        """
        Request shutdown and wait for the background thread, if any.

        Args:
            timeout: Seconds to wait for the background thread

        Returns:
            True if the supervisor is no longer running
        """
        self.requestStop()

        if not self.join(timeout):
            logger.warning(f"Stream supervisor did not stop within {timeout}s")
            return False

        return True

    # ================================================================================
    # Attempt handling
    # ================================================================================

    def _buildRequest(self, vins: VinBatch | Iterable[str]) -> StreamRequest:
        batch = vins if isinstance(vins, VinBatch) else VinBatch.fromIterable(vins)
        return StreamRequest(vins=batch, maxStalenessMinutes=self._maxStalenessMinutes)

    def _runAttempt(self, request: StreamRequest) -> StreamOutcome:
        """
        Open one stream and consume it until it ends, fails or is cancelled.

        Args:
            request: VIN batch and staleness bound

        Returns:
            StreamOutcome for the attempt
        """
        self._stats.attempts += 1
        self._setState(StreamState.OPENING)
        received = 0

        try:
            call = self.apiClient.openRealtimeStream(
                self._session, request, self._attemptTimeout
            )
            with self._lock:
                self._activeCall = call

            # stop() may have run between the open and the assignment above
            if self._stopEvent.is_set():
                self._cancelCall(call)
                return StreamOutcome.cancelled(received)

            self._setState(StreamState.STREAMING)
            logger.info(f"Receiving stream messages | attempt={self._stats.attempts}")

            for record in call:
                received += 1
                self._stats.totalRecords += 1
                self._stats.lastRecordTime = datetime.now()
                self._deliver(record)

                if self._stopEvent.is_set():
                    self._cancelCall(call)
                    return StreamOutcome.cancelled(received)

        except Exception as e:
            if self._stopEvent.is_set():
                return StreamOutcome.cancelled(received)
            self._setState(StreamState.FAILED)
            return StreamOutcome.failure(e, classifyError(e), received)

        finally:
            with self._lock:
                self._activeCall = None

        self._setState(StreamState.ENDED)
        return StreamOutcome.gracefulEnd(received)

    def _deliver(self, record: Any) -> None:
        try:
            self.sink.accept(record)
        except Exception as e:
            self._stats.sinkErrors += 1
            logger.warning(f"Sink failed to accept record | error={e}")

    def _recordOutcome(self, outcome: StreamOutcome, retrying: bool = True) -> bool:
        """
        Update statistics and log an attempt outcome.

        Args:
            outcome: Outcome of the attempt
            retrying: Whether the loop intends to reopen

        Returns:
            True if the loop should continue
        """
        if outcome.kind == OutcomeKind.CANCELLED:
            logger.info(f"Stream cancelled | records={outcome.recordCount}")
            return False

        if outcome.isGracefulEnd:
            self._stats.gracefulEnds += 1
            self._stats.consecutiveFailures = 0
            logger.info(f"Stream ended. | records={outcome.recordCount}")
            return True

        self._stats.failures += 1
        if outcome.recordCount > 0:
            # The stream delivered data, so the outage starts now
            self._stats.consecutiveFailures = 1
        else:
            self._stats.consecutiveFailures += 1
        self._stats.lastError = str(outcome.cause)
        self._stats.lastErrorTime = datetime.now()

        if not retrying:
            logger.error(f"Error receiving from stream | {formatError(outcome.cause)}")
            return False

        if not self.policy.shouldRetry(self._stats.consecutiveFailures):
            logger.error(
                f"Error receiving from stream, giving up | {formatError(outcome.cause)} | "
                f"consecutiveFailures={self._stats.consecutiveFailures}"
            )
            return False

        logger.error(
            f"Error receiving from stream, retrying... | "
            f"{formatError(outcome.cause)} | "
            f"consecutiveFailures={self._stats.consecutiveFailures}"
        )

        if outcome.isAuthFailure:
            self._refreshSession()

        return True

    def _nextDelay(self, outcome: StreamOutcome) -> float:
        if outcome.isGracefulEnd:
            return self.policy.endOfStreamDelaySeconds
        return self.policy.delayFor(self._stats.consecutiveFailures)

    def _refreshSession(self) -> None:
        """Replace the session after the server rejected its credential."""
        if not self._reauthenticate or self.authenticator is None:
            logger.warning("Stream credential rejected; re-authentication disabled")
            return

        try:
            self._session = self.authenticator.authenticate()
        except AuthenticationError as e:
            logger.error(f"Re-authentication failed | {formatError(e)}")
            return

        self._stats.reauthentications += 1
        logger.info(f"Session re-acquired | reauthentications={self._stats.reauthentications}")

    def _cancelCall(self, call: Any) -> None:
        cancel = getattr(call, 'cancel', None)
        if callable(cancel):
            try:
                cancel()
            except Exception as e:
                logger.warning(f"Error cancelling stream: {e}")

    def _setState(self, state: StreamState) -> None:
        self._stats.state = state

    def _formatStats(self) -> str:
        stats = self._stats
        return (
            f"attempts={stats.attempts} | records={stats.totalRecords} | "
            f"gracefulEnds={stats.gracefulEnds} | failures={stats.failures}"
        )
