################################################################################
# File Name: types.py
# Purpose/Description: Realtime stream types and dataclasses
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
Stream types module.

Contains:
- StreamState: Supervisor state machine states
- OutcomeKind / StreamOutcome: How a stream attempt ended
- StreamRequest: VIN batch plus staleness bound for one attempt
- SupervisorStats: Running counters for monitoring
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from common.error_handler import ErrorCategory
from compass.vehicle.vin import VinBatch

DEFAULT_MAX_STALENESS_MINUTES = 5


# ================================================================================
# Enums
# ================================================================================

class StreamState(Enum):
    """
    Stream supervisor state enumeration.

    States:
        IDLE: Not yet started
        OPENING: Stream-open call issued
        STREAMING: Receiving records
        ENDED: Server closed the stream cleanly
        FAILED: Attempt failed (transport/protocol error or deadline)
        BACKOFF: Waiting before the next attempt
        STOPPED: Supervisor loop exited
    """
    IDLE = 'idle'
    OPENING = 'opening'
    STREAMING = 'streaming'
    ENDED = 'ended'
    FAILED = 'failed'
    BACKOFF = 'backoff'
    STOPPED = 'stopped'


class OutcomeKind(Enum):
    """How a stream attempt finished."""
    GRACEFUL_END = 'graceful_end'
    FAILURE = 'failure'
    CANCELLED = 'cancelled'


# ================================================================================
# Data Classes
# ================================================================================

@dataclass(frozen=True)
class StreamRequest:
    """
    Parameters of one stream-open attempt.

    Attributes:
        vins: VINs multiplexed on the stream
        maxStalenessMinutes: Maximum age of data the server may return as current
    """
    vins: VinBatch
    maxStalenessMinutes: int = DEFAULT_MAX_STALENESS_MINUTES

    def __post_init__(self) -> None:
        if self.maxStalenessMinutes <= 0:
            raise ValueError("maxStalenessMinutes must be positive")


@dataclass(frozen=True)
class StreamOutcome:
    """
    Classification of how a stream attempt ended.

    Attributes:
        kind: GRACEFUL_END, FAILURE or CANCELLED
        recordCount: Records forwarded to the sink during the attempt
        cause: Exception that ended the attempt (FAILURE only)
        category: Error category of the cause (FAILURE only)
    """
    kind: OutcomeKind
    recordCount: int = 0
    cause: Exception | None = None
    category: ErrorCategory | None = None

    @property
    def isGracefulEnd(self) -> bool:
        return self.kind == OutcomeKind.GRACEFUL_END

    @property
    def isFailure(self) -> bool:
        return self.kind == OutcomeKind.FAILURE

    @property
    def isAuthFailure(self) -> bool:
        return self.isFailure and self.category == ErrorCategory.AUTHENTICATION

    @classmethod
    def gracefulEnd(cls, recordCount: int) -> 'StreamOutcome':
        return cls(OutcomeKind.GRACEFUL_END, recordCount=recordCount)

    @classmethod
    def failure(
        cls,
        cause: Exception,
        category: ErrorCategory,
        recordCount: int = 0
    ) -> 'StreamOutcome':
        return cls(OutcomeKind.FAILURE, recordCount=recordCount, cause=cause, category=category)

    @classmethod
    def cancelled(cls, recordCount: int = 0) -> 'StreamOutcome':
        return cls(OutcomeKind.CANCELLED, recordCount=recordCount)


@dataclass
class SupervisorStats:
    """
    Stream supervisor statistics for monitoring.

    Attributes:
        state: Current supervisor state
        attempts: Stream-open attempts made
        totalRecords: Records forwarded to the sink
        gracefulEnds: Attempts that ended with end-of-stream
        failures: Attempts that failed
        consecutiveFailures: Failures since the last successful attempt
        reauthentications: Sessions re-acquired after auth failures
        sinkErrors: Records the sink failed to accept
        lastError: Last failure message
        lastErrorTime: Timestamp of the last failure
        lastRecordTime: Timestamp of the last record received
        startTime: When run() started
    """
    state: StreamState = StreamState.IDLE
    attempts: int = 0
    totalRecords: int = 0
    gracefulEnds: int = 0
    failures: int = 0
    consecutiveFailures: int = 0
    reauthentications: int = 0
    sinkErrors: int = 0
    lastError: str | None = None
    lastErrorTime: datetime | None = None
    lastRecordTime: datetime | None = None
    startTime: datetime | None = None

    def toDict(self) -> dict[str, Any]:
        """Convert stats to dictionary for logging/serialization."""
        return {
            'state': self.state.value,
            'attempts': self.attempts,
            'totalRecords': self.totalRecords,
            'gracefulEnds': self.gracefulEnds,
            'failures': self.failures,
            'consecutiveFailures': self.consecutiveFailures,
            'reauthentications': self.reauthentications,
            'sinkErrors': self.sinkErrors,
            'lastError': self.lastError,
            'lastErrorTime': self.lastErrorTime.isoformat() if self.lastErrorTime else None,
            'lastRecordTime': self.lastRecordTime.isoformat() if self.lastRecordTime else None,
            'startTime': self.startTime.isoformat() if self.startTime else None,
        }
