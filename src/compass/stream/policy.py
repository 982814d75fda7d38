################################################################################
# File Name: policy.py
# Purpose/Description: Reconnect policy for the realtime stream supervisor
# Author: Michael Cornelison
# Creation Date: 2026-10-13
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-13    | M. Cornelison | Initial implementation
# ================================================================================
################################################################################

"""
Stream retry policy module.

The default policy reproduces the long-standing behaviour of the stream
daemon: reopen immediately after a clean end-of-stream, wait a fixed 5 seconds
after a failure, never give up. Exponential (capped) and jittered backoff are
available through configuration.

Usage:
    from compass.stream.policy import RetryPolicy

    policy = RetryPolicy.fromSettings(settings.stream)
    delay = policy.delayFor(consecutiveFailures)
"""

import random
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

# ================================================================================
# Constants
# ================================================================================

DEFAULT_FAILURE_DELAY = 5.0
DEFAULT_END_OF_STREAM_DELAY = 0.0
DEFAULT_MULTIPLIER = 2.0
DEFAULT_MAX_DELAY = 60.0


class BackoffStrategy(Enum):
    """Backoff strategies for failed attempts."""
    FIXED = 'fixed'
    EXPONENTIAL = 'exponential'   # delay * multiplier^(n-1), capped
    JITTERED = 'jittered'         # uniform(0, exponential delay)


@dataclass(frozen=True)
class RetryPolicy:
    """
    When and whether the supervisor reopens a stream.

    Attributes:
        strategy: Backoff strategy for failed attempts
        delaySeconds: Base delay after a failure
        multiplier: Growth factor for exponential/jittered strategies
        maxDelaySeconds: Cap for exponential/jittered strategies
        maxAttempts: Consecutive failures allowed before giving up (None = never)
        endOfStreamDelaySeconds: Delay before reopening after a clean end
    """
    strategy: BackoffStrategy = BackoffStrategy.FIXED
    delaySeconds: float = DEFAULT_FAILURE_DELAY
    multiplier: float = DEFAULT_MULTIPLIER
    maxDelaySeconds: float = DEFAULT_MAX_DELAY
    maxAttempts: int | None = None
    endOfStreamDelaySeconds: float = DEFAULT_END_OF_STREAM_DELAY

    def __post_init__(self) -> None:
        if self.delaySeconds < 0 or self.endOfStreamDelaySeconds < 0:
            raise ValueError("Delays must not be negative")
        if self.multiplier < 1.0:
            raise ValueError("multiplier must be at least 1.0")
        if self.maxAttempts is not None and self.maxAttempts < 1:
            raise ValueError("maxAttempts must be at least 1")

    @classmethod
    def fromSettings(cls, streamSettings: Any) -> 'RetryPolicy':
        """
        Build a policy from StreamSettings.

        Args:
            streamSettings: compass.settings.StreamSettings

        Returns:
            RetryPolicy
        """
        retry = streamSettings.retry
        return cls(
            strategy=BackoffStrategy(retry.strategy),
            delaySeconds=retry.delaySeconds,
            multiplier=retry.multiplier,
            maxDelaySeconds=retry.maxDelaySeconds,
            maxAttempts=retry.maxAttempts,
            endOfStreamDelaySeconds=streamSettings.endOfStreamDelaySeconds,
        )

    def shouldRetry(self, consecutiveFailures: int) -> bool:
        """
        Check whether another attempt is allowed.

        Args:
            consecutiveFailures: Failures since the last successful attempt

        Returns:
            True if the supervisor should try again
        """
        return self.maxAttempts is None or consecutiveFailures < self.maxAttempts

    def delayFor(
        self,
        consecutiveFailures: int,
        randomFunc: Callable[[float, float], float] = random.uniform
    ) -> float:
        """
        Delay before the next attempt after a failure.

        Args:
            consecutiveFailures: Failures so far, including the one just seen (>= 1)
            randomFunc: Source of jitter (for testing)

        Returns:
            Delay in seconds
        """
        if self.strategy == BackoffStrategy.FIXED:
            return self.delaySeconds

        # Bounded so float power cannot overflow on very long outages
        exponent = min(max(consecutiveFailures, 1) - 1, 64)
        delay = min(self.delaySeconds * (self.multiplier ** exponent), self.maxDelaySeconds)

        if self.strategy == BackoffStrategy.JITTERED:
            return randomFunc(0.0, delay)

        return delay
