################################################################################
# File Name: __init__.py
# Purpose/Description: Stream subpackage for realtime telemetry
# Author: Michael Cornelison
# Creation Date: 2026-10-13
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-13    | M. Cornelison | Initial subpackage creation
# ================================================================================
################################################################################
"""
Stream Subpackage.

Types:
    StreamState, OutcomeKind, StreamOutcome, StreamRequest, SupervisorStats

Classes:
    StreamSupervisor: Keeps the realtime stream open
    RetryPolicy, BackoffStrategy: Reconnect policy
    MessageSink, LoggingMessageSink, ConsoleMessageSink: Record consumers

Usage:
    from compass.stream import StreamSupervisor, LoggingMessageSink
"""

from .exceptions import StreamError
from .types import (
    OutcomeKind,
    StreamOutcome,
    StreamRequest,
    StreamState,
    SupervisorStats,
)
from .policy import BackoffStrategy, RetryPolicy
from .sink import ConsoleMessageSink, LoggingMessageSink, MessageSink
from .supervisor import StreamSupervisor

__all__ = [
    # Types
    'OutcomeKind',
    'StreamOutcome',
    'StreamRequest',
    'StreamState',
    'SupervisorStats',
    # Exceptions
    'StreamError',
    # Policy
    'BackoffStrategy',
    'RetryPolicy',
    # Sinks
    'ConsoleMessageSink',
    'LoggingMessageSink',
    'MessageSink',
    # Supervisor
    'StreamSupervisor',
]
