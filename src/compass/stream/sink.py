################################################################################
# File Name: sink.py
# Purpose/Description: Consumers of realtime telemetry records
# Author: Ralph Agent
# Creation Date: 2026-10-13
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-13    | Ralph Agent  | Initial creation
# 2026-10-19    | Ralph Agent  | Log records as arguments, untouched by masking
# ================================================================================
################################################################################
"""
Message sinks for realtime telemetry.

A sink receives each record in arrival order and must return promptly; the
supervisor has no back-pressure beyond the stream receive itself.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from google.protobuf.json_format import MessageToDict
from google.protobuf.message import Message

logger = logging.getLogger(__name__)


def recordToDict(record: Any) -> dict[str, Any] | str:
    """
    Render a telemetry record for output.

    Args:
        record: Protobuf message or any other object

    Returns:
        Dict for protobuf messages, str() otherwise
    """
    if isinstance(record, Message):
        return MessageToDict(record, preserving_proto_field_name=True)
    return str(record)


class MessageSink(ABC):
    """
    Abstract base class for telemetry record consumers.

    All sinks must implement:
    - accept(): Consume one record
    """

    @abstractmethod
    def accept(self, record: Any) -> None:
        """
        Consume one telemetry record.

        Args:
            record: Record received from the stream
        """
        pass


class LoggingMessageSink(MessageSink):
    """Logs each record at INFO."""

    def __init__(self, sinkLogger: logging.Logger | None = None):
        self._logger = sinkLogger or logger
        self.count = 0

    def accept(self, record: Any) -> None:
        self.count += 1
        # Record goes in as an argument so message masking never rewrites it
        self._logger.info("Received stream data | stream_data=%s", recordToDict(record))


class ConsoleMessageSink(MessageSink):
    """Prints each record (interactive menu)."""

    def __init__(self, outputFunc: Callable[[str], Any] = print):
        self._output = outputFunc
        self.count = 0

    def accept(self, record: Any) -> None:
        self.count += 1
        self._output(str(record))
