################################################################################
# File Name: logging_config.py
# Purpose/Description: Logging setup with credential masking
# Author: Michael Cornelison
# Creation Date: 2026-01-21
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-01-21    | M. Cornelison | Initial implementation
# 2026-10-12    | M. Cornelison | Mask bearer tokens, app name in console format
# 2026-10-19    | M. Cornelison | Mask only emails and bearer tokens, never log
#               |              | arguments (telemetry payloads pass through)
# ================================================================================
################################################################################

"""
Logging configuration module.

setupLogging() installs a console handler (and optionally a file handler) on
the root logger. When masking is enabled, each handler gets a
SensitiveDataFilter that rewrites the message template:

- Bearer tokens become 'Bearer [TOKEN_MASKED]'
- Email addresses (the consent email) become '[EMAIL_MASKED]'

Only the template is rewritten. Values passed as logging arguments, such as
telemetry records from the stream sink, are left as received.

Usage:
    from common.logging_config import setupLogging, getLogger

    setupLogging(level='INFO', logFile='logs/compass.log')
    logger = getLogger(__name__)
    logger.info("Stream opened | vins=3")
"""

import logging
import re
import sys
from pathlib import Path

DEFAULT_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s | %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Pattern -> replacement, applied in order
MASKING_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r'(?i)(bearer\s+)[A-Za-z0-9._~+/=-]+'), r'\1[TOKEN_MASKED]'),
    (re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'), '[EMAIL_MASKED]'),
]


def maskSensitive(text: str) -> str:
    """
    Apply every masking rule to a string.

    Args:
        text: Text that may contain credentials or an email address

    Returns:
        Masked text
    """
    for pattern, replacement in MASKING_RULES:
        text = pattern.sub(replacement, text)
    return text


class SensitiveDataFilter(logging.Filter):
    """Masks bearer tokens and email addresses in the message template."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = maskSensitive(record.msg)
        return True


def _attachHandler(
    rootLogger: logging.Logger,
    handler: logging.Handler,
    formatter: logging.Formatter,
    masking: bool
) -> None:
    handler.setFormatter(formatter)
    if masking:
        handler.addFilter(SensitiveDataFilter())
    rootLogger.addHandler(handler)


def setupLogging(
    level: str = 'INFO',
    logFormat: str | None = None,
    logFile: str | None = None,
    enablePIIMasking: bool = True
) -> logging.Logger:
    """
    Configure application logging.

    Replaces any handlers already on the root logger, so it can be called
    again once the configuration file has been loaded.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        logFormat: Format string (defaults to DEFAULT_FORMAT)
        logFile: Optional path of a log file; parent directories are created
        enablePIIMasking: Attach SensitiveDataFilter to every handler

    Returns:
        Root logger instance
    """
    numericLevel = getattr(logging, level.upper(), logging.INFO)
    rootLogger = logging.getLogger()
    rootLogger.setLevel(numericLevel)
    rootLogger.handlers.clear()

    formatter = logging.Formatter(fmt=logFormat or DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    _attachHandler(rootLogger, logging.StreamHandler(sys.stdout), formatter, enablePIIMasking)

    if logFile:
        Path(logFile).parent.mkdir(parents=True, exist_ok=True)
        _attachHandler(
            rootLogger,
            logging.FileHandler(logFile, encoding='utf-8'),
            formatter,
            enablePIIMasking
        )

    # grpc's own logger is chatty at DEBUG
    logging.getLogger('grpc').setLevel(max(numericLevel, logging.INFO))

    rootLogger.info(f"Logging configured | level={level} | masking={enablePIIMasking}")

    return rootLogger


def getLogger(name: str) -> logging.Logger:
    """Get a logger instance for a module (typically __name__)."""
    return logging.getLogger(name)
