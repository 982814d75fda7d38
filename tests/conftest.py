################################################################################
# File Name: conftest.py
# Purpose/Description: Pytest fixtures and configuration
# Author: Michael Cornelison
# Creation Date: 2026-01-21
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-01-21    | M. Cornelison | Initial implementation
# 2026-10-16    | M. Cornelison | Compass settings, session and gRPC fakes
# ================================================================================
################################################################################

"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all test files automatically.

Usage:
    def test_something(clientSettings, session, makeRpcError):
        # fixtures are automatically injected
        pass
"""

import copy
import json
import os
import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import grpc
import pytest

# Add src to path for imports
srcPath = Path(__file__).parent.parent / 'src'
if str(srcPath) not in sys.path:
    sys.path.insert(0, str(srcPath))

from compass.session.types import Session
from compass.settings import ClientSettings


# ================================================================================
# Test Data
# ================================================================================

VALID_VINS = [
    '1C4RJFAG0FC625797',
    '1FTFW1ET5DFC10312',
    '2C3CDXBG5KH123456',
    '3VWDX7AJ5DM000001',
]


class FakeRpcError(grpc.RpcError):
    """RpcError carrying a status code and details, like a failed grpc call."""

    def __init__(self, code: grpc.StatusCode, details: str = ''):
        super().__init__(details)
        self._code = code
        self._details = details

    def code(self) -> grpc.StatusCode:
        return self._code

    def details(self) -> str:
        return self._details


class FakeStreamCall:
    """
    Server-streaming call double.

    Yields the given records, then raises `error` if set (otherwise ends
    cleanly, like end-of-stream).
    """

    def __init__(self, records: list[Any] | None = None, error: Exception | None = None):
        self.records = list(records or [])
        self.error = error
        self.cancelled = False

    def __iter__(self):
        for record in self.records:
            if self.cancelled:
                return
            yield record
        if self.error is not None:
            raise self.error

    def cancel(self) -> bool:
        self.cancelled = True
        return True


# ================================================================================
# Configuration Fixtures
# ================================================================================

@pytest.fixture
def sampleConfig() -> dict[str, Any]:
    """
    Provide sample configuration for tests.

    Returns:
        Dictionary with test configuration values
    """
    return {
        'application': {
            'name': 'compass-stream-client',
            'environment': 'test'
        },
        'logging': {
            'level': 'DEBUG',
            'maskPII': True
        },
        'api': {
            'target': 'localhost:50051',
            'apiKey': 'test-api-key-123456',
            'messagesModule': 'nativeconnect.api.v1.service_pb2',
            'servicesModule': 'nativeconnect.api.v1.service_pb2_grpc',
            'requestTimeoutSeconds': 10
        },
        'consent': {
            'email': 'fleet@example.com',
            'region': 2
        },
        'stream': {
            'maxStalenessMinutes': 5,
            'attemptTimeoutSeconds': 600,
            'endOfStreamDelaySeconds': 0,
            'reauthenticateOnAuthError': True,
            'retry': {
                'strategy': 'fixed',
                'delaySeconds': 5,
                'multiplier': 2.0,
                'maxDelaySeconds': 60
            }
        },
        'lastReportedPoints': {
            'points': 5
        }
    }


@pytest.fixture
def minimalConfig() -> dict[str, Any]:
    """
    Provide minimal configuration for testing defaults.

    Returns:
        Dictionary with only the required keys
    """
    return {
        'api': {
            'target': 'localhost:50051',
            'apiKey': 'test-api-key-123456'
        }
    }


@pytest.fixture
def invalidConfig() -> dict[str, Any]:
    """
    Provide invalid configuration for error testing.

    Returns:
        Dictionary with missing required configuration
    """
    return {
        'api': {
            # Missing target and apiKey
        }
    }


@pytest.fixture
def clientSettings(sampleConfig: dict[str, Any]) -> ClientSettings:
    """Frozen client settings built from sampleConfig."""
    return ClientSettings.fromConfig(copy.deepcopy(sampleConfig))


@pytest.fixture
def session() -> Session:
    """Authenticated session with a test token."""
    return Session(accessToken='test-access-token')


# ================================================================================
# Environment Fixtures
# ================================================================================

@pytest.fixture
def envVars() -> Generator[dict[str, str], None, None]:
    """
    Set up test environment variables.

    Yields:
        Dictionary of environment variables that were set

    Automatically cleans up after test.
    """
    testVars = {
        'ENVIRONMENT': 'test',
        'COMPASS_API_KEY': 'env-api-key-abcdef',
        'CONSENT_EMAIL': 'ops@example.com',
    }

    # Save original values
    originalVars = {}
    for key in testVars:
        originalVars[key] = os.environ.get(key)
        os.environ[key] = testVars[key]

    yield testVars

    # Restore original values
    for key, value in originalVars.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def cleanEnv() -> Generator[None, None, None]:
    """
    Ensure clean environment with no test variables.

    Removes common test variables before test, restores after.
    """
    varsToRemove = [
        'ENVIRONMENT', 'COMPASS_API_KEY', 'CONSENT_EMAIL',
        'COMPASS_TARGET', 'LOG_LEVEL',
        'TEST_VAR'  # Used by test_secrets_loader and test_main
    ]

    # Save and remove
    saved = {}
    for var in varsToRemove:
        saved[var] = os.environ.pop(var, None)

    yield

    # Restore
    for var, value in saved.items():
        os.environ.pop(var, None)
        if value is not None:
            os.environ[var] = value


# ================================================================================
# gRPC Fixtures
# ================================================================================

@pytest.fixture
def makeRpcError() -> Callable[..., FakeRpcError]:
    """
    Provide a factory for gRPC errors.

    Usage:
        error = makeRpcError(grpc.StatusCode.UNAVAILABLE, 'connection reset')
    """
    def factory(code: grpc.StatusCode, details: str = '') -> FakeRpcError:
        return FakeRpcError(code, details)
    return factory


@pytest.fixture
def makeStreamCall() -> Callable[..., FakeStreamCall]:
    """Provide a factory for fake server-streaming calls."""
    def factory(records: list[Any] | None = None, error: Exception | None = None) -> FakeStreamCall:
        return FakeStreamCall(records, error)
    return factory


@pytest.fixture
def mockStub() -> MagicMock:
    """Mock Compass ServiceStub; every RPC is a MagicMock."""
    return MagicMock()


@pytest.fixture
def mockMessages() -> MagicMock:
    """Mock generated messages module; constructors record their kwargs."""
    return MagicMock()


@pytest.fixture
def mockLogger() -> MagicMock:
    """
    Provide mock logger for testing log calls.

    Returns:
        MagicMock logger instance
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger


# ================================================================================
# File System Fixtures
# ================================================================================

@pytest.fixture
def tempConfigFile(tmp_path: Path, sampleConfig: dict[str, Any]) -> Path:
    """
    Create temporary config file for testing.

    Args:
        tmp_path: Pytest temp directory fixture
        sampleConfig: Sample configuration fixture

    Returns:
        Path to temporary config file
    """
    configFile = tmp_path / 'config.json'
    with open(configFile, 'w') as f:
        json.dump(sampleConfig, f)

    return configFile


@pytest.fixture
def tempEnvFile(tmp_path: Path, envVars: dict[str, str]) -> Path:
    """
    Create temporary .env file for testing.

    Args:
        tmp_path: Pytest temp directory fixture
        envVars: Environment variables fixture

    Returns:
        Path to temporary .env file
    """
    envFile = tmp_path / '.env'
    with open(envFile, 'w') as f:
        for key, value in envVars.items():
            f.write(f'{key}={value}\n')

    return envFile


@pytest.fixture
def vinCsvFile(tmp_path: Path) -> Path:
    """CSV file with two VINs, a blank row and a padded VIN."""
    csvFile = tmp_path / 'vins.csv'
    csvFile.write_text(
        f'{VALID_VINS[0]},jeep\n'
        '\n'
        f'  {VALID_VINS[1]}  ,chrysler\n',
        encoding='utf-8'
    )
    return csvFile


# ================================================================================
# Utility Fixtures
# ================================================================================

@pytest.fixture
def assertNoLogs(caplog: pytest.LogCaptureFixture) -> Generator[None, None, None]:
    """
    Assert that no error logs were emitted during test.

    Usage:
        def test_something(assertNoLogs):
            # Test code here
            # Will fail if any ERROR logs are emitted
    """
    yield

    errors = [r for r in caplog.records if r.levelname == 'ERROR']
    assert len(errors) == 0, f"Unexpected error logs: {[r.message for r in errors]}"


# ================================================================================
# Pytest Configuration
# ================================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
