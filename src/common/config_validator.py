################################################################################
# File Name: config_validator.py
# Purpose/Description: Configuration validation with required fields and defaults
# Author: Michael Cornelison
# Creation Date: 2026-01-21
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-01-21    | M. Cornelison | Initial implementation
# 2026-10-12    | M. Cornelison | Compass API, consent and stream defaults
# 2026-10-19    | M. Cornelison | Remove unused validateConfig wrapper
# ================================================================================
################################################################################

"""
Configuration validation module.

Provides validation of configuration files with:
- Required field checking
- Default value application
- Nested configuration support
- Clear error messages for missing/invalid fields

Usage:
    from common.config_validator import ConfigValidator

    validator = ConfigValidator()
    config = validator.validate(rawConfig)
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, missingFields: list[str] | None = None):
        super().__init__(message)
        self.missingFields = missingFields or []


# Required configuration keys (dot notation)
REQUIRED_KEYS: list[str] = [
    'api.target',
    'api.apiKey',
]

# Default values for optional settings
DEFAULTS: dict[str, Any] = {
    'application.name': 'compass-stream-client',
    'application.environment': 'dev',
    'logging.level': 'INFO',
    'logging.maskPII': True,
    'api.messagesModule': 'nativeconnect.api.v1.service_pb2',
    'api.servicesModule': 'nativeconnect.api.v1.service_pb2_grpc',
    'api.requestTimeoutSeconds': 30,
    'consent.email': '',
    'consent.region': 2,
    'stream.maxStalenessMinutes': 5,
    'stream.attemptTimeoutSeconds': 600,
    'stream.endOfStreamDelaySeconds': 0,
    'stream.reauthenticateOnAuthError': True,
    'stream.retry.strategy': 'fixed',
    'stream.retry.delaySeconds': 5,
    'stream.retry.multiplier': 2.0,
    'stream.retry.maxDelaySeconds': 60,
    'lastReportedPoints.points': 5,
}


class ConfigValidator:
    """
    Validates configuration dictionaries.

    Provides methods to:
    - Check for required fields
    - Apply default values
    - Validate field types
    - Return fully validated configuration

    Attributes:
        requiredKeys: List of required configuration keys (dot notation)
        defaults: Dictionary of default values for optional fields
    """

    def __init__(
        self,
        requiredKeys: list[str] | None = None,
        defaults: dict[str, Any] | None = None
    ):
        """
        Initialize the validator.

        Args:
            requiredKeys: List of required keys in dot notation (e.g., 'api.apiKey')
            defaults: Dictionary of default values in dot notation
        """
        self.requiredKeys = REQUIRED_KEYS if requiredKeys is None else requiredKeys
        self.defaults = DEFAULTS if defaults is None else defaults

    def validate(self, config: dict[str, Any]) -> dict[str, Any]:
        """
        Validate and enhance configuration.

        Performs:
        1. Required field validation
        2. Default value application
        3. Returns validated configuration

        Args:
            config: Raw configuration dictionary

        Returns:
            Validated configuration with defaults applied

        Raises:
            ConfigValidationError: If required fields are missing
        """
        missingFields = self._validateRequired(config)
        if missingFields:
            fieldList = ', '.join(missingFields)
            raise ConfigValidationError(
                f"Missing required configuration fields: {fieldList}",
                missingFields=missingFields
            )

        config = self._applyDefaults(config)

        logger.info("Configuration validated successfully")
        return config

    def _validateRequired(self, config: dict[str, Any]) -> list[str]:
        """
        Check for required configuration fields.

        Args:
            config: Configuration dictionary to check

        Returns:
            List of missing field names (empty if all present)
        """
        missingFields = []

        for key in self.requiredKeys:
            if not self._getNestedValue(config, key):
                missingFields.append(key)

        return missingFields

    def _applyDefaults(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply default values for missing optional fields."""
        for key, defaultValue in self.defaults.items():
            if self._getNestedValue(config, key) is None:
                self._setNestedValue(config, key, defaultValue)
                logger.debug(f"Applied default for {key}: {defaultValue}")

        return config

    def _getNestedValue(self, config: dict[str, Any], key: str) -> Any:
        """
        Get a value from nested dictionary using dot notation.

        Args:
            config: Configuration dictionary
            key: Dot-notation key (e.g., 'stream.retry.delaySeconds')

        Returns:
            Value if found, None otherwise
        """
        keys = key.split('.')
        value = config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None

        return value

    def _setNestedValue(self, config: dict[str, Any], key: str, value: Any) -> None:
        """Set a value in nested dictionary using dot notation."""
        keys = key.split('.')
        current = config

        for k in keys[:-1]:
            if k not in current or current[k] is None:
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

