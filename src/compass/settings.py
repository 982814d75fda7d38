################################################################################
# File Name: settings.py
# Purpose/Description: Immutable client settings built from validated config
# Author: Michael Cornelison
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | M. Cornelison | Initial implementation
# ================================================================================
################################################################################

"""
Client settings module.

Turns the validated configuration dictionary into a frozen settings value
that is passed explicitly to every component (no module-level globals).

Usage:
    from compass.settings import ClientSettings

    settings = ClientSettings.fromConfig(config)
    settings.requireConsentEmail()
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from common.error_handler import ConfigurationError
from common.secrets_loader import hasUnresolvedPlaceholder


class RetrySettings(BaseModel):
    """Backoff settings for failed stream attempts."""

    model_config = ConfigDict(frozen=True)

    strategy: str = 'fixed'
    delaySeconds: float = Field(default=5.0, ge=0)
    multiplier: float = Field(default=2.0, ge=1.0)
    maxDelaySeconds: float = Field(default=60.0, ge=0)
    maxAttempts: int | None = Field(default=None, ge=1)

    @field_validator('strategy')
    @classmethod
    def _checkStrategy(cls, value: str) -> str:
        value = value.lower()
        if value not in ('fixed', 'exponential', 'jittered'):
            raise ValueError(f"unknown retry strategy '{value}'")
        return value


class StreamSettings(BaseModel):
    """Realtime stream settings."""

    model_config = ConfigDict(frozen=True)

    maxStalenessMinutes: int = Field(default=5, gt=0)
    attemptTimeoutSeconds: float = Field(default=600.0, gt=0)
    endOfStreamDelaySeconds: float = Field(default=0.0, ge=0)
    reauthenticateOnAuthError: bool = True
    retry: RetrySettings = RetrySettings()


class ClientSettings(BaseModel):
    """
    Immutable settings for the Compass client.

    Attributes:
        environment: Deployment environment name (ENVIRONMENT)
        target: gRPC target of the Compass service
        apiKey: Static API key exchanged for a bearer token (COMPASS_API_KEY)
        consentEmail: Contact identifier for onboarding calls (CONSENT_EMAIL)
        consentRegion: Region code sent with onboarding consent (2 = NA)
        messagesModule: Import path of the generated protobuf messages
        servicesModule: Import path of the generated gRPC stubs
        requestTimeoutSeconds: Deadline for one-shot calls
        lastReportedPoints: Number of points requested by the history call
        stream: Realtime stream settings
    """

    model_config = ConfigDict(frozen=True)

    environment: str = 'dev'
    target: str
    apiKey: str = Field(repr=False)
    consentEmail: str = ''
    consentRegion: int = 2
    messagesModule: str
    servicesModule: str
    requestTimeoutSeconds: float = Field(default=30.0, gt=0)
    lastReportedPoints: int = Field(default=5, gt=0)
    stream: StreamSettings = StreamSettings()

    @field_validator('target', 'apiKey', 'consentEmail', 'environment')
    @classmethod
    def _checkResolved(cls, value: str) -> str:
        if hasUnresolvedPlaceholder(value):
            raise ValueError(f"unresolved placeholder '{value}'")
        return value.strip()

    @field_validator('target', 'apiKey')
    @classmethod
    def _checkNotEmpty(cls, value: str) -> str:
        if not value:
            raise ValueError('must not be empty')
        return value

    @classmethod
    def fromConfig(cls, config: dict[str, Any]) -> 'ClientSettings':
        """
        Build settings from a validated configuration dictionary.

        Args:
            config: Configuration after ConfigValidator.validate()

        Returns:
            Frozen ClientSettings

        Raises:
            ConfigurationError: If a value has the wrong type or is unresolved
        """
        api = config.get('api', {})
        consent = config.get('consent', {})
        stream = dict(config.get('stream', {}))
        stream['retry'] = {
            k: v for k, v in stream.get('retry', {}).items() if v is not None
        }

        try:
            return cls(
                environment=config.get('application', {}).get('environment', 'dev'),
                target=api.get('target', ''),
                apiKey=api.get('apiKey', ''),
                consentEmail=consent.get('email', ''),
                consentRegion=consent.get('region', 2),
                messagesModule=api.get('messagesModule', ''),
                servicesModule=api.get('servicesModule', ''),
                requestTimeoutSeconds=api.get('requestTimeoutSeconds', 30),
                lastReportedPoints=config.get('lastReportedPoints', {}).get('points', 5),
                stream=stream,
            )
        except ValidationError as e:
            fields = ', '.join('.'.join(str(p) for p in err['loc']) for err in e.errors())
            raise ConfigurationError(
                f"Invalid client settings: {fields}",
                details={'errors': [err['msg'] for err in e.errors()]}
            ) from e

    def requireConsentEmail(self) -> str:
        """
        Return the consent email, failing if it is not configured.

        Raises:
            ConfigurationError: If CONSENT_EMAIL is empty
        """
        if not self.consentEmail:
            raise ConfigurationError("consent email is a required setting (CONSENT_EMAIL)")
        return self.consentEmail
