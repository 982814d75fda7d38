################################################################################
# File Name: authenticator.py
# Purpose/Description: Exchange the Compass API key for a bearer session
# Author: Michael Cornelison
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | M. Cornelison | Initial implementation
# 2026-10-15    | M. Cornelison | Re-authentication counter for stream supervisor
# ================================================================================
################################################################################

"""
Session authentication module.

Performs the single Authenticate call at startup. A failure here is fatal for
the process: there is no retry. The stream supervisor may call authenticate()
again to replace a session whose token the server has rejected.

Usage:
    from compass.session.authenticator import SessionAuthenticator

    authenticator = SessionAuthenticator(apiClient, settings.apiKey)
    session = authenticator.authenticate()
"""

import logging
from typing import Any

from common.error_handler import AuthenticationError, ConfigurationError
from common.secrets_loader import maskSecret

from .types import Session

logger = logging.getLogger(__name__)


class SessionAuthenticator:
    """
    Acquires bearer sessions from the Compass API.

    Attributes:
        apiClient: CompassApiClient (or compatible) exposing authenticate(apiKey)
        authCount: Number of successful authentications
    """

    def __init__(self, apiClient: Any, apiKey: str):
        """
        Initialize the authenticator.

        Args:
            apiClient: Client exposing authenticate(apiKey) -> token
            apiKey: Static Compass API key

        Raises:
            ConfigurationError: If the API key is empty
        """
        if not apiKey or not apiKey.strip():
            raise ConfigurationError("Compass API key is required (COMPASS_API_KEY)")

        self.apiClient = apiClient
        self._apiKey = apiKey
        self.authCount = 0

    def authenticate(self) -> Session:
        """
        Exchange the API key for a bearer token.

        Returns:
            New immutable Session

        Raises:
            AuthenticationError: If the call fails or returns no token
        """
        logger.info(f"Authenticating with Compass API | apiKey={maskSecret(self._apiKey)}")

        try:
            token = self.apiClient.authenticate(self._apiKey)
        except Exception as e:
            raise AuthenticationError(
                f"failed to authenticate: {e}",
                details={'error': type(e).__name__}
            ) from e

        if not isinstance(token, str) or not token.strip():
            raise AuthenticationError("failed to authenticate: no access token returned")

        self.authCount += 1
        session = Session(accessToken=token.strip())
        logger.info(f"Authenticated with Compass API | authCount={self.authCount}")
        return session
