################################################################################
# File Name: types.py
# Purpose/Description: Authenticated session value
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
Session types module.

A Session is created once per authentication and never mutated. Every gRPC
call made on behalf of the operator passes ``session.metadata`` so the bearer
credential travels with one-shot and streaming calls alike.
"""

from dataclasses import dataclass, field
from datetime import datetime

AUTHORIZATION_HEADER = 'authorization'
BEARER_PREFIX = 'Bearer '


@dataclass(frozen=True)
class Session:
    """
    Bearer credential for the Compass API.

    Attributes:
        accessToken: Token returned by Authenticate
        authenticatedAt: When the token was obtained
    """
    accessToken: str = field(repr=False)
    authenticatedAt: datetime = field(default_factory=datetime.now)

    @property
    def metadata(self) -> tuple[tuple[str, str], ...]:
        """gRPC call metadata carrying the bearer credential."""
        return ((AUTHORIZATION_HEADER, BEARER_PREFIX + self.accessToken),)

    def toDict(self) -> dict[str, str]:
        """Convert to a loggable dictionary (token omitted)."""
        return {'authenticatedAt': self.authenticatedAt.isoformat()}
