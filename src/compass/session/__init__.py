################################################################################
# File Name: __init__.py
# Purpose/Description: Session subpackage for Compass authentication
# Author: Michael Cornelison
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | M. Cornelison | Initial subpackage creation
# ================================================================================
################################################################################
"""
Session Subpackage.

- Session: Immutable bearer credential and its call metadata
- SessionAuthenticator: Exchanges the API key for a Session
"""

from .authenticator import SessionAuthenticator
from .types import Session

__all__ = [
    'Session',
    'SessionAuthenticator',
]
