################################################################################
# File Name: __init__.py
# Purpose/Description: Compass stream client package
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
Compass stream client.

Streams near-real-time vehicle telemetry from the Compass (NativeConnect)
service for a set of VINs, and wraps the one-shot vehicle-management calls.

Subpackages:
    api: gRPC client
    session: Authentication
    vehicle: VINs and vehicle registry
    stream: Realtime stream supervisor
    cli: Interactive menu and one-shot operations
"""

__version__ = '1.0.0'
