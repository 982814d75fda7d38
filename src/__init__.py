################################################################################
# File Name: __init__.py
# Purpose/Description: Main application package initialization
# Author: Michael Cornelison
# Creation Date: 2026-01-21
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-01-21    | M. Cornelison | Initial implementation
# 2026-10-12    | M. Cornelison | Compass client package layout
# ================================================================================
################################################################################

"""
Main application package.

This package contains the application source code organized as:
- common/: Shared utilities (config, logging, errors)
- compass/: Compass API client, session, vehicles, realtime stream, menu

Entry point: main.py
"""
