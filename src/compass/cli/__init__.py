################################################################################
# File Name: __init__.py
# Purpose/Description: CLI subpackage for interactive vehicle operations
# Author: Michael Cornelison
# Creation Date: 2026-10-14
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-14    | M. Cornelison | Initial subpackage creation
# ================================================================================
################################################################################
"""
CLI Subpackage.

- VehicleOperations: One-shot Compass calls with printed results
- MenuPrompt: Numbered interactive menu over VehicleOperations
"""

from .menu import MenuPrompt
from .operations import VehicleOperations

__all__ = [
    'MenuPrompt',
    'VehicleOperations',
]
