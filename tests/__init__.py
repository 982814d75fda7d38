################################################################################
# File Name: __init__.py
# Purpose/Description: Test package initialization
# Author: Michael Cornelison
# Creation Date: 2026-01-21
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
################################################################################

"""
Test package for the Compass stream client.

Run tests with:
    pytest tests/
    pytest tests/ --cov=src --cov-report=html
"""
