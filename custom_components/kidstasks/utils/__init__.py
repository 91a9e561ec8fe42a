# File: utils/__init__.py
"""Pure Python utilities for KidsTasks.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Civil timezone clock, day/week boundaries, reset checks
"""

from . import dt_utils

__all__ = ["dt_utils"]
