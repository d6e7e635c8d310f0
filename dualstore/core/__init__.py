# ==============================================================================
# CORE PACKAGE INITIALIZATION
# ==============================================================================
# Core utilities: Settings, Exceptions, Constants
# ==============================================================================

"""
Core Module
===========

Contains core utilities and configurations for the application:
- settings: Environment configuration management
- exceptions: Error taxonomy shared by both adapters
- constants: Enumerations, field limits and messages
"""

from dualstore.core.settings import get_settings, Settings
from dualstore.core.constants import Backend, Role
from dualstore.core.exceptions import (
    AppException,
    ValidationError,
    InvalidIdError,
    NotFoundError,
    DuplicateKeyError,
    StoreError,
    StoreConnectionError,
    RouteNotFoundError,
)

__all__ = [
    "get_settings",
    "Settings",
    "Backend",
    "Role",
    "AppException",
    "ValidationError",
    "InvalidIdError",
    "NotFoundError",
    "DuplicateKeyError",
    "StoreError",
    "StoreConnectionError",
    "RouteNotFoundError",
]
