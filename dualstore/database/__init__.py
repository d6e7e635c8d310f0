# ==============================================================================
# DATABASE PACKAGE INITIALIZATION
# ==============================================================================

"""
Database Layer
==============

One adapter per store behind a common interface:
- MongoDBAdapter: document store (Motor)
- PostgreSQLAdapter: relational store (SQLAlchemy async)
- AdapterRegistry: creation, lifecycle and lookup by backend tag
"""

from dualstore.database.adapters import (
    BaseUserAdapter,
    MongoDBAdapter,
    PostgreSQLAdapter,
)
from dualstore.database.registry import AdapterRegistry

__all__ = [
    "AdapterRegistry",
    "BaseUserAdapter",
    "MongoDBAdapter",
    "PostgreSQLAdapter",
]
