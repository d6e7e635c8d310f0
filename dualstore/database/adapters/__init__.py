# ==============================================================================
# DATABASE ADAPTERS PACKAGE
# ==============================================================================

from dualstore.database.adapters.base_adapter import BaseUserAdapter
from dualstore.database.adapters.mongodb_adapter import MongoDBAdapter
from dualstore.database.adapters.postgresql_adapter import PostgreSQLAdapter

__all__ = [
    "BaseUserAdapter",
    "MongoDBAdapter",
    "PostgreSQLAdapter",
]
