# ==============================================================================
# DOMAIN MODELS PACKAGE
# ==============================================================================

"""
SQLAlchemy models for the relational store.
"""

from dualstore.domain_models.base import SQLBase, TimestampMixin
from dualstore.domain_models.user import User

__all__ = [
    "SQLBase",
    "TimestampMixin",
    "User",
]
