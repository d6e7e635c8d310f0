# ==============================================================================
# DUALSTORE PACKAGE
# ==============================================================================

"""
Dual-store Users API
====================

One User entity served over HTTP from two interchangeable stores
(MongoDB and PostgreSQL) through a common adapter interface.
"""

__version__ = "1.0.0"
