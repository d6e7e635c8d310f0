# ==============================================================================
# API ENDPOINTS PACKAGE
# ==============================================================================

from dualstore.api.endpoints.users import router as users_router

__all__ = ["users_router"]
