# ==============================================================================
# MIDDLEWARE PACKAGE INITIALIZATION
# ==============================================================================

from dualstore.middleware.request_logger import RequestLoggerMiddleware

__all__ = ["RequestLoggerMiddleware"]
