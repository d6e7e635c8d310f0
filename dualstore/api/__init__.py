# ==============================================================================
# API PACKAGE INITIALIZATION
# ==============================================================================

"""
HTTP surface: dependencies, endpoint routers and the response normalizer.
"""
