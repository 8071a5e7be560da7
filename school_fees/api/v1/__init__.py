"""
API v1 package.

Re-exports the router that aggregates all v1 sub-routers. Include it
into the FastAPI app:

    from school_fees.api.v1 import api_router
    app.include_router(api_router, prefix="/api/v1")
"""

from .router import router as api_router  # main v1 router

__all__ = [
    "api_router",
]
