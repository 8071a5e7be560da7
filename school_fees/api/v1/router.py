"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints of the fee engine
"""
from fastapi import APIRouter

from school_fees.api.v1.endpoints import allocations, families, fees, payments, subscriptions
from school_fees.core.logging import get_logger

logger = get_logger(__name__)

# Create main API v1 router with proper configuration
router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
        503: {"description": "Data Store Unavailable"},
    }
)

router.include_router(fees.router)
router.include_router(allocations.router)
router.include_router(families.router)
router.include_router(payments.router)
router.include_router(subscriptions.router)

logger.debug(
    "API v1 routers registered",
    extra={"routers": ["fees", "allocations", "families", "payments", "subscriptions"]},
)
