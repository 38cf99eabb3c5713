"""
API v1 Router - Main Entry Point
Aggregates all v1 API endpoints for the visitor access workflow
"""
from fastapi import APIRouter

from gatehouse.api.v1 import cron, gatekeeper, notifications, packages, visitors

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        500: {"description": "Internal Server Error"}
    }
)

router.include_router(visitors.router)
router.include_router(gatekeeper.router)
router.include_router(notifications.router)
router.include_router(cron.router)
router.include_router(packages.router)
