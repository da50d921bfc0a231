"""API route aggregation.

All routers registered here get mounted in main.py under /api. Only
/auth/me is protected; it pulls in get_current_user itself.
"""

from fastapi import APIRouter

from askgate.api.ask import router as ask_router
from askgate.api.auth import router as auth_router
from askgate.api.health import router as health_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(ask_router, tags=["ask"])
