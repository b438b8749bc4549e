"""API route aggregation.

All routers registered here get mounted under /api in main.py.

Learn: Item routes resolve the caller themselves (they need the identity
to scope queries). The admin router is gated at the include_router level
using FastAPI's dependencies parameter. Health and auth are open, apart
from /auth/me.
"""

from fastapi import APIRouter, Depends

from tasktrack.api.admin import router as admin_router
from tasktrack.api.auth import router as auth_router
from tasktrack.api.health import router as health_router
from tasktrack.api.items import router as items_router
from tasktrack.auth.dependencies import require_roles

api_router = APIRouter(prefix="/api")

# Open routes
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes
api_router.include_router(items_router, tags=["items"])
api_router.include_router(
    admin_router, tags=["admin"], dependencies=[Depends(require_roles("admin"))]
)
