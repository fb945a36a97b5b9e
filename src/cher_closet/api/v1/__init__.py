"""API router aggregation.

This module combines all resource routers into a single router mounted
under ``/api``.
"""

from fastapi import APIRouter

from ..error_handling import ErrorFunnelRoute
from .ai import router as ai_router
from .auth import router as auth_router
from .calendar import router as calendar_router
from .health import router as health_router
from .inspirations import router as inspirations_router
from .outfits import router as outfits_router
from .preferences import router as preferences_router
from .sharing import router as sharing_router
from .users import router as users_router
from .wardrobe import router as wardrobe_router
from .weather import router as weather_router

router = APIRouter(prefix="/api", route_class=ErrorFunnelRoute)

router.include_router(health_router, tags=["health"])
router.include_router(auth_router, tags=["auth"])
router.include_router(users_router, prefix="/users", tags=["users"])
router.include_router(wardrobe_router, prefix="/wardrobe", tags=["wardrobe"])
router.include_router(outfits_router, prefix="/outfits", tags=["outfits"])
router.include_router(sharing_router, prefix="/sharing", tags=["sharing"])
router.include_router(calendar_router, prefix="/calendar-outfits", tags=["calendar"])
router.include_router(inspirations_router, prefix="/inspirations", tags=["inspirations"])
router.include_router(preferences_router, prefix="/preferences", tags=["preferences"])
router.include_router(weather_router, prefix="/weather", tags=["weather"])
router.include_router(ai_router, prefix="/ai", tags=["ai"])

__all__ = ["router"]
