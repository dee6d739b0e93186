"""
API routers for AgriNav.
"""

from fastapi import APIRouter

from .health import router as health_router
from .voice import router as voice_router

# Main router that aggregates all sub-routers
router = APIRouter()

router.include_router(health_router)
router.include_router(voice_router)
