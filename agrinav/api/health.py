"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends

from ..routing.orchestrator import VoiceRouter, get_voice_router

router = APIRouter(tags=["Health"])


@router.get("/ping")
async def ping():
    """Simple endpoint to verify server is running."""
    return {"status": "ok", "message": "pong"}


@router.get("/health")
async def health(voice_router: VoiceRouter = Depends(get_voice_router)):
    """Detailed health check with routing tier status."""
    status = voice_router.status()
    embedding = status["tiers"]["embedding"]
    return {
        "status": "ok" if embedding["initialized"] else "degraded",
        "services": status,
    }
