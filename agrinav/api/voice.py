"""
Voice routing endpoints.

The app posts the transcribed utterance and receives a Decision to act on.
"""

import logging

from fastapi import APIRouter, Depends

from ..routing.orchestrator import VoiceRouter, get_voice_router
from ..schemas.voice import (
    ConnectivityRequest,
    ConnectivityResponse,
    DecisionResponse,
    RouteRequest,
    RouterStatusResponse,
)

router = APIRouter(prefix="/voice", tags=["Voice"])
logger = logging.getLogger("agrinav.api.voice")


@router.post("/route", response_model=DecisionResponse, response_model_by_alias=True)
async def route_voice(
    request: RouteRequest,
    voice_router: VoiceRouter = Depends(get_voice_router),
):
    """
    Route a spoken utterance to an app destination.

    Always returns a decision; low-confidence chat decisions mean the
    router was not confident.
    """
    logger.debug("Voice route request: %s (lang=%s)", request.utterance[:50], request.language)
    decision = await voice_router.route(request.utterance, request.language)
    return DecisionResponse.from_decision(decision)


@router.get("/status", response_model=RouterStatusResponse)
async def voice_status(voice_router: VoiceRouter = Depends(get_voice_router)):
    """Report tier availability and embedding index state."""
    return voice_router.status()


@router.put("/connectivity", response_model=ConnectivityResponse)
async def set_connectivity(
    request: ConnectivityRequest,
    voice_router: VoiceRouter = Depends(get_voice_router),
):
    """Record the host app's network state."""
    voice_router.connectivity.set_online(request.online)
    return ConnectivityResponse(online=voice_router.connectivity.is_online)
