"""
AgriNav - Voice Routing Server

The main FastAPI application entry point.
"""

# Load .env file FIRST, before any other imports
# .env.local overrides .env for machine-specific settings (API keys, etc.)
from pathlib import Path
from dotenv import load_dotenv
_env_root = Path(__file__).parent.parent
load_dotenv(_env_root / ".env", override=True)
load_dotenv(_env_root / ".env.local", override=True)

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import router as api_router
from .config import settings
from .routing.orchestrator import get_voice_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("agrinav.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Handles startup (background embedding warm-up, connectivity probe) and
    shutdown (cleanup).
    """
    # --- Startup ---
    logger.info("AgriNav starting up...")

    voice_router = get_voice_router()
    warm_up_task = None

    # Warm the embedding index without blocking startup
    if settings.load_embeddings_on_startup and settings.embedding.enabled:
        warm_up_task = asyncio.create_task(voice_router.warm_up())
        logger.info("Embedding warm-up started in background")

    try:
        voice_router.connectivity.start()
    except Exception as e:
        logger.error("Failed to start connectivity probe: %s", e)

    logger.info("AgriNav startup complete")

    yield  # Application runs here

    # --- Shutdown ---
    logger.info("AgriNav shutting down...")

    if warm_up_task is not None and not warm_up_task.done():
        warm_up_task.cancel()

    try:
        await voice_router.connectivity.stop()
    except Exception as e:
        logger.error("Error stopping connectivity probe: %s", e)

    try:
        voice_router.unload()
    except Exception as e:
        logger.error("Error unloading voice router: %s", e)

    logger.info("AgriNav shutdown complete")


# Create the FastAPI application
app = FastAPI(
    title="AgriNav",
    description="Multilingual voice navigation routing for the farming app.",
    version="0.1.0",
    lifespan=lifespan,
)

# Include API routers with /api/v1 prefix
app.include_router(api_router, prefix="/api/v1")
