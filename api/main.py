"""FastAPI main application for Daggerboard."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from daggerboard import __version__
from daggerboard.config import Config
from daggerboard.errors import DaggerboardError
from daggerboard.logging_config import setup_logging

from .deps import get_state_manager, reset_state_manager
from .routes import campaigns, characters, dice, entities, events, fear, trackers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    setup_logging(Config.LOG_LEVEL, debug=Config.DEBUG)
    for issue in Config.validate():
        logger.warning(f"Config: {issue}")
    logger.info("Daggerboard starting up")
    get_state_manager().startup()
    yield
    reset_state_manager()
    logger.info("Daggerboard shut down cleanly")


# Create FastAPI app
app = FastAPI(
    title="Daggerboard API",
    description="Campaign state backend for the game master dashboard",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the dashboard windows
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DaggerboardError)
async def daggerboard_error_handler(request: Request, exc: DaggerboardError):
    """Every state error becomes a structured JSON body."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": str(exc)},
    )


# Include routers
app.include_router(campaigns.router, prefix="/api/campaigns", tags=["Campaigns"])
app.include_router(campaigns.notes_router, prefix="/api/notes", tags=["Notes"])
app.include_router(fear.router, prefix="/api/fear", tags=["Fear"])
app.include_router(trackers.router, prefix="/api/trackers", tags=["Trackers"])
app.include_router(entities.router, prefix="/api/entities", tags=["Entities"])
app.include_router(dice.router, prefix="/api/dice", tags=["Dice"])
app.include_router(characters.router, prefix="/api/characters", tags=["Characters"])
app.include_router(events.router, prefix="/api", tags=["Events"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}
