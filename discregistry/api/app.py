"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from discregistry.config import LOG_LEVEL

# Configure logging in the worker process (so core INFO logs are visible with uvicorn --reload)
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(levelname)s: %(name)s: %(message)s",
)

from discregistry.api.state import AppState, get_state

# Import routes after state to avoid circular imports
from discregistry.api.routes import discs, health

__all__ = ["app", "AppState", "get_state"]

_state = get_state()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.getLogger(__name__).info(
        "Reading discs from %s (fallback %s)",
        _state.disc_service.source.primary,
        _state.disc_service.source.secondary,
    )
    yield
    await _state.close()


app = FastAPI(
    title="Disc Registry API",
    description="Lost-and-found listing and search for disc-golf discs",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(discs.router, prefix="/api/discs", tags=["discs"])
app.include_router(health.router, prefix="/api/health", tags=["health"])
