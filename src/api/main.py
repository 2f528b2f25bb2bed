import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.deps import get_settings
from src.app_shell.config import validate_startup_rules
from src.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_startup_rules(rules)
    except (FileNotFoundError, ValueError):
        logger.critical("Rules load failed from %s", settings.rules_path, exc_info=True)
        raise

    logger.info("Rules loaded from %s", settings.rules_path)
    yield


app = FastAPI(
    title="Event Space Rules API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from src.api.routes import (  # noqa: E402
    promo_codes,
    publish,
    readiness,
    ticketing,
    workspaces,
)

app.include_router(readiness.router, prefix="/api/readiness", tags=["Readiness"])
app.include_router(promo_codes.router, prefix="/api/promo-codes", tags=["Promo Codes"])
app.include_router(ticketing.router, prefix="/api/ticketing", tags=["Ticketing"])
app.include_router(publish.router, prefix="/api/events", tags=["Publish"])
app.include_router(workspaces.router, prefix="/api/workspaces", tags=["Workspaces"])


# Organizer dashboard origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
