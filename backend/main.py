"""FastAPI application entry point for the Llantera Móvil assistant backend."""

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.admin import create_admin_router
from backend.api.sessions import create_sessions_router
from backend.chat.session import SessionFactory
from backend.core.config import get_settings
from backend.core.errors import InvalidTransitionError, invalid_transition_handler, unhandled_exception_handler
from backend.core.logging import configure_logging, request_id_middleware
from backend.core.metrics import MetricsCollector
from backend.init_data import seed_inventory
from backend.llm.gemini import GeminiModelClient
from backend.memory.inventory import Inventory
from backend.memory.services import ServiceHistory
from backend.memory.store import InMemorySessionStore
from backend.tools.google_maps import GoogleMapsSurface

settings = get_settings()
logger = logging.getLogger("llantera.app")

metrics = MetricsCollector()
service_history = ServiceHistory()
inventory = Inventory()
session_store = InMemorySessionStore()
model_client = GeminiModelClient(
    settings.gemini_api_key,
    settings.gemini_model,
    include_thoughts=settings.gemini_include_thoughts,
    max_tool_rounds=settings.max_tool_rounds,
)


def build_map_surface() -> GoogleMapsSurface:
    return GoogleMapsSurface(
        settings.google_maps_api_key,
        region=settings.maps_region,
        language=settings.maps_language,
        timeout=settings.maps_timeout_seconds,
    )


session_factory = SessionFactory(
    model=model_client,
    surface_factory=build_map_surface,
    services=service_history,
    inventory=inventory,
    metrics=metrics,
    greet=settings.greet_on_session_start,
)

app = FastAPI(title=settings.app_name, version="0.1.0", docs_url="/docs")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(request_id_middleware)

app.include_router(create_sessions_router(session_store, session_factory))
app.include_router(create_admin_router(service_history, inventory))


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Return basic service status for monitoring."""

    return {"status": "ok"}


@app.get("/ready", tags=["health"])
async def readiness_probe() -> dict[str, Any]:
    """Readiness endpoint reporting whether the external services are configured.

    Checks:
    - Gemini API key present (model turns).
    - Google Maps API key present (geocoding and directions).
    """

    components = {
        "model": {"ok": settings.model_enabled, "model": settings.gemini_model},
        "maps": {"ok": settings.maps_enabled, "region": settings.maps_region},
        "inventory": {"ok": True, "items": len(inventory)},
    }
    overall = "ok" if settings.model_enabled and settings.maps_enabled else (
        "degraded" if settings.model_enabled else "fail"
    )
    return {
        "status": overall,
        "environment": settings.environment,
        "components": components,
    }


@app.on_event("startup")
async def configure_app() -> None:
    level = configure_logging(settings.log_level)
    logger.info("Logging configured at %s level for %s environment", logging.getLevelName(level), settings.environment)
    seed_inventory(inventory, settings.inventory_seed_path)


@app.on_event("shutdown")
async def close_sessions() -> None:
    await session_store.close_all()


app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/metrics", tags=["metrics"])
async def metrics_endpoint() -> dict:
    snapshot = metrics.snapshot()
    return {
        "turns_started": snapshot.turns_started,
        "turns_failed": snapshot.turns_failed,
        "rejected_sends": snapshot.rejected_sends,
        "tool_calls": snapshot.tool_calls,
        "confirmations_committed": snapshot.confirmations_committed,
    }
