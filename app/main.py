# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Storefront API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import asyncio
import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from supabase import create_client

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    StorefrontException,
    storefront_exception_handler,
    validation_exception_handler,
)
from app.routers import admin, catalog, contact, content, health, realtime, upload
from app.websocket import routes as websocket_routes
from core.services.container import build_services
from lib.realtime import ChangeEvent, RealtimeHub

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def redis_pubsub_listener(hub: RealtimeHub, shutdown: asyncio.Event):
    """
    Background task feeding Redis change events into this process's hub.

    Every API process runs one, so a write handled by any process
    invalidates the caches (and websocket listeners) of all of them.
    """
    import redis.asyncio as aioredis

    logger.info(f"Starting Redis pub/sub listener on {settings.REALTIME_CHANNEL}")

    redis_client = aioredis.from_url(settings.REDIS_URL)
    pubsub = redis_client.pubsub()

    try:
        await pubsub.subscribe(settings.REALTIME_CHANNEL)

        async for message in pubsub.listen():
            if shutdown.is_set():
                break

            if message["type"] != "message":
                continue

            try:
                event = ChangeEvent.model_validate(json.loads(message["data"]))
                hub.dispatch(event)
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning(f"Invalid change event in Redis message: {e}")

    except asyncio.CancelledError:
        logger.info("Redis pub/sub listener cancelled")
    except Exception as e:
        logger.error(f"Redis pub/sub listener error: {e}")
    finally:
        try:
            await pubsub.unsubscribe(settings.REALTIME_CHANNEL)
            await redis_client.close()
        except Exception as e:
            logger.debug(f"Error closing Redis listener: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: build the service container (unless one was injected),
      start the Redis listener when the realtime backend is redis
    - Shutdown: stop the listener, dispose subscriptions and clients
    """
    logger.info(f"Starting Storefront API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    owns_services = getattr(app.state, "services", None) is None
    if owns_services:
        app.state.services = build_services(settings)
    if getattr(app.state, "auth_client", None) is None:
        app.state.auth_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)

    shutdown_event = asyncio.Event()
    listener_task = None
    if settings.REALTIME_BACKEND == "redis":
        listener_task = asyncio.create_task(
            redis_pubsub_listener(app.state.services.hub, shutdown_event)
        )

    yield

    logger.info("Shutting down Storefront API")

    shutdown_event.set()
    if listener_task:
        listener_task.cancel()
        try:
            await listener_task
        except asyncio.CancelledError:
            pass

    if owns_services:
        app.state.services.close()
        app.state.services = None


# Create FastAPI application
app = FastAPI(
    title="Storefront API",
    description="""
## Storefront and Admin CMS API

Public catalog and marketing content for the storefront, plus the admin
content manager behind it.

### Surfaces

| Area | Prefix |
|------|--------|
| **Public reads** | `/api/v1/products`, `/api/v1/blog`, `/api/v1/settings/{key}`, ... |
| **Contact form** | `POST /api/v1/contact` |
| **Admin CMS** | `/api/v1/admin/*` (Supabase session required) |
| **Image relay** | `POST /functions/v1/upload-image` |
| **Change stream** | `WS /ws/changes?tables=...` |

### Caching

Public reads are cached by key and invalidated whenever the underlying
table changes (admin writes, or database webhooks posted to
`/api/v1/realtime/webhook`).
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Admin sign-in and session checks"},
        {"name": "Catalog", "description": "Products and categories"},
        {"name": "Content", "description": "Blog, testimonials, about, settings"},
        {"name": "Contact", "description": "Public contact form"},
        {"name": "Admin", "description": "Content management (authenticated)"},
        {"name": "Upload", "description": "Image upload relay"},
        {"name": "Realtime", "description": "Change notification ingress"},
        {"name": "WebSocket", "description": "Cache invalidation stream"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=settings.is_production,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(StorefrontException)
async def handle_storefront_exception(request: Request, exc: StorefrontException):
    """Handle custom Storefront exceptions."""
    return await storefront_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle request body / query validation failures."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(auth_routes.router, prefix="/api/v1", tags=["Auth"])

# Health check endpoints
app.include_router(health.router, prefix="/api/v1", tags=["Health"])

# Public catalog
app.include_router(catalog.router, prefix="/api/v1", tags=["Catalog"])

# Public marketing content
app.include_router(content.router, prefix="/api/v1", tags=["Content"])

# Contact form
app.include_router(contact.router, prefix="/api/v1", tags=["Contact"])

# Admin CMS
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])

# Change notification webhook
app.include_router(realtime.router, prefix="/api/v1", tags=["Realtime"])

# Image upload relay
app.include_router(upload.router, prefix="/functions/v1", tags=["Upload"])

# WebSocket endpoints (cache invalidation stream)
app.include_router(websocket_routes.router, tags=["WebSocket"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Storefront API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
