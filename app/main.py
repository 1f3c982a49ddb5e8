# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the User Admin API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main          # binds API_HOST:API_PORT
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    AdminApiException,
    admin_api_exception_handler,
    validation_exception_handler,
)
from app.routers import analytics, health, settings as settings_routes, users

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    The Supabase client is created lazily on first use, so startup only
    reports the configuration in effect.
    """
    logger.info(f"Starting User Admin API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Default user table: {settings.DEFAULT_USER_TABLE}, "
        f"settings backend: {settings.SETTINGS_BACKEND}"
    )
    if settings.SETTINGS_BACKEND == "memory":
        logger.warning("Admin settings are kept in memory and will reset on restart")

    yield

    logger.info("Shutting down User Admin API")


# Create FastAPI application
app = FastAPI(
    title="User Admin API",
    description="""
## Admin API for app user accounts

Manage the user accounts stored in Supabase, review signup analytics and
edit application settings.

### Features

- **Users**: filter, sort and paginate; edit; ban/unban; grant/revoke VIP
- **Analytics**: headline counts and a per-day signup trend
- **Settings**: read and partially update the application settings

User and analytics endpoints accept `?table=users|users2`. Without it the
`activeUserTable` setting decides.

### Quick Start

```bash
# Banned VIP users, oldest first
curl "http://localhost:8000/api/users?is_vip=vip&is_banned=banned&sortOrder=asc"

# Ban a user
curl -X POST http://localhost:8000/api/users/{id}/ban

# Turn on maintenance mode
curl -X PUT http://localhost:8000/api/settings \\
  -H "Content-Type: application/json" \\
  -d '{"maintenanceMode": true}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Users",
            "description": "List, view and moderate user accounts",
        },
        {
            "name": "Analytics",
            "description": "User counts and signup trend",
        },
        {
            "name": "Settings",
            "description": "Application settings",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests from the admin UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(AdminApiException)
async def handle_admin_api_exception(request: Request, exc: AdminApiException):
    """Handle custom admin API exceptions."""
    return await admin_api_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Report malformed query parameters and bodies as 400."""
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

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# User management endpoints
app.include_router(
    users.router,
    prefix="/api/users",
    tags=["Users"]
)

# Analytics endpoints
app.include_router(
    analytics.router,
    prefix="/api/analytics",
    tags=["Analytics"]
)

# Settings endpoints
app.include_router(
    settings_routes.router,
    prefix="/api/settings",
    tags=["Settings"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "User Admin API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
