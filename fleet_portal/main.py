# fleet_portal/main.py
"""
FastAPI application entry point.
Includes security middleware, error handlers for the portal's exception
taxonomy, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from fleet_portal.routers import (
    bookings, dashboard, health, messages, notifications, parts_orders, search, security_logs, service_records,
    trainers, users, vehicles,
)
from fleet_portal.database import create_tables
from fleet_portal.config import settings
from fleet_portal.exceptions import FleetPortalError, ValidationError
from fleet_portal.utils.logger import bind_actor, clear_actor, get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Academy Fleet Portal API",
    description="Vehicle booking administration for a multi-location training academy.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow the portal frontend to call the API) ────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth in front of the portal API.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        # Always allow health check and docs without auth
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    bind_actor(request.headers.get("X-Actor-Role"), request.headers.get("X-Actor-Location"))
    start = time.time()
    try:
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    finally:
        clear_actor()
    return response


# ── Portal Error Handler ─────────────────────────────────────────────────────
@app.exception_handler(FleetPortalError)
async def portal_error_handler(request: Request, exc: FleetPortalError):
    level = logger.error if exc.status_code >= 500 else logger.info
    level(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    content = {"detail": exc.message, "error": type(exc).__name__}
    if isinstance(exc, ValidationError) and exc.field:
        content["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=content)


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(vehicles.router,        prefix="/api/v1", tags=["Vehicles"])
app.include_router(bookings.router,        prefix="/api/v1", tags=["Bookings"])
app.include_router(users.router,           prefix="/api/v1", tags=["Users"])
app.include_router(trainers.router,        prefix="/api/v1", tags=["Trainers"])
app.include_router(service_records.router, prefix="/api/v1", tags=["Service Records"])
app.include_router(parts_orders.router,    prefix="/api/v1", tags=["Parts Orders"])
app.include_router(security_logs.router,   prefix="/api/v1", tags=["Security Log"])
app.include_router(search.router,          prefix="/api/v1", tags=["Search"])
app.include_router(messages.router,        prefix="/api/v1", tags=["Messages"])
app.include_router(notifications.router,   prefix="/api/v1", tags=["Notifications"])
app.include_router(dashboard.router,       prefix="/api/v1", tags=["Dashboard"])
app.include_router(health.router,          prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Fleet portal starting up...")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Notifications: {'webhook ' + settings.NOTIFY_WEBHOOK_URL if settings.NOTIFY_WEBHOOK_URL else 'log only'}")
    logger.info(f"Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Fleet portal shutting down...")
