"""
FEPRO - contractor registry API

GraphQL API over the contractors table (PostgreSQL + PostGIS).

Run with: uvicorn fepro.main:app --port 8080 --reload
"""
import time as _time_module
from contextlib import asynccontextmanager

import psycopg2
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.gzip import GZipMiddleware

from .config import settings

# Configure structured logging FIRST (before any logger calls)
from .middleware.structlog_config import configure as configure_logging
configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

import structlog

from . import dependencies
from .graphql_api import create_graphql_router
from .middleware import RequestLoggingMiddleware, register_error_handlers
from .models.common import ApiInfoResponse, DatabaseStatus, HealthResponse

logger = structlog.get_logger("fepro.api")

# Track server start time for uptime reporting
_server_start_time = _time_module.time()


def _startup_checks():
    """Verify the database is reachable. Failure is logged, not fatal."""
    try:
        count = dependencies.ping_database()
        logger.info("startup_checks_passed", contractor_count=count)
    except psycopg2.Error as e:
        logger.warning("startup_check_failed", check="database_reachable", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: check the database. Shutdown: close the pool."""
    if settings.STARTUP_DB_CHECK:
        await run_in_threadpool(_startup_checks)
    yield
    dependencies.close_pool()
    logger.info("Shutting down.")


API_TITLE = "FEPRO - Contractor Registry API"
API_DESCRIPTION = """
GraphQL API for managing contractors (counterparties).

### Operations

- **Queries** - list, fetch by id/INN/email, search by name, filter by status,
  paginate, find within a radius of a point
- **Mutations** - create, update (full replace), delete

The GraphQL endpoint lives at `/graphql`.
"""
API_VERSION = "1.0.0"
GRAPHQL_PATH = "/graphql"

app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_DOCS else None,
    lifespan=lifespan,
)

register_error_handlers(app)

# Request logging middleware (must be added before CORS/GZip so it wraps them)
app.add_middleware(RequestLoggingMiddleware)

cors_origins = settings.CORS_ORIGINS
if "*" in cors_origins:
    logger.warning("Wildcard CORS origin rejected for security; falling back to localhost defaults")
    cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Accept-Language"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if request.headers.get("x-forwarded-proto") == "https":
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response

# GZip compression for responses > 1KB
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(create_graphql_router(), prefix=GRAPHQL_PATH)


@app.get("/", tags=["root"], response_model=ApiInfoResponse)
async def root():
    """API root - returns basic info and links."""
    return ApiInfoResponse(
        name=API_TITLE,
        version=API_VERSION,
        docs="/docs" if settings.ENABLE_DOCS else None,
        graphql=GRAPHQL_PATH,
    )


@app.get("/health", tags=["root"], response_model=HealthResponse)
async def health_check():
    """Health check endpoint with database and uptime status."""
    uptime_seconds = round(_time_module.time() - _server_start_time)
    try:
        count = await run_in_threadpool(dependencies.ping_database)
        database = DatabaseStatus(status="connected", contractor_count=count)
    except psycopg2.Error as e:
        logger.warning("health_database_unreachable", error=str(e))
        database = DatabaseStatus(status="unavailable")

    healthy = database.status == "connected"
    body = HealthResponse(
        status="healthy" if healthy else "unavailable",
        version=API_VERSION,
        database=database,
        uptime_seconds=uptime_seconds,
    )
    return JSONResponse(status_code=200 if healthy else 503, content=body.model_dump())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
