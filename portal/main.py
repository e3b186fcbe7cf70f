### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Application Entry Point -
# Author: Bailey Dixon
# Date: 09/08/2026
# Python: 3.11
####################

"""
Tenant Portal - Main Application

FastAPI application entry point that provides:
- Tenant admin login with signed session cookies
- Tenant-scoped dashboard reads and ingestion writes
- Envelope-encrypted tenant secrets
- Request logging and rate limiting
- OpenAPI documentation at /api/docs

Usage:
    # Development
    uvicorn portal.main:app --reload --port 3000

    # Production
    tenant-portal serve
"""

from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal import __version__
from portal.config import get_app_config, get_settings
from portal.database import SessionLocal, init_db
from portal.errors import PortalError, RateLimited
from portal.middleware import RequestLoggingMiddleware
from portal.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from portal.routers import auth_router, ingest_router, pages_router, portal_router, secrets_router
from portal.services.bootstrap import has_tenants, seed_tenant
from portal.utils import get_logger

# Load settings
settings = get_settings()
logger = get_logger("portal")

STATIC_DIR = Path(__file__).resolve().parent / "static"
INSECURE_SECRET_KEY = "change-this-in-production"

HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "auth_required",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
    415: "unsupported_media_type",
}


def _auto_seed():
    """
    Seed the default tenant and admin on first run.

    Only runs against an empty database. The credentials are printed once
    so the operator can log in and change them.
    """
    db = SessionLocal()
    try:
        if has_tenants(db):
            return
        result = seed_tenant(db, settings.seed_admin_email, settings.seed_admin_password)
    finally:
        db.close()

    print("\n" + "=" * 70)
    print("  DEFAULT TENANT CREATED")
    print("=" * 70)
    print(f"\n  Tenant: {result.tenant.id}")
    print(f"  Login:  {settings.seed_admin_email} / {settings.seed_admin_password}")
    print("\n  IMPORTANT: Change this password before exposing the portal.")
    print("  Disable with PORTAL_AUTO_SEED=false.\n")
    print("=" * 70 + "\n")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager

    Handles startup and shutdown events:
    - Startup: load config.yaml, create tables, seed on first run
    - Shutdown: log
    """
    print(f"Starting {settings.api_title} v{settings.api_version}")
    print(f"Portal available at: http://localhost:{settings.port}/portal")

    app.state.app_config = get_app_config()
    app.state.started_at = datetime.utcnow()

    init_db()

    if settings.auto_seed:
        _auto_seed()

    if settings.secret_key == INSECURE_SECRET_KEY:
        logger.warning("PORTAL_SECRET_KEY is not set; sessions are signed with the built-in development key")
    if not settings.kms_master_key:
        logger.warning("PORTAL_KMS_MASTER_KEY is not set; tenant secrets cannot be saved")
    if not settings.ingest_key:
        logger.info("PORTAL_INGEST_KEY is not set; ingestion requires an admin session")

    yield

    print("Shutting down Tenant Portal...")


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    version=__version__,
    description="""
## Tenant Portal API

Admin portal for multi-tenant bot deployments.

### Features
- **Auth**: Email/password login with HTTP-only session cookies
- **Dashboard**: Metrics, events, errors, usage, conversations, leads
- **Ingestion**: Write endpoints for bots (session or `X-Customer-Key`)
- **Secrets**: Tenant credentials encrypted at rest, only masks returned

### Tenant Resolution
Session tenant, then `portal_tenant` cookie, `X-Tenant-ID` header,
`?tenant=`, subdomain, and finally `default`.
    """,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Configure CORS (cookies are only sent cross-origin to listed origins)
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Render PortalError subclasses as {"error", "message"}"""
    headers = None
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request validation failures are 400s with per-field details"""
    details = [
        {"field": ".".join(str(loc) for loc in err.get("loc", ())), "message": err.get("msg", "invalid")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "validation_error", "message": "Request validation failed", "details": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, "server_error" if exc.status_code >= 500 else "error")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": code, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions"""
    request_id = getattr(request.state, "request_id", None)
    logger.error(f"[{request_id or '-'}] Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    content = {"error": "server_error", "message": "Internal server error"}
    if settings.debug:
        content["details"] = [{"message": str(exc)}]
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# Include routers
app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(portal_router, prefix="/api/portal", tags=["Portal"])
app.include_router(ingest_router, prefix="/api/portal", tags=["Ingestion"])
app.include_router(secrets_router, prefix="/api/portal", tags=["Tenant Secrets"])
app.include_router(pages_router, tags=["Pages"])

# Static assets, per-tenant brand assets under /static/brands/<tenant>/
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


# Entry point for running directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
