"""FastAPI main application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from activity_audit.core.config import settings
from activity_audit.core.middleware import setup_middleware
from activity_audit.core.exceptions import AuditPlatformError

from activity_audit.api.auth import router as auth_router
from activity_audit.api.activity_log import router as activity_log_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("activity_audit")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting %s API", settings.APP_NAME)
    try:
        from activity_audit.db.session import engine
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connected")
    except Exception as e:
        logger.warning(f"Database not available: {e}")

    yield

    logger.info("Shutting down %s API", settings.APP_NAME)


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Request activity auditing and audit trail search",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware
setup_middleware(app)


# Exception handler for custom platform errors
@app.exception_handler(AuditPlatformError)
async def audit_platform_exception_handler(request: Request, exc: AuditPlatformError):
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message},
    )

# Register routers
app.include_router(auth_router, prefix="/api")
app.include_router(activity_log_router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/api/health", name="health")
async def health():
    """Quick health check endpoint."""
    return {"status": "ok"}
