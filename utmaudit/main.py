"""UTMAudit — FastAPI Application Entry Point.

Audits ad creatives across Facebook, Google, TikTok and Pinterest for
correctly configured UTM tracking parameters.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from utmaudit.config import settings
from utmaudit.api.auth_routes import router as auth_router
from utmaudit.api.validation_routes import router as validation_router
from utmaudit.core.logging import get_logger

logger = get_logger("main")

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 UTMAudit starting up...")
    logger.info(f"🔗 Dashboard backend: {settings.api_base}")
    policy = "spend + active" if settings.error_requires_active else "spend only"
    logger.info(f"📏 Error counting policy: {policy}")
    yield
    logger.info("UTMAudit shut down")


app = FastAPI(
    title="UTMAudit",
    description="UTM validation center — resolve, validate and report tracking parameters of ad creatives per campaign and platform.",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router)
app.include_router(validation_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "utmaudit",
        "version": VERSION,
    }
