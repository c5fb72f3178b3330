"""
Helpdesk Application

FastAPI application for the helpdesk portal API.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import Config
from .errors import register_error_handlers
from .services.engine_service import get_engine_service, init_engine_service
from .routes import (
    health_router,
    departments_router,
    notifications_router,
    navigation_router,
)

# Configure logging
logging.basicConfig(
    level=Config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("helpdesk.app")

# Suppress noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("asyncpg").setLevel(logging.WARNING)

# Create FastAPI application
app = FastAPI(
    title="Helpdesk API",
    description="Helpdesk portal: departments, notifications and navigation",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    logger.info("Starting Helpdesk API...")

    try:
        await init_engine_service()
        logger.info("Helpdesk API started successfully")
    except Exception as e:
        logger.error(f"Failed to start Helpdesk API: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Helpdesk API...")

    try:
        engine = get_engine_service()
        await engine.close()
        logger.info("Helpdesk API shutdown complete")
    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# Health lives outside the API prefix
app.include_router(health_router)
app.include_router(departments_router, prefix=Config.API_PREFIX)
app.include_router(notifications_router, prefix=Config.API_PREFIX)
app.include_router(navigation_router, prefix=Config.API_PREFIX)
