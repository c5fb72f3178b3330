"""
Health Check Routes

Endpoints for service health monitoring.
"""
from fastapi import APIRouter
from datetime import datetime

from ..config import Config
from ..services.engine_service import get_engine_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "OK",
        "timestamp": datetime.utcnow().isoformat(),
        "environment": Config.ENVIRONMENT,
    }


@router.get("/ready")
async def readiness_check():
    """
    Readiness check - storages are connected.
    Used by orchestrators to decide when to route traffic here.
    """
    return {
        "ready": get_engine_service().is_initialized,
        "timestamp": datetime.utcnow().isoformat()
    }
