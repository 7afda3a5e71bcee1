"""
Health check endpoints for the API.
"""
import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vaev.config import Settings
from vaev.db.database import get_db
from vaev.dependencies import get_app_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(settings: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns API status and version information.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.VERSION,
        "environment": settings.APP_ENV,
    }


@router.get("/health/database")
def database_health(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Check the record store with a trivial round-trip query.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        return {
            "status": "unhealthy",
            "timestamp": datetime.now().isoformat(),
            "error": str(e),
        }

    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
    }
