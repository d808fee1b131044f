"""
Health check endpoints for the story service
"""
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, status

from ..db import check_db_connection

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        dict: Health status and timestamp
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/ready", status_code=status.HTTP_200_OK)
def readiness_check() -> Dict[str, Any]:
    """
    Readiness check: the service can serve logins and feeds only while the
    user and story tables are reachable.

    Raises:
        HTTPException: 503 if the database is unreachable
    """
    db_connected = check_db_connection()

    response = {
        "status": "ready" if db_connected else "not_ready",
        "database": "connected" if db_connected else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

    if not db_connected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=response
        )

    return response
