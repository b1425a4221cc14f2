from datetime import UTC, datetime

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from viewgate import __version__
from viewgate.db import SessionLocal

router = APIRouter(tags=["Health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """
    Health check endpoint for monitoring and load balancers.

    Returns:
        - status: overall health status
        - timestamp: current server time
        - database: database connection status
        - version: API version
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "view-visibility-gate",
        "version": __version__,
    }

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except SQLAlchemyError as e:
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"
        health_status["error"] = str(e)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status)
    finally:
        db.close()

    return health_status


@router.get("/readiness", status_code=status.HTTP_200_OK)
async def readiness_check():
    return {"ready": True}


@router.get("/liveness", status_code=status.HTTP_200_OK)
async def liveness_check():
    return {"alive": True}
