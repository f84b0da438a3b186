from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import datetime, timezone
import logging

from taskmanager.core.database import get_db
from taskmanager.services.task_service import ping

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("")
def health(db: Session = Depends(get_db)):
    # Check si l'API et la base sont up
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        ping(db)
    except SQLAlchemyError as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "timestamp": timestamp,
                "database": "disconnected",
                "error": str(e)
            }
        )
    return {"status": "healthy", "timestamp": timestamp, "database": "connected"}
