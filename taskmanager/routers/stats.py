from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from taskmanager.core.database import get_db
from taskmanager.schemas.task import StatsEnvelope, TaskStats
from taskmanager.services.task_service import get_stats

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=StatsEnvelope)
def stats(db: Session = Depends(get_db)):
    return StatsEnvelope(data=TaskStats(**get_stats(db)))
