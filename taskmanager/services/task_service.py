"""Task service"""

from sqlalchemy import case, func, text
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
from taskmanager.models.task import Task, utcnow
from taskmanager.schemas.task import TaskCreate


def list_tasks(db: Session, status: Optional[str] = None, priority: Optional[str] = None) -> List[Task]:
    query = db.query(Task)

    if status:
        query = query.filter(Task.status == status)

    if priority:
        query = query.filter(Task.priority == priority)

    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def get_task(db: Session, task_id: int) -> Optional[Task]:
    return db.query(Task).filter(Task.id == task_id).first()


def create_task(db: Session, data: TaskCreate) -> Task:
    now = utcnow()
    task = Task(
        title=data.title,
        description=data.description,
        status=data.status,
        priority=data.priority,
        due_date=data.due_date,
        created_at=now,
        updated_at=now
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, task: Task, changes: dict) -> Task:
    for field, value in changes.items():
        setattr(task, field, value)
    task.updated_at = utcnow()

    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task: Task) -> None:
    db.delete(task)
    db.commit()


def get_stats(db: Session, today: Optional[date] = None) -> dict:
    """Compteurs agrégés en une seule requête"""
    today = today or date.today()

    row = db.query(
        func.count(Task.id).label("total_tasks"),
        func.count(case((Task.status == "completed", 1))).label("completed_tasks"),
        func.count(case((Task.status == "in_progress", 1))).label("in_progress_tasks"),
        func.count(case((Task.status == "pending", 1))).label("pending_tasks"),
        func.count(case((Task.priority == "high", 1))).label("high_priority_tasks"),
        func.count(case(((Task.due_date < today) & (Task.status != "completed"), 1))).label("overdue_tasks"),
    ).one()

    return {key: int(value or 0) for key, value in row._mapping.items()}


def ping(db: Session) -> None:
    db.execute(text("SELECT 1"))
