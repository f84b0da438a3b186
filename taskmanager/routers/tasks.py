from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.orm import Session
from typing import Optional
import logging

from taskmanager.core.database import get_db
from taskmanager.models.task import Task
from taskmanager.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskEnvelope,
    TaskMessageEnvelope,
    TaskListEnvelope,
)
from taskmanager.services import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

# Borne de la colonne INTEGER
MAX_TASK_ID = 2**31 - 1


def get_task_or_404(task_id: int = Path(le=MAX_TASK_ID), db: Session = Depends(get_db)) -> Task:
    task = task_service.get_task(db, task_id)
    if not task:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return task


@router.get("", response_model=TaskListEnvelope)
def list_tasks(
    db: Session = Depends(get_db),
    status_filter: Optional[str] = Query(None, alias="status"),
    priority_filter: Optional[str] = Query(None, alias="priority")
):
    # Filtres exacts, pas de validation: une valeur inconnue ne matche rien
    tasks = task_service.list_tasks(db, status=status_filter, priority=priority_filter)
    return TaskListEnvelope(
        data=[TaskResponse.model_validate(t) for t in tasks],
        count=len(tasks)
    )


@router.get("/{task_id}", response_model=TaskEnvelope)
def get_task(task: Task = Depends(get_task_or_404)):
    return TaskEnvelope(data=TaskResponse.model_validate(task))


@router.post("", response_model=TaskMessageEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(task_data: TaskCreate, db: Session = Depends(get_db)):
    task = task_service.create_task(db, task_data)
    logger.info("Task %s created", task.id)
    return TaskMessageEnvelope(
        data=TaskResponse.model_validate(task),
        message="Task created successfully"
    )


@router.put("/{task_id}", response_model=TaskMessageEnvelope)
def update_task(
    task_data: TaskUpdate,
    task: Task = Depends(get_task_or_404),
    db: Session = Depends(get_db)
):
    task = task_service.update_task(db, task, task_data.changes())
    logger.info("Task %s updated", task.id)
    return TaskMessageEnvelope(
        data=TaskResponse.model_validate(task),
        message="Task updated successfully"
    )


@router.delete("/{task_id}", response_model=TaskMessageEnvelope)
def delete_task(task: Task = Depends(get_task_or_404), db: Session = Depends(get_db)):
    # Snapshot avant suppression, l'objet est détaché après le commit
    deleted = TaskResponse.model_validate(task)
    task_service.delete_task(db, task)
    logger.info("Task %s deleted", deleted.id)
    return TaskMessageEnvelope(data=deleted, message="Task deleted successfully")
