"""Pydantic schemas for task request/response validation."""

from pydantic import BaseModel, BeforeValidator, ConfigDict, StringConstraints
from pydantic_core import PydanticCustomError
from datetime import datetime, date
from typing import Annotated, Optional, List, Literal

TaskStatus = Literal["pending", "in_progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]


def _clean_title(value):
    if not isinstance(value, str):
        return value
    value = value.strip()
    if not value:
        raise PydanticCustomError("title_required", "Title is required")
    return value


def _clean_description(value):
    if isinstance(value, str):
        return value.strip() or None
    return value


def _clean_due_date(value):
    # Le formulaire envoie "" quand la date est vide
    if isinstance(value, str) and not value.strip():
        return None
    return value


TitleStr = Annotated[Annotated[str, StringConstraints(max_length=255)], BeforeValidator(_clean_title)]
DescriptionStr = Annotated[Optional[str], BeforeValidator(_clean_description)]
DueDate = Annotated[Optional[date], BeforeValidator(_clean_due_date)]


# Schemas tâches

class TaskCreate(BaseModel):
    """Schema for creating a task. Only the title is required."""

    title: TitleStr
    description: DescriptionStr = None
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"
    due_date: DueDate = None


class TaskUpdate(BaseModel):
    """Schema for updating an existing task.

    Every field is optional; only the keys present in the request body are
    applied. An explicit null is ignored for title, status and priority and
    clears description and due_date.
    """

    title: Optional[TitleStr] = None
    description: DescriptionStr = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: DueDate = None

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        for field in ("title", "status", "priority"):
            if field in data and data[field] is None:
                del data[field]
        return data


class TaskResponse(BaseModel):
    """Schema for task responses from API."""

    id: int
    title: str
    description: Optional[str]
    status: str
    priority: str
    due_date: Optional[date]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    high_priority_tasks: int
    overdue_tasks: int


# Enveloppes JSON

class TaskEnvelope(BaseModel):
    success: bool = True
    data: TaskResponse


class TaskMessageEnvelope(TaskEnvelope):
    message: str


class TaskListEnvelope(BaseModel):
    success: bool = True
    data: List[TaskResponse]
    count: int


class StatsEnvelope(BaseModel):
    success: bool = True
    data: TaskStats
