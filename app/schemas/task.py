"""Pydantic schemas for task request/response validation."""

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, List, Literal

from app.schemas.common import CamelModel, ApiResponse

TaskStatus = Literal["pending", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]


class TaskCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None


class TaskUpdate(CamelModel):
    """Mise à jour partielle: seuls les champs envoyés sont modifiés."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None


class TaskResponse(CamelModel):
    id: int
    user_id: int
    title: str
    description: str
    status: str
    priority: str
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class TaskStats(CamelModel):
    total: int
    pending: int
    in_progress: int
    completed: int


class TaskListResponse(ApiResponse):
    tasks: List[TaskResponse]


class TaskItemResponse(ApiResponse):
    task: TaskResponse


class TaskStatsResponse(ApiResponse):
    stats: TaskStats
