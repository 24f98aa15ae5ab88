from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.schemas.common import ApiResponse
from app.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskListResponse,
    TaskItemResponse,
    TaskStatsResponse,
)
from app.services import task_service

# Toutes les routes tâches exigent un token
router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse, response_model_exclude_unset=True)
def list_tasks(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    status: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
):
    tasks = task_service.list_tasks(db, user_id, status=status, priority=priority, search=search)
    return {"success": True, "tasks": [TaskResponse.model_validate(task) for task in tasks]}


@router.post("", response_model=TaskItemResponse, response_model_exclude_unset=True)
def create_task(
    task_data: TaskCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    task = task_service.create_task(db, user_id, task_data.model_dump())
    return {
        "success": True,
        "message": "Task created successfully",
        "task": TaskResponse.model_validate(task),
    }


# Déclarée avant /{task_id} pour ne pas être capturée par la route paramétrée
@router.get("/stats", response_model=TaskStatsResponse, response_model_exclude_unset=True)
def task_stats(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return {"success": True, "stats": task_service.get_task_stats(db, user_id)}


@router.get("/{task_id}", response_model=TaskItemResponse, response_model_exclude_unset=True)
def get_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    task = task_service.get_task(db, user_id, task_id)
    return {"success": True, "task": TaskResponse.model_validate(task)}


@router.put("/{task_id}", response_model=TaskItemResponse, response_model_exclude_unset=True)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    update_data = task_data.model_dump(exclude_unset=True)
    task = task_service.update_task(db, user_id, task_id, update_data)
    return {
        "success": True,
        "message": "Task updated successfully",
        "task": TaskResponse.model_validate(task),
    }


@router.delete("/{task_id}", response_model=ApiResponse, response_model_exclude_unset=True)
def delete_task(
    task_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    task_service.delete_task(db, user_id, task_id)
    return {"success": True, "message": "Task deleted successfully"}
