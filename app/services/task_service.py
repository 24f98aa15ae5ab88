"""Task service"""

from datetime import datetime
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.errors import NotFoundError, ValidationFailure
from app.models.task import Task

TASK_NOT_FOUND = "Task not found"


def _escape_like(value: str) -> str:
    # la recherche est une sous-chaîne littérale
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_tasks(
    db: Session,
    user_id: int,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Task]:
    query = db.query(Task).filter(Task.user_id == user_id)

    if status:
        query = query.filter(Task.status == status)

    if priority:
        query = query.filter(Task.priority == priority)

    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.filter(or_(
            Task.title.ilike(pattern, escape="\\"),
            Task.description.ilike(pattern, escape="\\"),
        ))

    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def get_task(db: Session, user_id: int, task_id: int) -> Task:
    task = db.query(Task).filter(
        Task.id == task_id,
        Task.user_id == user_id
    ).first()

    if not task:
        raise NotFoundError(TASK_NOT_FOUND)
    return task


def create_task(db: Session, user_id: int, data: dict) -> Task:
    title = data.get("title")
    if not title or not title.strip():
        raise ValidationFailure("Title is required")

    task = Task(
        user_id=user_id,
        title=title,
        description=data.get("description") or "",
        priority=data.get("priority") or "medium",
        due_date=data.get("due_date"),
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, user_id: int, task_id: int, data: dict) -> Task:
    """Applique uniquement les champs présents dans `data`.

    `due_date=None` efface l'échéance; les autres champs à None sont ignorés,
    sauf `description` qui repasse à "".
    """
    task = get_task(db, user_id, task_id)

    if "title" in data:
        if not data["title"] or not data["title"].strip():
            raise ValidationFailure("Title is required")
        task.title = data["title"]

    if "description" in data:
        task.description = data["description"] or ""

    for field in ("status", "priority"):
        if data.get(field) is not None:
            setattr(task, field, data[field])

    if "due_date" in data:
        task.due_date = data["due_date"]

    task.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, user_id: int, task_id: int):
    deleted = db.query(Task).filter(
        Task.id == task_id,
        Task.user_id == user_id
    ).delete(synchronize_session=False)

    if not deleted:
        raise NotFoundError(TASK_NOT_FOUND)
    db.commit()


def get_task_stats(db: Session, user_id: int) -> dict:
    base = db.query(Task).filter(Task.user_id == user_id)
    return {
        "total": base.count(),
        "pending": base.filter(Task.status == "pending").count(),
        "in_progress": base.filter(Task.status == "in-progress").count(),
        "completed": base.filter(Task.status == "completed").count(),
    }
