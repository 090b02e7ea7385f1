# src/dayplanner/server/task_routes.py

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from ..core.errors import NotFoundOrUnauthorized, ValidationFailure
from ..core.timeutil import parse_day, parse_instant
from ..storage.task_store import TaskStore
from .auth import current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


class TaskCreateBody(BaseModel):
    title: str = ""
    createdAt: str | None = None
    remindOn: str | None = None
    isImportant: bool = False
    isCompleted: bool = False


class TaskUpdateBody(BaseModel):
    title: str | None = None
    remindOn: str | None = None
    isImportant: bool | None = None
    isCompleted: bool | None = None


def get_task_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def _day(raw: str | None) -> date:
    if not raw:
        raise ValidationFailure("createdAt is required")
    try:
        return parse_day(raw)
    except ValueError as e:
        raise ValidationFailure(f"Invalid createdAt: {raw}") from e


def _reminder(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return parse_instant(raw)
    except ValueError as e:
        raise ValidationFailure(f"Invalid remindOn: {raw}") from e


@router.get("")
def list_tasks(
    user_id: int = Depends(current_user_id),
    tasks: TaskStore = Depends(get_task_store),
) -> list[dict[str, Any]]:
    return [t.to_json() for t in tasks.list_tasks(user_id)]


@router.post("", status_code=201)
def create_task(
    body: TaskCreateBody,
    user_id: int = Depends(current_user_id),
    tasks: TaskStore = Depends(get_task_store),
) -> dict[str, Any]:
    title = body.title.strip()
    if not title:
        raise ValidationFailure("title is required")

    task = tasks.add_task(
        user_id=user_id,
        title=title,
        created_at=_day(body.createdAt),
        remind_on=_reminder(body.remindOn),
        is_important=body.isImportant,
        is_completed=body.isCompleted,
    )
    logger.info("Task created id=%s user=%s", task.id, user_id)
    return task.to_json()


@router.put("/{task_id}")
def update_task(
    task_id: int,
    body: TaskUpdateBody,
    user_id: int = Depends(current_user_id),
    tasks: TaskStore = Depends(get_task_store),
) -> dict[str, Any]:
    # Only fields present in the body are touched; remindOn: null clears the reminder.
    sent = body.model_fields_set
    changes: dict[str, Any] = {}

    if "title" in sent and body.title is not None:
        title = body.title.strip()
        if not title:
            raise ValidationFailure("title must not be empty")
        changes["title"] = title
    if "remindOn" in sent:
        changes["remind_on"] = _reminder(body.remindOn)
    if "isImportant" in sent and body.isImportant is not None:
        changes["is_important"] = body.isImportant
    if "isCompleted" in sent and body.isCompleted is not None:
        changes["is_completed"] = body.isCompleted

    task = tasks.update_task(task_id, user_id, **changes)
    if task is None:
        raise NotFoundOrUnauthorized()

    logger.debug("Task updated id=%s user=%s fields=%s", task_id, user_id, sorted(changes))
    return task.to_json()


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    user_id: int = Depends(current_user_id),
    tasks: TaskStore = Depends(get_task_store),
) -> dict[str, Any]:
    if not tasks.delete_task(task_id, user_id):
        raise NotFoundOrUnauthorized()
    logger.info("Task deleted id=%s user=%s", task_id, user_id)
    return {"message": "Task deleted successfully"}
