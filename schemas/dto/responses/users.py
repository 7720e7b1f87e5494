"""
Response DTOs for profile and task endpoints.

UserProfileResponse — GET/PATCH /users/me, embedded in SessionResponse
TaskResponse        — one entry of TaskListResponse
TaskListResponse    — every /tasks endpoint (the full ordered list)
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.user import TaskDoc, UserDoc


class UserProfileResponse(BaseModel):
    """Public view of a user document; secret components are never exposed."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    name: str
    task_count: int = 0
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: UserDoc) -> "UserProfileResponse":
        return cls(
            email=user.email,
            name=user.name,
            task_count=len(user.tasks),
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class TaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str
    completed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_task(cls, task: TaskDoc) -> "TaskResponse":
        return cls(
            id=str(task.id),
            content=task.content,
            completed=task.completed,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


class TaskListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tasks: list[TaskResponse]

    @classmethod
    def from_tasks(cls, tasks: list[TaskDoc]) -> "TaskListResponse":
        return cls(tasks=[TaskResponse.from_task(t) for t in tasks])
