"""
Request DTOs for profile and task endpoints.

RenameRequest         — PATCH /users/me
TaskContentRequest    — POST /tasks, PUT /tasks/{task_id}
TaskCompletionRequest — PUT /tasks/{task_id}/complete
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RenameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str


class TaskContentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str


class TaskCompletionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    completed: bool
