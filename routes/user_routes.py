"""
Profile and task endpoints. All require a valid auth token.

GET    /users/me                  — profile
PATCH  /users/me                  — change display name
GET    /tasks                     — task list
POST   /tasks                     — append a task
PUT    /tasks/{task_id}           — change a task's content
PUT    /tasks/{task_id}/complete  — set a task's completion flag
DELETE /tasks/{task_id}           — remove a task

Every task endpoint responds with the full, ordered task list.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_auth_identity, get_user_service
from schemas.dto.requests.users import (
    RenameRequest,
    TaskCompletionRequest,
    TaskContentRequest,
)
from schemas.dto.responses.common import ErrorResponse
from schemas.dto.responses.users import TaskListResponse, UserProfileResponse
from services.identity import AuthIdentity
from services.user_service import UserService

router = APIRouter(
    tags=["users"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


@router.get("/users/me", response_model=UserProfileResponse)
async def get_me(
    identity: AuthIdentity = Depends(get_auth_identity),
) -> UserProfileResponse:
    return UserProfileResponse.from_user(identity.user)


@router.patch("/users/me", response_model=UserProfileResponse)
async def rename_me(
    body: RenameRequest,
    identity: AuthIdentity = Depends(get_auth_identity),
    users: UserService = Depends(get_user_service),
) -> UserProfileResponse:
    return UserProfileResponse.from_user(await users.rename(identity, body.name))


@router.get("/tasks", response_model=TaskListResponse)
async def list_tasks(
    identity: AuthIdentity = Depends(get_auth_identity),
    users: UserService = Depends(get_user_service),
) -> TaskListResponse:
    return TaskListResponse.from_tasks(users.list_tasks(identity))


@router.post("/tasks", response_model=TaskListResponse)
async def add_task(
    body: TaskContentRequest,
    identity: AuthIdentity = Depends(get_auth_identity),
    users: UserService = Depends(get_user_service),
) -> TaskListResponse:
    return TaskListResponse.from_tasks(await users.add_task(identity, body.content))


@router.put("/tasks/{task_id}", response_model=TaskListResponse)
async def update_task(
    task_id: str,
    body: TaskContentRequest,
    identity: AuthIdentity = Depends(get_auth_identity),
    users: UserService = Depends(get_user_service),
) -> TaskListResponse:
    tasks = await users.update_task(identity, task_id, body.content)
    return TaskListResponse.from_tasks(tasks)


@router.put("/tasks/{task_id}/complete", response_model=TaskListResponse)
async def complete_task(
    task_id: str,
    body: TaskCompletionRequest,
    identity: AuthIdentity = Depends(get_auth_identity),
    users: UserService = Depends(get_user_service),
) -> TaskListResponse:
    tasks = await users.set_task_completed(identity, task_id, body.completed)
    return TaskListResponse.from_tasks(tasks)


@router.delete("/tasks/{task_id}", response_model=TaskListResponse)
async def delete_task(
    task_id: str,
    identity: AuthIdentity = Depends(get_auth_identity),
    users: UserService = Depends(get_user_service),
) -> TaskListResponse:
    return TaskListResponse.from_tasks(await users.delete_task(identity, task_id))
