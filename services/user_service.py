"""Profile and task-list operations for an authenticated user."""

from __future__ import annotations

from bson import ObjectId

from errors import NotFoundError
from repositories.user_repository import UserRepository
from schemas.models.user import TaskDoc, UserDoc
from services.identity import AuthIdentity
from shared.logging import get_logger
from shared.validators import parse_object_id, validate_name, validate_task_content

log = get_logger(__name__)


class UserService:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    async def rename(self, identity: AuthIdentity, name: str) -> UserDoc:
        user = await self._users.update_name(identity.email, validate_name(name))
        if user is None:
            raise NotFoundError("user not found")
        log.info("user_renamed", email=identity.email)
        return user

    # ── Tasks ────────────────────────────────────────────────────────────────
    # Each mutation returns the full, ordered task list after the change.

    def list_tasks(self, identity: AuthIdentity) -> list[TaskDoc]:
        return identity.user.tasks

    async def add_task(self, identity: AuthIdentity, content: str) -> list[TaskDoc]:
        user = await self._users.add_task(identity.email, validate_task_content(content))
        if user is None:
            raise NotFoundError("user not found")
        return user.tasks

    async def update_task(
        self, identity: AuthIdentity, task_id: str, content: str
    ) -> list[TaskDoc]:
        return await self._update(
            identity, parse_object_id(task_id), {"content": validate_task_content(content)}
        )

    async def set_task_completed(
        self, identity: AuthIdentity, task_id: str, completed: bool
    ) -> list[TaskDoc]:
        return await self._update(
            identity, parse_object_id(task_id), {"completed": bool(completed)}
        )

    async def delete_task(self, identity: AuthIdentity, task_id: str) -> list[TaskDoc]:
        oid = parse_object_id(task_id)
        user = await self._users.remove_task(identity.email, oid)
        if user is None:
            raise NotFoundError("task not found", field="task_id")
        return user.tasks

    async def _update(
        self, identity: AuthIdentity, task_id: ObjectId, fields: dict
    ) -> list[TaskDoc]:
        user = await self._users.update_task(identity.email, task_id, fields)
        if user is None:
            raise NotFoundError("task not found", field="task_id")
        return user.tasks
