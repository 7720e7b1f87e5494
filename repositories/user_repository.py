"""
Repository for the `users` collection.

Every write that must be atomic with respect to a single user (secret
rotation, task edits) is a single update against the user document.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from errors import ConflictError
from schemas.models.user import TaskDoc, UserDoc
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)


class UserRepository:
    def __init__(self, collection) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("email", ASCENDING)], unique=True)

    async def find_by_email(self, email: str) -> Optional[UserDoc]:
        return UserDoc.from_mongo(await self._col.find_one({"email": email}))

    async def create(
        self,
        email: str,
        name: str,
        auth_secret_component: str,
        refresh_secret_component: str,
        now: Optional[datetime] = None,
    ) -> UserDoc:
        now = now or utcnow()
        user = UserDoc(
            email=email,
            name=name,
            auth_secret_component=auth_secret_component,
            refresh_secret_component=refresh_secret_component,
            tasks=[],
            last_login_at=now,
            created_at=now,
            updated_at=now,
        )
        try:
            result = await self._col.insert_one(user.to_mongo())
        except DuplicateKeyError:
            # Race: email was registered between our check and insert
            log.warning("user_create_failed", reason="duplicate_email", email=email)
            raise ConflictError("email already registered", field="email")
        user.id = result.inserted_id
        return user

    async def _update(
        self, email: str, update: dict, extra_filter: Optional[dict] = None
    ) -> Optional[UserDoc]:
        query = {"email": email, **(extra_filter or {})}
        raw = await self._col.find_one_and_update(
            query, update, return_document=ReturnDocument.AFTER
        )
        return UserDoc.from_mongo(raw)

    async def update_name(self, email: str, name: str) -> Optional[UserDoc]:
        return await self._update(
            email, {"$set": {"name": name, "updated_at": utcnow()}}
        )

    async def set_secret_components(
        self, email: str, auth_secret_component: str, refresh_secret_component: str
    ) -> Optional[UserDoc]:
        """Replace both components in one write; readers see old pair or new pair."""
        return await self._update(
            email,
            {
                "$set": {
                    "auth_secret_component": auth_secret_component,
                    "refresh_secret_component": refresh_secret_component,
                    "updated_at": utcnow(),
                }
            },
        )

    async def touch_last_login(self, email: str) -> Optional[UserDoc]:
        now = utcnow()
        return await self._update(
            email, {"$set": {"last_login_at": now, "updated_at": now}}
        )

    async def delete(self, email: str) -> Optional[UserDoc]:
        return UserDoc.from_mongo(await self._col.find_one_and_delete({"email": email}))

    # ── Tasks ────────────────────────────────────────────────────────────────

    async def add_task(self, email: str, content: str) -> Optional[UserDoc]:
        now = utcnow()
        task = TaskDoc(content=content, created_at=now, updated_at=now)
        return await self._update(
            email,
            {"$push": {"tasks": task.to_mongo()}, "$set": {"updated_at": now}},
        )

    async def update_task(
        self, email: str, task_id: ObjectId, fields: dict
    ) -> Optional[UserDoc]:
        """Set *fields* on one task; None when the user or the task is missing."""
        now = utcnow()
        update = {f"tasks.$.{name}": value for name, value in fields.items()}
        update["tasks.$.updated_at"] = now
        update["updated_at"] = now
        result = await self._col.update_one(
            {"email": email, "tasks._id": task_id}, {"$set": update}
        )
        if result.matched_count == 0:
            return None
        return await self.find_by_email(email)

    async def remove_task(self, email: str, task_id: ObjectId) -> Optional[UserDoc]:
        return await self._update(
            email,
            {"$pull": {"tasks": {"_id": task_id}}, "$set": {"updated_at": utcnow()}},
            extra_filter={"tasks._id": task_id},
        )
