"""
User document model.

Maps to the `users` MongoDB collection.

The two secret components are half of each token signing key; the other half
is the process-wide key for that purpose. Overwriting a component invalidates
every token of that purpose issued to the user.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pydantic import Field

from schemas.models.base import MongoBaseModel, PyObjectId, UtcModel


class TaskDoc(UtcModel):
    """Single entry in the user's ordered task list."""

    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    content: str
    completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_mongo(self) -> dict:
        return self.model_dump(by_alias=True)


class UserDoc(MongoBaseModel):
    """Document model for the `users` collection."""

    email: str
    name: str
    auth_secret_component: str
    refresh_secret_component: str
    tasks: list[TaskDoc] = []
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
