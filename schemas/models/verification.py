"""
Verification request document model.

Maps to the `verification-requests` MongoDB collection.

One document per email address (unique index). code_hash stores the argon2
hash of the emailed code; the plain code is never stored. expires_at is fixed
at creation and backs a TTL index, so MongoDB removes stale requests on its
own; readers still treat anything past expires_at as absent.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import ConfigDict

from schemas.models.base import MongoBaseModel
from shared.datetime_utils import is_expired


class VerificationKind(str, Enum):
    """The flow a verification request was created for."""

    SIGNUP = "signup"
    LOGIN = "login"
    DELETE_ACCOUNT = "delete_account"


class VerificationRequestDoc(MongoBaseModel):
    """Document model for the `verification-requests` collection."""

    model_config = ConfigDict(use_enum_values=True)

    email: str
    kind: VerificationKind
    code_hash: str
    expires_at: datetime
    created_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return is_expired(self.expires_at, now)
