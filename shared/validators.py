"""
Input validators — framework-agnostic, pure functions.

Each validator either returns the normalised value or raises
``errors.ValidationError`` with the offending field set.
"""

from __future__ import annotations

import re

import validators as _validators
from bson import ObjectId

from errors import ValidationError
from shared.generators import CODE_LENGTH

_CODE_RE = re.compile(rf"^[0-9]{{{CODE_LENGTH}}}$")

MAX_NAME_LENGTH = 100
MAX_TASK_LENGTH = 1000


def normalize_email(email: str) -> str:
    """Strip and lower-case *email*, then check it against the address grammar.

    Raises:
        ValidationError: the address is malformed.
    """
    normalized = (email or "").strip().lower()
    if not normalized or not _validators.email(normalized):
        raise ValidationError(
            f"{email!r} is not a valid email address", field="email"
        )
    return normalized


def validate_code_format(code: str) -> str:
    """Return *code* stripped, or raise if it is not exactly six digits."""
    stripped = (code or "").strip()
    if not _CODE_RE.match(stripped):
        raise ValidationError(
            f"verification code must be {CODE_LENGTH} digits", field="code"
        )
    return stripped


def validate_name(name: str) -> str:
    """Return the trimmed display name; empty or overly long names are rejected."""
    stripped = (name or "").strip()
    if not stripped:
        raise ValidationError("name is required", field="name")
    if len(stripped) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"name must be at most {MAX_NAME_LENGTH} characters", field="name"
        )
    return stripped


def validate_task_content(content: str) -> str:
    stripped = (content or "").strip()
    if not stripped:
        raise ValidationError("task content is required", field="content")
    if len(stripped) > MAX_TASK_LENGTH:
        raise ValidationError(
            f"task content must be at most {MAX_TASK_LENGTH} characters",
            field="content",
        )
    return stripped


def parse_object_id(value: str, field: str = "task_id") -> ObjectId:
    """Parse a hex ObjectId string, raising ValidationError when malformed."""
    if not ObjectId.is_valid(value):
        raise ValidationError(f"invalid id: {value!r}", field=field)
    return ObjectId(value)
