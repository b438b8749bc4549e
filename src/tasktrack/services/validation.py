"""Field validation for registrations and items.

Learn: One plain function per entity. Each returns a list of FieldError
(empty list = valid) so callers can report every bad field at once;
services raise ValidationError when the list is non-empty.
"""

import re
from datetime import datetime
from typing import Any

from tasktrack.db.models import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PRIORITIES,
    STATUSES,
    TITLE_MAX_LENGTH,
)
from tasktrack.errors import FieldError

# Deliberately loose: something@something.tld, no whitespace.
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_registration(
    name: Any, email: Any, password: Any, min_password_length: int = 6
) -> list[FieldError]:
    errors = []
    if not isinstance(name, str) or not name.strip():
        errors.append(FieldError("name", "Name is required"))
    elif len(name.strip()) > NAME_MAX_LENGTH:
        errors.append(
            FieldError("name", f"Name must be at most {NAME_MAX_LENGTH} characters")
        )
    if not isinstance(email, str) or not _EMAIL_RE.match(email):
        errors.append(FieldError("email", "Must be a valid email address"))
    elif len(email) > EMAIL_MAX_LENGTH:
        errors.append(
            FieldError("email", f"Email must be at most {EMAIL_MAX_LENGTH} characters")
        )
    if not isinstance(password, str) or len(password) < min_password_length:
        errors.append(
            FieldError(
                "password",
                f"Password must be at least {min_password_length} characters",
            )
        )
    return errors


def validate_item(fields: dict[str, Any]) -> list[FieldError]:
    """Validate the item fields that are present in `fields`.

    Absent keys are not checked, so the same function serves both create
    (after defaults are applied) and partial update.
    """
    errors = []
    if "title" in fields:
        title = fields["title"]
        if not isinstance(title, str) or not title.strip():
            errors.append(FieldError("title", "Title is required"))
        elif len(title.strip()) > TITLE_MAX_LENGTH:
            errors.append(
                FieldError("title", f"Title must be at most {TITLE_MAX_LENGTH} characters")
            )
    if "description" in fields:
        if fields["description"] is not None and not isinstance(fields["description"], str):
            errors.append(FieldError("description", "Description must be a string"))
    if "priority" in fields and fields["priority"] not in PRIORITIES:
        errors.append(
            FieldError("priority", f"Priority must be one of: {', '.join(PRIORITIES)}")
        )
    if "status" in fields and fields["status"] not in STATUSES:
        errors.append(
            FieldError("status", f"Status must be one of: {', '.join(STATUSES)}")
        )
    if "due_date" in fields:
        if fields["due_date"] is not None and not isinstance(fields["due_date"], datetime):
            errors.append(FieldError("dueDate", "Due date must be a timestamp"))
    if "tags" in fields:
        tags = fields["tags"]
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            errors.append(FieldError("tags", "Tags must be a list of strings"))
    return errors
