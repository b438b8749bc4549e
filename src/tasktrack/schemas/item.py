"""Pydantic schemas for items.

Learn: Separate schemas for create/update/read keeps the API clean.
- ItemCreate: what you POST to create an item
- ItemUpdate: what you PUT to modify an item (only sent fields apply)
- ItemRead: what the API returns

Neither input schema declares id or ownerId, and unknown keys are
ignored, so a client can't smuggle in an owner. Enumerations and the
title rule are checked by the service layer, not here, so the error
format is the same for every field.
"""

import uuid
from datetime import datetime
from typing import Optional

from tasktrack.schemas import CamelModel


class ItemCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[datetime] = None
    tags: Optional[list[str]] = None


class ItemUpdate(CamelModel):
    """Partial update: use model_dump(exclude_unset=True)."""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[datetime] = None
    tags: Optional[list[str]] = None


class ItemRead(CamelModel):
    id: int
    title: str
    description: Optional[str]
    priority: str
    status: str
    due_date: Optional[datetime]
    tags: list[str]
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class ItemDeleted(CamelModel):
    message: str = "Item deleted"
    id: int
