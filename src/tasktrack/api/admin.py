"""Admin API: user management, admin role only.

Learn: The whole router is gated with require_roles("admin") at the
include_router level (see api/__init__.py), so handlers here can assume
the caller is an admin. Deleting a user also deletes their items.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.db.engine import get_db
from tasktrack.schemas.auth import UserRead
from tasktrack.services.user_store import UserStore

router = APIRouter(prefix="/admin")


@router.get("/users", response_model=list[UserRead])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await UserStore(db).list_users()


@router.delete("/users/{user_id}")
async def delete_user(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Delete a user account and every item it owns."""
    await UserStore(db).delete(user_id)
    return {"deleted": True, "id": str(user_id)}
