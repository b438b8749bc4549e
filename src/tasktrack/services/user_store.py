"""Credential store: user lookup, creation, and admin maintenance.

Learn: Each method is its own transaction (commit at the end), so no
caller ever needs to hold a lock across calls. Email uniqueness is
checked up front for a friendly error, and the unique constraint is the
backstop when two registrations race.
"""

import uuid
from typing import Optional, Union

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.db.models import DEFAULT_ROLE, ROLES, Item, User
from tasktrack.errors import DuplicateIdentity, FieldError, NotFound, ValidationError

logger = structlog.get_logger()

UserId = Union[uuid.UUID, str]


def _as_uuid(user_id: UserId) -> Optional[uuid.UUID]:
    if isinstance(user_id, uuid.UUID):
        return user_id
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


class UserStore:
    """Persistence for User rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        uid = _as_uuid(user_id)
        if uid is None:
            return None
        return await self.db.get(User, uid)

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def create(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: str = DEFAULT_ROLE,
    ) -> User:
        """Insert a new user. Raises DuplicateIdentity if the email is taken."""
        if await self.find_by_email(email):
            raise DuplicateIdentity()

        user = User(name=name, email=email, password_hash=password_hash, role=role)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateIdentity() from e

        logger.info("user.created", user_id=str(user.id), role=user.role)
        return user

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at, User.email))
        return list(result.scalars().all())

    async def set_role(self, user_id: UserId, role: str) -> User:
        if role not in ROLES:
            raise ValidationError(
                [FieldError("role", f"Role must be one of: {', '.join(ROLES)}")]
            )
        user = await self.find_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        user.role = role
        await self.db.commit()
        logger.info("user.role_changed", user_id=str(user.id), role=role)
        return user

    async def delete(self, user_id: UserId) -> None:
        """Delete a user and, with them, every item they own."""
        uid = _as_uuid(user_id)
        user = await self.find_by_id(uid) if uid else None
        if not user:
            raise NotFound("User not found")

        # Owned items go first, whether or not the backend enforces the FK.
        result = await self.db.execute(delete(Item).where(Item.owner_id == uid))
        await self.db.delete(user)
        await self.db.commit()
        logger.info("user.deleted", user_id=str(uid), items_deleted=result.rowcount)
