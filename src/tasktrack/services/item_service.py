"""Item service: owner-scoped CRUD for work items.

Learn: Every method takes the caller's user id as its first argument and
every query it runs carries `Item.owner_id == owner_id`. There is no
method that loads an item by id alone, so a route handler cannot forget
the ownership check.

An item owned by someone else and an item that does not exist produce the
same NotFound: non-owners learn nothing about other users' rows.

Writes go through an allow-list (MUTABLE_FIELDS). `id`, `owner_id` and
unknown keys in the input are dropped silently.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.db.models import MAX_ITEM_ID, Item
from tasktrack.errors import NotFound, ValidationError
from tasktrack.services.validation import validate_item

logger = structlog.get_logger()

MUTABLE_FIELDS = frozenset(
    {"title", "description", "priority", "status", "due_date", "tags"}
)

CREATE_DEFAULTS = {"priority": "medium", "status": "pending"}


@dataclass(frozen=True)
class ItemFilters:
    """Optional list filters. None means "don't filter on this"."""

    priority: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None


class ItemService:
    """Business logic for a caller's own items."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Read ────────────────────────────────────────────

    async def list_items(
        self, owner_id: uuid.UUID, filters: Optional[ItemFilters] = None
    ) -> list[Item]:
        """List the caller's items, oldest first.

        Learn: Filters are applied conditionally: only when set. `search`
        is a case-insensitive substring match on the title; LIKE wildcards
        in the search text are escaped, so "50%" matches literally.
        """
        filters = filters or ItemFilters()
        query = select(Item).where(Item.owner_id == owner_id).order_by(Item.id)
        if filters.priority:
            query = query.where(Item.priority == filters.priority)
        if filters.status:
            query = query.where(Item.status == filters.status)
        if filters.search:
            query = query.where(Item.title.icontains(filters.search, autoescape=True))

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_item(self, owner_id: uuid.UUID, item_id: int) -> Item:
        # Out-of-range ids would overflow the driver's integer binding.
        if not 0 < item_id <= MAX_ITEM_ID:
            raise NotFound("Item not found")
        result = await self.db.execute(
            select(Item).where(Item.id == item_id, Item.owner_id == owner_id)
        )
        item = result.scalars().first()
        if item is None:
            raise NotFound("Item not found")
        return item

    # ─── Create ──────────────────────────────────────────

    async def create_item(self, owner_id: uuid.UUID, fields: dict[str, Any]) -> Item:
        """Create an item owned by `owner_id`.

        Learn: priority/status fall back to medium/pending when omitted
        (or sent as null); an explicit value must be in its enumeration.
        Any owner id present in `fields` is ignored.
        """
        data = {k: v for k, v in fields.items() if k in MUTABLE_FIELDS and v is not None}
        data.setdefault("title", None)
        for key, default in CREATE_DEFAULTS.items():
            data.setdefault(key, default)
        data.setdefault("tags", [])

        errors = validate_item(data)
        if errors:
            raise ValidationError(errors)
        data["title"] = data["title"].strip()

        item = Item(owner_id=owner_id, **data)
        self.db.add(item)
        await self.db.commit()
        logger.info("item.created", item_id=item.id, owner_id=str(owner_id))
        return item

    # ─── Update ──────────────────────────────────────────

    async def update_item(
        self, owner_id: uuid.UUID, item_id: int, patch: dict[str, Any]
    ) -> Item:
        """Apply the allow-listed fields present in `patch`.

        Learn: `description` and `due_date` may be cleared with null; null
        `tags` resets to an empty list. Title, priority and status can't
        be nulled: that fails validation like any other bad value.
        """
        item = await self.get_item(owner_id, item_id)

        changes = {k: v for k, v in patch.items() if k in MUTABLE_FIELDS}
        if "tags" in changes and changes["tags"] is None:
            changes["tags"] = []

        errors = validate_item(changes)
        if errors:
            raise ValidationError(errors)
        if "title" in changes:
            changes["title"] = changes["title"].strip()

        for key, value in changes.items():
            setattr(item, key, value)

        await self.db.commit()
        logger.info(
            "item.updated",
            item_id=item.id,
            owner_id=str(owner_id),
            fields=sorted(changes),
        )
        return item

    # ─── Delete ──────────────────────────────────────────

    async def delete_item(self, owner_id: uuid.UUID, item_id: int) -> None:
        item = await self.get_item(owner_id, item_id)
        await self.db.delete(item)
        await self.db.commit()
        logger.info("item.deleted", item_id=item_id, owner_id=str(owner_id))
