"""Item API routes.

Learn: Every handler pulls the caller from get_current_identity and
passes its id to ItemService as the owner. Routes translate HTTP to
service calls; validation, defaults and ownership live in the service.

- GET    /items?priority&status&search → caller's items
- POST   /items                        → create (owner = caller)
- GET    /items/{id}                   → one item, 404 unless owned
- PUT    /items/{id}                   → partial update, 404 unless owned
- DELETE /items/{id}                   → hard delete, 404 unless owned
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.auth.dependencies import RequestIdentity, get_current_identity
from tasktrack.db.engine import get_db
from tasktrack.schemas.item import ItemCreate, ItemDeleted, ItemRead, ItemUpdate
from tasktrack.services.item_service import ItemFilters, ItemService

router = APIRouter(prefix="/items")


def _item_svc(db: AsyncSession = Depends(get_db)) -> ItemService:
    return ItemService(db)


def _owner(identity: RequestIdentity) -> uuid.UUID:
    return uuid.UUID(identity.id)


@router.get("", response_model=list[ItemRead])
async def list_items(
    priority: Optional[str] = Query(None, description="Filter by priority"),
    status: Optional[str] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Substring of the title"),
    identity: RequestIdentity = Depends(get_current_identity),
    svc: ItemService = Depends(_item_svc),
):
    """List the caller's items with optional filters."""
    filters = ItemFilters(priority=priority, status=status, search=search)
    return await svc.list_items(_owner(identity), filters)


@router.post("", response_model=ItemRead, status_code=201)
async def create_item(
    body: ItemCreate,
    identity: RequestIdentity = Depends(get_current_identity),
    svc: ItemService = Depends(_item_svc),
):
    """Create a new item owned by the caller."""
    return await svc.create_item(_owner(identity), body.model_dump())


@router.get("/{item_id}", response_model=ItemRead)
async def get_item(
    item_id: int,
    identity: RequestIdentity = Depends(get_current_identity),
    svc: ItemService = Depends(_item_svc),
):
    return await svc.get_item(_owner(identity), item_id)


@router.put("/{item_id}", response_model=ItemRead)
async def update_item(
    item_id: int,
    body: ItemUpdate,
    identity: RequestIdentity = Depends(get_current_identity),
    svc: ItemService = Depends(_item_svc),
):
    """Update only the fields present in the body."""
    return await svc.update_item(
        _owner(identity), item_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/{item_id}", response_model=ItemDeleted)
async def delete_item(
    item_id: int,
    identity: RequestIdentity = Depends(get_current_identity),
    svc: ItemService = Depends(_item_svc),
):
    await svc.delete_item(_owner(identity), item_id)
    return ItemDeleted(id=item_id)
