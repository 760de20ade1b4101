"""Inventory API endpoints."""

from fastapi import APIRouter, Depends, status

from shopledger.api.deps import get_store
from shopledger.core.errors import NotFoundError
from shopledger.core.logging import get_logger
from shopledger.models.inventory_schemas import InventoryCreate, InventoryRead, InventoryUpdate
from shopledger.store.base import DocumentStore

logger = get_logger(__name__)

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=list[InventoryRead])
async def list_inventory(store: DocumentStore = Depends(get_store)):
    """List all inventory lines."""
    return await store.inventory.get_all()


@router.post("", response_model=InventoryRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(
    item: InventoryCreate,
    store: DocumentStore = Depends(get_store),
):
    """Create an inventory line."""
    created = await store.inventory.create(item)
    logger.info("inventory.created", item_id=created.id, item_type=created.type)
    return created


@router.get("/{item_id}", response_model=InventoryRead)
async def get_inventory_item(item_id: str, store: DocumentStore = Depends(get_store)):
    """Get inventory line by ID."""
    item = await store.inventory.get_by_id(item_id)
    if item is None:
        raise NotFoundError("InventoryItem", item_id)
    return item


@router.put("/{item_id}", response_model=InventoryRead)
async def update_inventory_item(
    item_id: str,
    item_update: InventoryUpdate,
    store: DocumentStore = Depends(get_store),
):
    """Update an inventory line (partial update)."""
    changes = item_update.model_dump(exclude_unset=True)
    updated = await store.inventory.update(item_id, changes)
    if updated is None:
        raise NotFoundError("InventoryItem", item_id)
    logger.info("inventory.updated", item_id=item_id, fields_changed=sorted(changes))
    return updated


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory_item(item_id: str, store: DocumentStore = Depends(get_store)):
    """Delete an inventory line."""
    if not await store.inventory.delete(item_id):
        raise NotFoundError("InventoryItem", item_id)
    logger.info("inventory.deleted", item_id=item_id)
