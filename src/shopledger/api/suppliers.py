"""Supplier management API endpoints."""

from fastapi import APIRouter, Depends, status

from shopledger.api.deps import get_bookkeeper, get_store
from shopledger.core.errors import NotFoundError
from shopledger.core.logging import get_logger
from shopledger.models.supplier_schemas import SupplierCreate, SupplierRead, SupplierUpdate
from shopledger.models.transaction_schemas import (
    PaymentCreate,
    StockPurchaseCreate,
    TransactionRead,
)
from shopledger.services.bookkeeping import Bookkeeper
from shopledger.store.base import DocumentStore

logger = get_logger(__name__)

router = APIRouter(prefix="/suppliers", tags=["suppliers"])


@router.get("", response_model=list[SupplierRead])
async def list_suppliers(store: DocumentStore = Depends(get_store)):
    """List all suppliers."""
    return await store.suppliers.get_all()


@router.post("", response_model=SupplierRead, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    supplier: SupplierCreate,
    store: DocumentStore = Depends(get_store),
):
    """Create a new supplier."""
    created = await store.suppliers.create(supplier)
    logger.info("supplier.created", supplier_id=created.id, supplier_name=created.name)
    return created


@router.get("/{supplier_id}", response_model=SupplierRead)
async def get_supplier(supplier_id: str, store: DocumentStore = Depends(get_store)):
    """Get supplier by ID."""
    supplier = await store.suppliers.get_by_id(supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier", supplier_id)
    return supplier


@router.put("/{supplier_id}", response_model=SupplierRead)
async def update_supplier(
    supplier_id: str,
    supplier_update: SupplierUpdate,
    store: DocumentStore = Depends(get_store),
):
    """Update supplier (partial update)."""
    changes = supplier_update.model_dump(exclude_unset=True)
    updated = await store.suppliers.update(supplier_id, changes)
    if updated is None:
        raise NotFoundError("Supplier", supplier_id)
    logger.info("supplier.updated", supplier_id=supplier_id, fields_changed=sorted(changes))
    return updated


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(supplier_id: str, store: DocumentStore = Depends(get_store)):
    """Delete a supplier. Their transactions stay and become orphans."""
    if not await store.suppliers.delete(supplier_id):
        raise NotFoundError("Supplier", supplier_id)
    logger.info("supplier.deleted", supplier_id=supplier_id)


@router.post(
    "/{supplier_id}/payment",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
)
async def record_supplier_payment(
    supplier_id: str,
    payment: PaymentCreate,
    bookkeeper: Bookkeeper = Depends(get_bookkeeper),
):
    """Record a payment to a supplier; lowers their debt."""
    return await bookkeeper.record_supplier_payment(
        supplier_id, payment.amount, payment.description
    )


@router.post(
    "/{supplier_id}/stock",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
)
async def record_stock_purchase(
    supplier_id: str,
    purchase: StockPurchaseCreate,
    bookkeeper: Bookkeeper = Depends(get_bookkeeper),
):
    """Record stock bought on credit; raises inventory and the supplier's debt."""
    return await bookkeeper.record_stock_purchase(
        supplier_id, purchase.type, purchase.quantity, purchase.rate
    )
