"""Order API endpoints."""

from fastapi import APIRouter, Depends, Query, status

from shopledger.api.deps import get_bookkeeper, get_store
from shopledger.core.errors import NotFoundError
from shopledger.models.order_schemas import OrderCreate, OrderRead, OrderUpdate
from shopledger.services.bookkeeping import Bookkeeper
from shopledger.store.base import DocumentStore

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=list[OrderRead])
async def list_orders(
    customer_id: str | None = Query(None, description="Only this customer's orders"),
    store: DocumentStore = Depends(get_store),
):
    """List orders, optionally for one customer."""
    orders = await store.orders.get_all()
    if customer_id is not None:
        orders = [order for order in orders if order.customer_id == customer_id]
    return orders


@router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(
    order: OrderCreate,
    bookkeeper: Bookkeeper = Depends(get_bookkeeper),
):
    """Create an order, draw down stock and add pending orders to the customer's balance."""
    return await bookkeeper.create_order(order)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(order_id: str, store: DocumentStore = Depends(get_store)):
    """Get order by ID."""
    order = await store.orders.get_by_id(order_id)
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


@router.put("/{order_id}", response_model=OrderRead)
async def update_order(
    order_id: str,
    order_update: OrderUpdate,
    bookkeeper: Bookkeeper = Depends(get_bookkeeper),
):
    """Update an order. A status change moves its total on or off the customer's balance."""
    return await bookkeeper.update_order(order_id, order_update)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: str, bookkeeper: Bookkeeper = Depends(get_bookkeeper)):
    """Delete an order. The customer's balance is not adjusted."""
    await bookkeeper.delete_order(order_id)
