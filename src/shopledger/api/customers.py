"""Customer management API endpoints."""

from fastapi import APIRouter, Depends, status

from shopledger.api.deps import get_bookkeeper, get_store
from shopledger.core.errors import NotFoundError
from shopledger.core.logging import get_logger
from shopledger.models.customer_schemas import CustomerCreate, CustomerRead, CustomerUpdate
from shopledger.models.transaction_schemas import PaymentCreate, TransactionRead
from shopledger.services.bookkeeping import Bookkeeper
from shopledger.store.base import DocumentStore

logger = get_logger(__name__)

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerRead])
async def list_customers(store: DocumentStore = Depends(get_store)):
    """List all customers."""
    return await store.customers.get_all()


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer: CustomerCreate,
    store: DocumentStore = Depends(get_store),
):
    """Create a new customer."""
    created = await store.customers.create(customer)
    logger.info("customer.created", customer_id=created.id, customer_name=created.name)
    return created


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(customer_id: str, store: DocumentStore = Depends(get_store)):
    """Get customer by ID."""
    customer = await store.customers.get_by_id(customer_id)
    if customer is None:
        raise NotFoundError("Customer", customer_id)
    return customer


@router.put("/{customer_id}", response_model=CustomerRead)
async def update_customer(
    customer_id: str,
    customer_update: CustomerUpdate,
    store: DocumentStore = Depends(get_store),
):
    """Update customer (partial update)."""
    changes = customer_update.model_dump(exclude_unset=True)
    updated = await store.customers.update(customer_id, changes)
    if updated is None:
        raise NotFoundError("Customer", customer_id)
    logger.info("customer.updated", customer_id=customer_id, fields_changed=sorted(changes))
    return updated


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: str, store: DocumentStore = Depends(get_store)):
    """Delete a customer. Their orders and transactions stay and become orphans."""
    if not await store.customers.delete(customer_id):
        raise NotFoundError("Customer", customer_id)
    logger.info("customer.deleted", customer_id=customer_id)


@router.post(
    "/{customer_id}/payment",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
)
async def record_customer_payment(
    customer_id: str,
    payment: PaymentCreate,
    bookkeeper: Bookkeeper = Depends(get_bookkeeper),
):
    """Record money received from a customer; lowers their pending amount."""
    return await bookkeeper.record_customer_payment(
        customer_id, payment.amount, payment.description
    )
