"""Transaction ledger API endpoints."""

from fastapi import APIRouter, Depends, Query, status

from shopledger.api.deps import get_bookkeeper, get_store
from shopledger.core.errors import NotFoundError
from shopledger.models.transaction_schemas import TransactionCreate, TransactionRead
from shopledger.services.bookkeeping import Bookkeeper
from shopledger.store.base import DocumentStore

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=list[TransactionRead])
async def list_transactions(
    entity_id: str | None = Query(None, description="Only this customer's or supplier's entries"),
    store: DocumentStore = Depends(get_store),
):
    """List ledger entries, optionally for one customer or supplier."""
    transactions = await store.transactions.get_all()
    if entity_id is not None:
        transactions = [t for t in transactions if t.entity_id == entity_id]
    return transactions


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction: TransactionCreate,
    bookkeeper: Bookkeeper = Depends(get_bookkeeper),
):
    """Record a ledger entry and apply its balance effect."""
    return await bookkeeper.record_transaction(transaction)


@router.get("/{transaction_id}", response_model=TransactionRead)
async def get_transaction(transaction_id: str, store: DocumentStore = Depends(get_store)):
    """Get ledger entry by ID."""
    transaction = await store.transactions.get_by_id(transaction_id)
    if transaction is None:
        raise NotFoundError("Transaction", transaction_id)
    return transaction
