"""Shared FastAPI dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.config import Settings, get_settings
from shopledger.core.db import get_db
from shopledger.services.bookkeeping import Bookkeeper
from shopledger.services.reconciler import Reconciler
from shopledger.store.base import DocumentStore
from shopledger.store.sql import SqlStore


async def get_store(db: AsyncSession = Depends(get_db)) -> DocumentStore:
    """Store over the request's database session."""
    return SqlStore(db)


def get_app_settings() -> Settings:
    return get_settings()


def get_bookkeeper(store: DocumentStore = Depends(get_store)) -> Bookkeeper:
    return Bookkeeper(store)


def get_reconciler(
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> Reconciler:
    return Reconciler(store, currency_symbol=settings.currency_symbol)
