# store/provider.py
# Selects the document store implementation from settings.

from typing import Generator

from recipe_catalog.core.config import settings
from recipe_catalog.db.session import SessionLocal
from recipe_catalog.store.base import DocumentStore
from recipe_catalog.store.memory import MemoryDocumentStore
from recipe_catalog.store.sql import SqlDocumentStore

# Shared by every request when STORE_BACKEND is "memory"
memory_store = MemoryDocumentStore()


def get_store() -> Generator[DocumentStore, None, None]:
    """
    Request dependency yielding the configured store.
    The SQL store gets its own session which is closed afterward.
    """
    if settings.STORE_BACKEND == "memory":
        yield memory_store
        return

    db = SessionLocal()
    try:
        yield SqlDocumentStore(db)
    finally:
        db.close()
