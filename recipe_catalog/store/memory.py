# store/memory.py
# In-process document store used for tests and local development.

import copy
import logging
import threading
from typing import Any, Dict, List, Optional, Sequence

from recipe_catalog.store.base import (
    ARRAY_CONTAINS, EQ, GTE, LTE,
    Document, DocumentStore, FieldFilter, OrderBy,
    normalize_value, validate_filters,
)

logger = logging.getLogger(__name__)


def _matches(data: Dict[str, Any], f: FieldFilter) -> bool:
    value = normalize_value(f.value)
    current = data.get(f.field)
    if f.operator == EQ:
        return current == value
    if f.operator == ARRAY_CONTAINS:
        return isinstance(current, list) and value in current
    if current is None:
        return False
    if f.operator == GTE:
        return current >= value
    if f.operator == LTE:
        return current <= value
    raise ValueError(f"Unsupported filter operator: {f.operator}")


class MemoryDocumentStore(DocumentStore):
    """
    Dictionary backed store with the same query contract as the SQL store.
    Documents are copied on the way in and out so callers never share state
    with the store.

    One instance is shared by every request thread, so each call holds the
    store lock while it touches the dictionaries.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            data = self._collection(collection).get(doc_id)
            return copy.deepcopy(data) if data is not None else None

    def put(self, collection: str, doc_id: str, document: Dict[str, Any], must_exist: bool = False) -> bool:
        document = copy.deepcopy(document)
        with self._lock:
            docs = self._collection(collection)
            if must_exist and doc_id not in docs:
                return False
            docs[doc_id] = document
            return True

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            return self._collection(collection).pop(doc_id, None) is not None

    def _select(self, collection: str, filters: Sequence[FieldFilter]) -> List[Document]:
        """Matching documents, deep-copied under the lock."""
        validate_filters(filters)
        with self._lock:
            return [
                Document(doc_id, copy.deepcopy(data))
                for doc_id, data in self._collection(collection).items()
                if all(_matches(data, f) for f in filters)
            ]

    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[OrderBy] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Document]:
        logger.debug(f"Querying {collection} filters={list(filters)} order_by={order_by} offset={offset} limit={limit}")
        docs = self._select(collection, filters)

        if order_by is not None:
            # Missing values sort first ascending and last descending, like SQL NULLs
            def sort_key(doc: Document):
                value = doc.data.get(order_by.field)
                return (value is not None, value, doc.id)

            docs.sort(key=sort_key, reverse=order_by.descending)
        else:
            docs.sort(key=lambda doc: doc.id)

        end = None if limit is None else offset + limit
        return docs[offset:end]

    def count(self, collection: str, filters: Sequence[FieldFilter] = ()) -> int:
        validate_filters(filters)
        with self._lock:
            return sum(
                1 for data in self._collection(collection).values()
                if all(_matches(data, f) for f in filters)
            )

    def clear(self) -> None:
        with self._lock:
            self._collections.clear()
