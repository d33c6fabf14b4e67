# repositories/base.py
# Generic CRUD and pagination over one document store collection.

import logging
import math
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel

from recipe_catalog import schemas
from recipe_catalog.store.base import DocumentStore, FieldFilter, OrderBy

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuerySpec(Generic[T]):
    """
    A query split in two buckets: `filters` are sent to the store, while
    `memory_filters` are predicates on typed entities the store cannot express.
    """

    def __init__(self):
        self.filters: List[FieldFilter] = []
        self.memory_filters: List[Callable[[T], bool]] = []

    def where(self, field: str, operator: str, value: Any) -> "QuerySpec[T]":
        self.filters.append(FieldFilter(field, operator, value))
        return self

    def keep(self, predicate: Callable[[T], bool]) -> "QuerySpec[T]":
        self.memory_filters.append(predicate)
        return self

    @property
    def needs_memory_filtering(self) -> bool:
        return bool(self.memory_filters)

    def matches(self, entity: T) -> bool:
        return all(predicate(entity) for predicate in self.memory_filters)

    def __repr__(self):
        return f"QuerySpec(filters={self.filters}, memory_filters={len(self.memory_filters)})"


class BaseRepository(Generic[T]):
    collection_name: str
    model: Type[T]
    default_sort: schemas.SortOptions
    default_limit: int
    sort_fields: Sequence[str] = ()

    def __init__(self, store: DocumentStore):
        self.store = store

    def _to_entity(self, doc_id: str, data: Dict[str, Any]) -> T:
        return self.model.model_validate({**data, "id": doc_id})

    def order_by(self, sort: Optional[schemas.SortOptions] = None) -> OrderBy:
        sort = sort or self.default_sort
        if sort.field not in self.sort_fields:
            raise ValueError(f"Cannot sort {self.collection_name} by {sort.field}")
        return OrderBy(sort.field, sort.order == "desc")

    # --- CRUD ---

    def create(self, data: Dict[str, Any]) -> T:
        doc_id = uuid.uuid4().hex
        now = utcnow()
        document = {key: value for key, value in data.items() if key != "id"}
        document["createdAt"] = now
        document["updatedAt"] = now
        self.store.put(self.collection_name, doc_id, document)
        logger.debug(f"Created {self.collection_name}/{doc_id}")
        return self._to_entity(doc_id, document)

    def find_by_id(self, doc_id: str) -> Optional[T]:
        data = self.store.get(self.collection_name, doc_id)
        if data is None:
            return None
        return self._to_entity(doc_id, data)

    def exists(self, doc_id: str) -> bool:
        return self.store.get(self.collection_name, doc_id) is not None

    def update(self, doc_id: str, data: Dict[str, Any]) -> Optional[T]:
        """
        Merges `data` into the stored document. Returns None when the document
        does not exist, including when it is deleted before the write lands.
        """
        if "id" in data:
            raise ValueError("The id of a document cannot be changed")

        current = self.store.get(self.collection_name, doc_id)
        if current is None:
            return None

        # updatedAt must strictly increase even when the clock does not
        previous = self._to_entity(doc_id, current).updated_at
        now = utcnow()
        if now <= previous:
            now = previous + timedelta(microseconds=1)

        document = {**current, **data, "updatedAt": now}
        if not self.store.put(self.collection_name, doc_id, document, must_exist=True):
            logger.warning(f"{self.collection_name}/{doc_id} vanished before update")
            return None
        return self._to_entity(doc_id, document)

    def delete(self, doc_id: str) -> bool:
        deleted = self.store.delete(self.collection_name, doc_id)
        logger.debug(f"Delete {self.collection_name}/{doc_id}: existed={deleted}")
        return deleted

    # --- Queries ---

    def paginate(
        self,
        spec: QuerySpec[T],
        sort: Optional[schemas.SortOptions] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> schemas.Page[T]:
        """
        Returns one page of the entities matching every filter in `spec`.

        Without memory-only filters the store does the counting and the
        offset/limit. Otherwise the store's count and slice would ignore the
        memory filters, so the full store-filtered result is fetched, filtered
        here in sort order, counted and sliced.
        """
        limit = limit or self.default_limit
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")

        order_by = self.order_by(sort)
        offset = (page - 1) * limit

        if spec.needs_memory_filtering:
            logger.debug(f"Paginating {self.collection_name} in memory: {spec}")
            items = self.find_all(spec, sort)
            total = len(items)
            data = items[offset:offset + limit]
        else:
            total = self.store.count(self.collection_name, spec.filters)
            docs = self.store.query(self.collection_name, spec.filters, order_by, offset=offset, limit=limit)
            data = [self._to_entity(doc.id, doc.data) for doc in docs]

        return schemas.Page[self.model](
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )

    def find_all(self, spec: QuerySpec[T], sort: Optional[schemas.SortOptions] = None) -> List[T]:
        """Every entity matching `spec`, unpaginated."""
        docs = self.store.query(self.collection_name, spec.filters, self.order_by(sort))
        entities = (self._to_entity(doc.id, doc.data) for doc in docs)
        return [entity for entity in entities if spec.matches(entity)]

    def scan(self) -> Iterator[T]:
        """
        Linear scan over the whole collection, for comparisons the store has
        no operator for. Callers needing an index should replace their use of
        this method, not the method itself.
        """
        for doc in self.store.query(self.collection_name):
            yield self._to_entity(doc.id, doc.data)

    def delete_where(self, spec: QuerySpec[T]) -> int:
        """Deletes every match one by one; not atomic."""
        deleted = 0
        for entity in self.find_all(spec):
            if self.store.delete(self.collection_name, entity.id):
                deleted += 1
        logger.debug(f"Deleted {deleted} documents from {self.collection_name}")
        return deleted
