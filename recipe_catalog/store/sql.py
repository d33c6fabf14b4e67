# store/sql.py
# Document store on top of a single SQLAlchemy table of JSON documents.

import copy
import enum
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import String, asc, delete, desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_catalog.db.models import DocumentRecord
from recipe_catalog.store.base import (
    ARRAY_CONTAINS, EQ, GTE, LTE,
    Document, DocumentStore, FieldFilter, OrderBy,
    normalize_value, validate_filters,
)

logger = logging.getLogger(__name__)

# Fixed width UTC timestamps so that string comparison is chronological.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


def encode(value: Any) -> Any:
    """Converts a document into something the JSON column can hold."""
    if isinstance(value, datetime):
        return normalize_value(value).astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, dict):
        return {key: encode(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode(item) for item in value]
    return value


def _field(field: str, type_=None):
    if type_ is not None:
        return func.json_extract(DocumentRecord.data, f"$.{field}", type_=type_)
    return func.json_extract(DocumentRecord.data, f"$.{field}")


def _like_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _clause(f: FieldFilter):
    value = encode(f.value)
    if f.operator == EQ:
        return _field(f.field) == value
    if f.operator == ARRAY_CONTAINS:
        # json_extract on an array returns its compact JSON text; the quoted
        # element can only appear there as a whole array entry.
        pattern = f"%{_like_escape(json.dumps(value))}%"
        return _field(f.field, String).like(pattern, escape="\\")
    if f.operator == GTE:
        return _field(f.field) >= value
    if f.operator == LTE:
        return _field(f.field) <= value
    raise ValueError(f"Unsupported filter operator: {f.operator}")


class SqlDocumentStore(DocumentStore):
    """
    Stores every collection in the `documents` table. Filters and sorting are
    compiled to `json_extract` expressions (SQLite JSON1 / MySQL).
    Each mutating call commits on its own; there are no multi-document
    transactions.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Document store commit failed")
            self.db.rollback()
            raise

    def _where(self, collection: str, filters: Sequence[FieldFilter]):
        validate_filters(filters)
        return [DocumentRecord.collection == collection, *(_clause(f) for f in filters)]

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        record = self.db.get(DocumentRecord, (collection, doc_id))
        if record is None:
            return None
        return copy.deepcopy(record.data)

    def put(self, collection: str, doc_id: str, document: Dict[str, Any], must_exist: bool = False) -> bool:
        data = encode(document)
        if must_exist:
            result = self.db.execute(
                update(DocumentRecord)
                .where(DocumentRecord.collection == collection, DocumentRecord.id == doc_id)
                .values(data=data)
                .execution_options(synchronize_session=False)
            )
            self._commit()
            return result.rowcount > 0

        self.db.merge(DocumentRecord(collection=collection, id=doc_id, data=data))
        self._commit()
        return True

    def delete(self, collection: str, doc_id: str) -> bool:
        result = self.db.execute(
            delete(DocumentRecord)
            .where(DocumentRecord.collection == collection, DocumentRecord.id == doc_id)
            .execution_options(synchronize_session=False)
        )
        self._commit()
        return result.rowcount > 0

    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[OrderBy] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Document]:
        logger.debug(f"Querying {collection} filters={list(filters)} order_by={order_by} offset={offset} limit={limit}")
        stmt = select(DocumentRecord).where(*self._where(collection, filters))

        if order_by is not None:
            direction = desc if order_by.descending else asc
            stmt = stmt.order_by(direction(_field(order_by.field)), direction(DocumentRecord.id))
        else:
            stmt = stmt.order_by(DocumentRecord.id)

        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        records = self.db.execute(stmt).scalars().all()
        return [Document(record.id, copy.deepcopy(record.data)) for record in records]

    def count(self, collection: str, filters: Sequence[FieldFilter] = ()) -> int:
        stmt = select(func.count()).select_from(DocumentRecord).where(*self._where(collection, filters))
        return self.db.execute(stmt).scalar_one()
