# store/base.py
# The document store contract the repositories are written against.

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

EQ = "=="
ARRAY_CONTAINS = "array-contains"
GTE = ">="
LTE = "<="

EQUALITY_OPERATORS = {EQ, ARRAY_CONTAINS}
RANGE_OPERATORS = {GTE, LTE}


class FieldFilter:
    def __init__(self, field: str, operator: str, value: Any):
        self.field = field
        self.operator = operator
        self.value = value

    def __repr__(self):
        return f"FieldFilter({self.field} {self.operator} {self.value})"

    def __eq__(self, other):
        if not isinstance(other, FieldFilter):
            return NotImplemented
        return (self.field, self.operator, self.value) == (other.field, other.operator, other.value)


class OrderBy(NamedTuple):
    field: str
    descending: bool = False


class Document(NamedTuple):
    id: str
    data: Dict[str, Any]


def normalize_value(value: Any) -> Any:
    """Naive datetimes are taken to be UTC so they compare with stored timestamps."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def validate_filters(filters: Sequence[FieldFilter]) -> None:
    """
    Rejects filter sets the store cannot run: unknown operators, or range
    filters spread over more than one field.
    """
    range_fields = set()
    for f in filters:
        if f.operator in RANGE_OPERATORS:
            range_fields.add(f.field)
        elif f.operator not in EQUALITY_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {f.operator}")
    if len(range_fields) > 1:
        raise ValueError(
            f"Range filters are only supported on a single field, got: {sorted(range_fields)}"
        )


class DocumentStore(ABC):
    """
    Key-addressed collections of JSON-like documents.

    Queries are a conjunction of `FieldFilter`s on top-level fields (equality,
    array membership, and >=/<= on at most one field), one sort field with the
    document id as tie breaker, and offset/limit. Counting is a separate call.
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def put(self, collection: str, doc_id: str, document: Dict[str, Any], must_exist: bool = False) -> bool:
        """
        Writes the whole document. With must_exist the write only happens if the
        document is already there; the return value says whether it was written.
        """

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> bool:
        """Returns whether a document existed."""

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[OrderBy] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Document]:
        ...

    @abstractmethod
    def count(self, collection: str, filters: Sequence[FieldFilter] = ()) -> int:
        ...
