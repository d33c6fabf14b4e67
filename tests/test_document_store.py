import threading
from datetime import datetime, timedelta, timezone

import pytest

from recipe_catalog import schemas
from recipe_catalog.repositories.recipes import RecipeRepository
from recipe_catalog.store.base import ARRAY_CONTAINS, EQ, GTE, LTE, FieldFilter, OrderBy
from recipe_catalog.store.sql import encode
from tests.helpers import recipe_document


def test_encode_timestamps_sort_chronologically():
    earlier = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    later = earlier + timedelta(microseconds=1)
    assert encode(earlier) < encode(later)
    # Naive values are taken as UTC
    assert encode(datetime(2024, 1, 1, 9, 0)) == encode(earlier)
    assert encode({"a": [earlier]}) == {"a": ["2024-01-01T09:00:00.000000+00:00"]}


def test_put_get_delete(store):
    assert store.get("things", "a") is None
    store.put("things", "a", {"name": "apple", "tags": ["red"]})

    assert store.get("things", "a") == {"name": "apple", "tags": ["red"]}
    assert store.delete("things", "a") is True
    assert store.delete("things", "a") is False


def test_put_must_exist(store):
    assert store.put("things", "a", {"name": "apple"}, must_exist=True) is False
    assert store.get("things", "a") is None

    store.put("things", "a", {"name": "apple"})
    assert store.put("things", "a", {"name": "pear"}, must_exist=True) is True
    assert store.get("things", "a") == {"name": "pear"}


def test_returned_documents_are_copies(store):
    store.put("things", "a", {"tags": ["red"]})
    store.get("things", "a")["tags"].append("green")
    assert store.get("things", "a") == {"tags": ["red"]}


def test_collections_are_separate(store):
    store.put("things", "a", {"n": 1})
    store.put("others", "a", {"n": 2})
    assert store.count("things") == 1
    assert store.get("others", "a") == {"n": 2}


def test_filters(store):
    store.put("things", "a", {"kind": "fruit", "tags": ["red", "sweet"], "weight": 100})
    store.put("things", "b", {"kind": "fruit", "tags": ["reddish"], "weight": 200})
    store.put("things", "c", {"kind": "veg", "tags": ["green"], "weight": 300})

    def ids(filters):
        return [doc.id for doc in store.query("things", filters)]

    assert ids([FieldFilter("kind", EQ, "fruit")]) == ["a", "b"]
    # Whole elements only, never substrings
    assert ids([FieldFilter("tags", ARRAY_CONTAINS, "red")]) == ["a"]
    assert ids([FieldFilter("weight", GTE, 200)]) == ["b", "c"]
    assert ids([FieldFilter("weight", GTE, 150), FieldFilter("weight", LTE, 250)]) == ["b"]
    assert store.count("things", [FieldFilter("kind", EQ, "fruit"), FieldFilter("weight", LTE, 100)]) == 1


def test_range_on_two_fields_is_rejected(store):
    with pytest.raises(ValueError):
        store.query("things", [FieldFilter("a", GTE, 1), FieldFilter("b", LTE, 2)])
    with pytest.raises(ValueError):
        store.count("things", [FieldFilter("a", "!=", 1)])


def test_order_offset_limit(store):
    for doc_id, weight in [("a", 3), ("b", 1), ("c", 2), ("d", 2)]:
        store.put("things", doc_id, {"weight": weight})

    ascending = store.query("things", order_by=OrderBy("weight"))
    assert [doc.id for doc in ascending] == ["b", "c", "d", "a"]

    descending = store.query("things", order_by=OrderBy("weight", descending=True), offset=1, limit=2)
    assert [doc.id for doc in descending] == ["d", "c"]


def test_timestamp_range(store):
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    for i in range(3):
        store.put("things", f"t{i}", {"createdAt": base + timedelta(days=i)})

    found = store.query("things", [FieldFilter("createdAt", GTE, base + timedelta(days=1))])
    assert [doc.id for doc in found] == ["t1", "t2"]


def test_memory_store_concurrent_readers_and_writer(memory_document_store):
    repo = RecipeRepository(memory_document_store)
    for i in range(500):
        repo.create(recipe_document(title=f"Recipe {i}"))

    errors = []
    done = threading.Event()

    def write():
        try:
            while not done.is_set():
                repo.create(recipe_document())
        except Exception as e:
            errors.append(repr(e))

    def read():
        try:
            for _ in range(50):
                repo.find_page()
                repo.find_page(schemas.RecipeFilterOptions(search="recipe 1"))
        except Exception as e:
            errors.append(repr(e))

    writer = threading.Thread(target=write)
    readers = [threading.Thread(target=read) for _ in range(4)]
    writer.start()
    for reader in readers:
        reader.start()
    for reader in readers:
        reader.join()
    done.set()
    writer.join()

    assert errors == []
    assert repo.find_page().total > 500
