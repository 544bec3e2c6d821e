"""In-Memory Document Store — seeding, lookup and copy isolation."""

import pytest

from docmarshal.core.errors import InvalidArgumentError
from docmarshal.infrastructure.memory_store import InMemoryDocumentStore


def test_find_by_id_returns_copy():
    store = InMemoryDocumentStore().load("articles", [{"id": "a", "tags": ["x"]}])
    row = store.find_by_id("articles", "a")
    row["tags"].append("y")
    assert store.find_by_id("articles", "a") == {"id": "a", "tags": ["x"]}


def test_missing_rows_and_collections():
    store = InMemoryDocumentStore().load("articles", [{"id": "a"}])
    assert store.find_by_id("articles", "b") is None
    assert store.find_by_id("comments", "a") is None


def test_numeric_ids_are_normalised():
    store = InMemoryDocumentStore().load("articles", [{"id": 7, "title": "x"}])
    assert store.find_by_id("articles", "7") == {"id": 7, "title": "x"}
    assert store.count("articles") == 1


def test_rows_without_id_rejected():
    with pytest.raises(InvalidArgumentError):
        InMemoryDocumentStore().load("articles", [{"title": "no id"}])


def test_custom_id_field():
    store = InMemoryDocumentStore(id_field="_id").load("posts", [{"_id": "p"}])
    assert store.find_by_id("posts", "p") == {"_id": "p"}
