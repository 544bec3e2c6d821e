"""In-Memory Document Store — dict-backed DocumentStore for fixtures and local use.

Invariants:
    - Rows are copied in and out: callers never share a dict with the store
    - Keys are normalised ids, so 2 and "2" address the same row

Design Decisions:
    - Read side only: the engine never saves, so the store only needs load() for seeding
"""

from collections.abc import Iterable, Mapping
from copy import deepcopy
from typing import Any

from docmarshal.core.domain_types import DocumentId
from docmarshal.core.errors import InvalidArgumentError
from docmarshal.core.identity import normalize_id


class InMemoryDocumentStore:
    """collection name -> id -> row."""

    def __init__(self, id_field: str = "id"):
        self.id_field = id_field
        self._rows: dict[str, dict[DocumentId, dict[str, Any]]] = {}

    def load(self, collection: str, rows: Iterable[Mapping[str, Any]]) -> "InMemoryDocumentStore":
        """Seed rows for a collection (fixture style)."""
        bucket = self._rows.setdefault(collection, {})
        for row in rows:
            key = normalize_id(row.get(self.id_field))
            if key is None:
                raise InvalidArgumentError(
                    f"Fixture row for '{collection}' has no usable '{self.id_field}'",
                    "rows",
                )
            bucket[key] = deepcopy(dict(row))
        return self

    def find_by_id(self, collection: str, document_id: DocumentId) -> dict[str, Any] | None:
        row = self._rows.get(collection, {}).get(document_id)
        return deepcopy(row) if row is not None else None

    def count(self, collection: str) -> int:
        return len(self._rows.get(collection, {}))
