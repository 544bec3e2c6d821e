"""Identity — normalises id values for reconciliation matching.

Invariants:
    - Ids are opaque: compared as strings, never parsed
    - None, "", booleans, mappings and lists are never usable identities
    - Only Document instances can be indexed; anything else is excluded

Design Decisions:
    - str() normalisation so a row id of 2 matches a stored "2"
      (form input and storage disagree on numeric ids)
"""

from collections.abc import Iterable, Mapping

from docmarshal.core.document import Document
from docmarshal.core.domain_types import DocumentId


def normalize_id(value: object) -> DocumentId | None:
    """Return the comparable identity of `value`, or None when unusable."""
    if value is None or isinstance(value, (bool, Mapping, list, tuple, set)):
        return None
    text = value if isinstance(value, str) else str(value)
    if not text:
        return None
    return DocumentId(text)


def index_documents(
    documents: Iterable[object], id_field: str = "id",
) -> dict[DocumentId, Document]:
    """Index documents by identity. First document wins on duplicate ids."""
    indexed: dict[DocumentId, Document] = {}
    for candidate in documents:
        if not isinstance(candidate, Document):
            continue
        key = normalize_id(candidate.get(id_field))
        if key is None or key in indexed:
            continue
        indexed[key] = candidate
    return indexed
