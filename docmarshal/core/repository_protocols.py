"""Boundary Protocols — contracts between the engine and its collaborators.

Invariants:
    - Core NEVER imports a storage driver or a validation library directly
    - Validators see every submitted key, before access filtering
    - Implementations are provided by the host via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Synchronous protocols: marshalling is call-and-return, no suspension points
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from docmarshal.core.domain_types import DocumentId, ErrorBag


@runtime_checkable
class ValidatorLike(Protocol):
    """Validation capability: raw data in, errors-by-field out.

    validate() may also accept a `new_record` keyword to pick create or
    update rules; validators without it are called with the data alone.
    """
    def validate(self, data: Mapping[str, Any]) -> ErrorBag: ...


class DocumentStore(Protocol):
    """Read side of the storage engine — implemented by the host."""
    def find_by_id(
        self, collection: str, document_id: DocumentId,
    ) -> dict[str, Any] | None: ...
