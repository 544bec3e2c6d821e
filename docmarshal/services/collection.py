"""Collection — named source of documents, rulesets and marshalling hooks.

Invariants:
    - Every document a collection builds gets a COPY of its access defaults
    - The default ruleset exists lazily (empty); other names must be registered
    - get() returns persisted documents: is_new False, nothing dirty
    - A collection never saves or deletes — persistence belongs to the host

Design Decisions:
    - Protected document variants are configuration (an access policy handed to
      the factory), not subclasses
    - Store injected as a DocumentStore protocol: no driver import in the engine
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, TYPE_CHECKING

from docmarshal.config import get_settings
from docmarshal.core.access_policy import AccessPolicy
from docmarshal.core.document import Document
from docmarshal.core.domain_types import FieldValue
from docmarshal.core.errors import (
    DocumentNotFoundError, StoreNotConfiguredError, UnknownRulesetError,
)
from docmarshal.core.identity import normalize_id
from docmarshal.core.repository_protocols import DocumentStore, ValidatorLike
from docmarshal.core.validation import Validator
from docmarshal.services.event_manager import Event, EventManager

if TYPE_CHECKING:
    from docmarshal.services.marshaller import Marshaller

logger = logging.getLogger(__name__)


class Collection:
    """Configuration hub the marshaller reads from."""

    def __init__(
        self,
        name: str,
        *,
        store: DocumentStore | None = None,
        accessible: AccessPolicy | Mapping[str, bool] | None = None,
        id_field: str | None = None,
        events: EventManager | None = None,
    ):
        settings = get_settings()
        self.name = name
        self.id_field = id_field or settings.identity_field
        self.default_ruleset = settings.default_ruleset
        self._store = store
        if isinstance(accessible, AccessPolicy):
            self._access = accessible.copy()
        else:
            self._access = AccessPolicy(accessible)
        self._events = events or EventManager()
        self._validators: dict[str, ValidatorLike] = {}

    # --- Documents -----------------------------------------------------------

    def new_document(
        self,
        fields: Mapping[str, FieldValue] | None = None,
        *,
        new: bool = True,
        mark_clean: bool = False,
    ) -> Document:
        return Document(
            fields, new=new, accessible=self._access,
            source=self.name, mark_clean=mark_clean,
        )

    @property
    def access_policy(self) -> AccessPolicy:
        return self._access

    def get(self, document_id: object) -> Document:
        """Load a persisted document by id."""
        if self._store is None:
            raise StoreNotConfiguredError(self.name)
        key = normalize_id(document_id)
        row = self._store.find_by_id(self.name, key) if key is not None else None
        if row is None:
            raise DocumentNotFoundError(self.name, str(document_id))
        logger.debug(
            f"Loaded document {key} from '{self.name}'",
            extra={"collection": self.name, "document_id": key},
        )
        return self.new_document(row, new=False, mark_clean=True)

    # --- Validation ------------------------------------------------------------

    def validator(self, name: str | None = None) -> ValidatorLike:
        name = name or self.default_ruleset
        if name not in self._validators:
            if name != self.default_ruleset:
                raise UnknownRulesetError(name, self.name)
            self._validators[name] = Validator()
        return self._validators[name]

    def set_validator(self, name: str, validator: ValidatorLike) -> "Collection":
        self._validators[name] = validator
        return self

    def has_validator(self, name: str) -> bool:
        return name in self._validators

    # --- Events ------------------------------------------------------------------

    def event_manager(self) -> EventManager:
        return self._events

    def dispatch_event(self, name: str, payload: dict[str, Any]) -> Event:
        return self._events.dispatch(Event(name, subject=self, payload=payload))

    # --- Marshalling shortcuts ----------------------------------------------------

    def marshaller(self) -> "Marshaller":
        from docmarshal.services.marshaller import Marshaller
        return Marshaller(self)

    def new_entity(self, data: Mapping[str, Any], options: Mapping[str, Any] | None = None) -> Document:
        return self.marshaller().one(data, options)

    def new_entities(
        self, data: Sequence[Mapping[str, Any]], options: Mapping[str, Any] | None = None,
    ) -> list[Document]:
        return self.marshaller().many(data, options)

    def patch_entity(
        self, document: Document, data: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> Document:
        return self.marshaller().merge(document, data, options)

    def patch_entities(
        self, documents: Sequence[object], data: Sequence[Mapping[str, Any]],
        options: Mapping[str, Any] | None = None,
    ) -> list[Document]:
        return self.marshaller().merge_many(documents, data, options)

    def __repr__(self) -> str:
        return f"Collection({self.name!r})"

