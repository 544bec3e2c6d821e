"""Document — mapping-backed record with dirty tracking, access control and errors.

Invariants:
    - get() never raises: unset fields read as None
    - Every successful set() marks the field dirty, even when the value is unchanged
    - A guarded set() on a non-accessible field is skipped silently (no write, no dirty mark)
    - is_new is only changed by the constructor, set_new() or the persistence layer
    - set_errors() replaces the error bag wholesale

Design Decisions:
    - Dict-backed, not a dataclass: the field set is not known statically
    - Write-occurred dirty semantics over value-changed: downstream persistence
      writes whatever the caller submitted
    - Equality is identity: two documents with equal fields are still distinct records
"""

from collections.abc import Iterable, Mapping

from docmarshal.core.access_policy import AccessPolicy
from docmarshal.core.domain_types import ErrorBag, FieldValue
from docmarshal.core.errors import InvalidArgumentError


class Document:
    """A mutable, dynamically-keyed record."""

    def __init__(
        self,
        fields: Mapping[str, FieldValue] | None = None,
        *,
        new: bool = True,
        accessible: AccessPolicy | Mapping[str, bool] | None = None,
        source: str | None = None,
        mark_clean: bool = False,
        guard: bool = False,
    ):
        self._fields: dict[str, FieldValue] = {}
        self._original: dict[str, FieldValue] = {}
        self._dirty: set[str] = set()
        self._errors: ErrorBag = {}
        self._new = new
        self._source = source
        if isinstance(accessible, AccessPolicy):
            self._access = accessible.copy()
        else:
            self._access = AccessPolicy(accessible)
        if fields:
            self.set(fields, guard=guard)
        if mark_clean:
            self.clean()

    # --- Field access -----------------------------------------------------------

    def get(self, field: str) -> FieldValue:
        return self._fields.get(field)

    def has(self, field: str) -> bool:
        return field in self._fields

    def set(
        self,
        field: str | Mapping[str, FieldValue],
        value: FieldValue = None,
        *,
        guard: bool = False,
        policy: AccessPolicy | None = None,
    ) -> "Document":
        """Write one field, or every pair of a mapping.

        With guard=True, fields the policy (the call-scoped `policy` when
        given, else the document's own) does not allow are skipped.
        """
        if isinstance(field, Mapping):
            for name, val in field.items():
                self.set(name, val, guard=guard, policy=policy)
            return self
        if not isinstance(field, str) or not field:
            raise InvalidArgumentError(
                f"Field name must be a non-empty string, got {field!r}", "field",
            )
        if guard and not (policy or self._access).allows(field):
            return self
        if field not in self._original and field in self._fields:
            self._original[field] = self._fields[field]
        self._fields[field] = value
        self._dirty.add(field)
        return self

    def unset(self, field: str | Iterable[str]) -> "Document":
        names = [field] if isinstance(field, str) else list(field)
        for name in names:
            self._fields.pop(name, None)
            self._original.pop(name, None)
            self._dirty.discard(name)
        return self

    def get_original(self, field: str) -> FieldValue:
        """Value before the first write since the last clean()."""
        if field in self._original:
            return self._original[field]
        return self._fields.get(field)

    def extract(self, fields: Iterable[str], only_dirty: bool = False) -> dict[str, FieldValue]:
        return {
            name: self._fields.get(name)
            for name in fields
            if not only_dirty or name in self._dirty
        }

    def to_dict(self) -> dict[str, FieldValue]:
        """Snapshot of every set field, in insertion order."""
        return dict(self._fields)

    def __getitem__(self, field: str) -> FieldValue:
        return self.get(field)

    def __contains__(self, field: object) -> bool:
        return field in self._fields

    # --- Access control ---------------------------------------------------------

    def set_accessible(self, fields: str | Iterable[str], allowed: bool) -> "Document":
        self._access.update(fields, allowed)
        return self

    def is_accessible(self, field: str) -> bool:
        return self._access.allows(field)

    @property
    def access_policy(self) -> AccessPolicy:
        """The document's persistent policy (overlay it, don't mutate it, per call)."""
        return self._access

    # --- Change tracking --------------------------------------------------------

    def dirty(self, field: str | None = None) -> bool:
        if field is None:
            return bool(self._dirty)
        return field in self._dirty

    def dirty_fields(self) -> list[str]:
        return [name for name in self._fields if name in self._dirty]

    def set_dirty(self, field: str, is_dirty: bool = True) -> "Document":
        if is_dirty:
            self._dirty.add(field)
        else:
            self._dirty.discard(field)
        return self

    def clean(self) -> "Document":
        """Forget dirty marks, original values and errors."""
        self._dirty.clear()
        self._original.clear()
        self._errors = {}
        return self

    def is_new(self) -> bool:
        return self._new

    def set_new(self, new: bool) -> "Document":
        self._new = bool(new)
        return self

    # --- Validation errors ------------------------------------------------------

    def errors(self, field: str | None = None) -> ErrorBag | list[str]:
        if field is None:
            return {name: list(msgs) for name, msgs in self._errors.items()}
        return list(self._errors.get(field, []))

    def set_errors(self, errors: Mapping[str, Iterable[str]]) -> "Document":
        self._errors = {name: list(msgs) for name, msgs in errors.items()}
        return self

    def has_errors(self) -> bool:
        return any(self._errors.values())

    # --- Metadata ---------------------------------------------------------------

    @property
    def source(self) -> str | None:
        return self._source

    def set_source(self, source: str | None) -> "Document":
        self._source = source
        return self

    def __repr__(self) -> str:
        state = "new" if self._new else "persisted"
        return f"<Document {self._source or '?'} {state} {self._fields!r}>"
