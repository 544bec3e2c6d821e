"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - DocumentId is an opaque string: compared for equality, never parsed
    - FieldValue covers every value kind a document field may hold
    - Event names and rule scopes encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: compare equal to their wire values ("Model.beforeMarshal", "create")
"""

from enum import Enum
from typing import Any, NewType, Union


# ─── Identity Types ──────────────────────────────────────────────

DocumentId = NewType("DocumentId", str)


# ─── Value Types ─────────────────────────────────────────────────

# str | int | float | bool | None | nested mapping | list
FieldValue = Union[str, int, float, bool, None, dict[str, Any], list[Any]]

ErrorBag = dict[str, list[str]]


# ─── Constants ───────────────────────────────────────────────────

WILDCARD = "*"


# ─── Enums ───────────────────────────────────────────────────────

class MarshalEvent(str, Enum):
    """Hook points dispatched by the marshaller."""
    BEFORE_MARSHAL = "Model.beforeMarshal"


class RuleScope(str, Enum):
    """When a validation rule applies — to new records, updates, or both."""
    ALWAYS = "always"
    CREATE = "create"
    UPDATE = "update"

    def applies(self, new_record: bool) -> bool:
        if self is RuleScope.ALWAYS:
            return True
        return (self is RuleScope.CREATE) == new_record
