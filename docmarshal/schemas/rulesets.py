"""Schema Rulesets — a pydantic model used as a validation ruleset.

Invariants:
    - Errors keyed by the top-level field of each pydantic error location
    - Model-level errors (empty location) are keyed under SCHEMA_ERROR_KEY
    - For updates (new_record=False) "missing" errors are dropped: partial
      updates only carry the fields that change
    - The model is only used to check the data; coerced values are discarded

Design Decisions:
    - Wrapper instead of subclassing Validator: the two rulesets share only the
      ValidatorLike protocol, not an implementation
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from docmarshal.core.domain_types import ErrorBag

SCHEMA_ERROR_KEY = "_schema"


class SchemaValidator:
    """Adapts a pydantic model class to the ValidatorLike protocol."""

    def __init__(self, model: type[BaseModel]):
        self.model = model

    def validate(self, data: Mapping[str, Any], new_record: bool = True) -> ErrorBag:
        try:
            self.model.model_validate(dict(data))
        except ValidationError as exc:
            return _collect(exc, new_record)
        return {}


def _collect(exc: ValidationError, new_record: bool) -> ErrorBag:
    errors: ErrorBag = {}
    for err in exc.errors():
        if not new_record and err["type"] == "missing":
            continue
        loc = err["loc"]
        key = str(loc[0]) if loc else SCHEMA_ERROR_KEY
        errors.setdefault(key, []).append(err["msg"])
    return errors
