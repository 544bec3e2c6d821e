"""Marshal Options — pydantic model for the options contract of every entry point.

Invariants:
    - field_list / fieldList: list of field names, or absent
    - accessible_fields / accessibleFields: field name -> bool, or absent
    - validate: bool, ruleset name, or a ValidatorLike object; defaults to True
    - Unknown keys are preserved (listeners may pass custom options)
    - Wrong types for recognised keys raise InvalidOptionsError, never coerce

Design Decisions:
    - Strict types over lax coercion: "yes" is not a bool for an access-control switch
    - Both camelCase and snake_case keys: request payloads and Python callers differ
"""

from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError,
)

from docmarshal.core.errors import InvalidOptionsError
from docmarshal.core.repository_protocols import ValidatorLike


class MarshalOptions(BaseModel):
    """Parsed options for one marshalling call."""

    model_config = ConfigDict(
        extra="allow", populate_by_name=True, arbitrary_types_allowed=True,
    )

    field_list: list[StrictStr] | None = Field(None, alias="fieldList")
    accessible_fields: dict[StrictStr, StrictBool] | None = Field(
        None, alias="accessibleFields",
    )
    ruleset: StrictBool | StrictStr | ValidatorLike = Field(True, alias="validate")

    @property
    def extras(self) -> dict[str, Any]:
        """Options the engine does not recognise, passed through untouched."""
        return dict(self.model_extra or {})


def parse_options(options: Mapping[str, Any]) -> MarshalOptions:
    """Parse the (possibly hook-mutated) options envelope."""
    try:
        return MarshalOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise InvalidOptionsError(
            "Invalid marshalling options",
            details=[
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        ) from exc
