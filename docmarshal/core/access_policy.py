"""Access Policy — per-field write permissions for mass assignment.

Invariants:
    - Lookup is two-tier: exact field override first, then the "*" wildcard
    - The wildcard defaults to True unless a restricted policy is built
    - overlay() returns a NEW policy; the base policy is never mutated by it

Design Decisions:
    - Plain dict state instead of attribute interception: the policy is ordinary
      data that can be copied, compared and logged
    - "Protected" documents are configuration, not subclasses: restricted()
      builds the whitelist policy a collection hands to its document factory
"""

from collections.abc import Iterable, Mapping

from docmarshal.core.domain_types import WILDCARD
from docmarshal.core.errors import InvalidArgumentError


class AccessPolicy:
    """Field name -> bool, with a wildcard fallback."""

    def __init__(self, rules: Mapping[str, bool] | None = None):
        self._rules: dict[str, bool] = {WILDCARD: True}
        if rules:
            for name, allowed in rules.items():
                self.update(name, allowed)

    @classmethod
    def restricted(cls, fields: Iterable[str], id_field: str = "id") -> "AccessPolicy":
        """Whitelist policy: only `fields` (plus the identity field) are writable."""
        policy = cls({WILDCARD: False})
        policy.update([*fields, id_field], True)
        return policy

    def allows(self, field: str) -> bool:
        if field in self._rules:
            return self._rules[field]
        return self._rules.get(WILDCARD, False)

    def update(self, fields: str | Iterable[str], allowed: bool) -> None:
        """Set the permission for one field, a list of fields, or "*"."""
        if not isinstance(allowed, bool):
            raise InvalidArgumentError(
                f"Accessibility must be a bool, got {type(allowed).__name__}",
                "allowed",
            )
        names = [fields] if isinstance(fields, str) else list(fields)
        for name in names:
            if not isinstance(name, str):
                raise InvalidArgumentError(
                    f"Field names must be strings, got {type(name).__name__}",
                    "fields",
                )
            self._rules[name] = allowed

    def overlay(self, rules: Mapping[str, bool] | None) -> "AccessPolicy":
        """Call-scoped copy with `rules` applied on top."""
        layered = self.copy()
        for name, allowed in (rules or {}).items():
            layered.update(name, allowed)
        return layered

    def copy(self) -> "AccessPolicy":
        clone = AccessPolicy.__new__(AccessPolicy)
        clone._rules = dict(self._rules)
        return clone

    def as_dict(self) -> dict[str, bool]:
        return dict(self._rules)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccessPolicy):
            return NotImplemented
        return self._rules == other._rules

    def __repr__(self) -> str:
        return f"AccessPolicy({self._rules!r})"
