"""Rule-Based Validator — named per-field rules producing errors-by-field.

Invariants:
    - Rules run only for fields present in the data; presence is a separate rule
    - All failing rules of a field are reported, in registration order
    - validate() is PURE: never mutates the data it inspects
    - Unknown built-in rule names fail at add() time, not at validation time
    - run_validator() passes new_record only to validators whose validate() accepts it;
      a plain validate(data) ruleset is called with the data alone

Design Decisions:
    - Explicit dict of built-in rules over getattr lookup: every rule visible in one place
    - A rule returning a string uses it as the error message (custom rules can explain themselves)
"""

import inspect
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from docmarshal.core.domain_types import ErrorBag, RuleScope
from docmarshal.core.errors import InvalidArgumentError

if TYPE_CHECKING:
    from docmarshal.core.repository_protocols import ValidatorLike

RuleFn = Callable[..., "bool | str"]

_NUMERIC = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
_BOOLEAN_VALUES = (True, False, 0, 1, "0", "1", "true", "false")

DEFAULT_MESSAGE = "The provided value is invalid"
PRESENCE_MESSAGE = "This field is required"


def _numeric(value: Any, context: dict) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and bool(_NUMERIC.match(value))


def _not_blank(value: Any, context: dict) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _boolean(value: Any, context: dict) -> bool:
    return any(value is v or (type(value) is type(v) and value == v) for v in _BOOLEAN_VALUES)


def _max_length(value: Any, context: dict, length: int) -> bool:
    return isinstance(value, (str, list)) and len(value) <= length


def _min_length(value: Any, context: dict, length: int) -> bool:
    return isinstance(value, (str, list)) and len(value) >= length


def _in_list(value: Any, context: dict, values: Iterable[Any]) -> bool:
    return value in list(values)


def _regex(value: Any, context: dict, pattern: str) -> bool:
    return isinstance(value, str) and re.search(pattern, value) is not None


def _email(value: Any, context: dict) -> bool:
    return isinstance(value, str) and bool(_EMAIL.match(value))


def _range(value: Any, context: dict, lower: float, upper: float) -> bool:
    return _numeric(value, context) and lower <= float(value) <= upper


# ADR: adding a built-in rule means adding it to this dict
BUILTIN_RULES: dict[str, RuleFn] = {
    "numeric": _numeric,
    "not_blank": _not_blank,
    "boolean": _boolean,
    "max_length": _max_length,
    "min_length": _min_length,
    "in_list": _in_list,
    "regex": _regex,
    "email": _email,
    "range": _range,
}


@dataclass(frozen=True)
class Rule:
    """One named check bound to a field."""
    name: str
    check: RuleFn
    message: str | None = None
    scope: RuleScope = RuleScope.ALWAYS
    args: dict[str, Any] = field(default_factory=dict)

    def run(self, value: Any, context: dict) -> str | None:
        """Return the error message, or None when the value passes."""
        outcome = self.check(value, context, **self.args)
        if isinstance(outcome, str):
            return outcome
        if outcome:
            return None
        return self.message or DEFAULT_MESSAGE


class Validator:
    """Ordered per-field rulesets, satisfying the ValidatorLike protocol."""

    def __init__(self) -> None:
        self._rules: dict[str, list[Rule]] = {}
        self._presence: dict[str, tuple[RuleScope, str]] = {}

    def add(
        self,
        field_name: str,
        name: str,
        rule: str | RuleFn | None = None,
        *,
        message: str | None = None,
        on: str | RuleScope | None = None,
        **rule_args: Any,
    ) -> "Validator":
        """Register `rule` (a built-in name or a callable) under `name`.

        When `rule` is omitted, `name` itself must be a built-in rule.
        """
        check = self._resolve(rule if rule is not None else name)
        self._rules.setdefault(field_name, []).append(Rule(
            name=name, check=check, message=message,
            scope=self._scope(on), args=rule_args,
        ))
        return self

    def require_presence(
        self, field_name: str, mode: bool | str = True, message: str | None = None,
    ) -> "Validator":
        if mode is False:
            self._presence.pop(field_name, None)
            return self
        scope = RuleScope.ALWAYS if mode is True else self._scope(mode)
        self._presence[field_name] = (scope, message or PRESENCE_MESSAGE)
        return self

    def remove(self, field_name: str, name: str | None = None) -> "Validator":
        if name is None:
            self._rules.pop(field_name, None)
        else:
            kept = [r for r in self._rules.get(field_name, []) if r.name != name]
            self._rules[field_name] = kept
        return self

    def has(self, field_name: str) -> bool:
        return bool(self._rules.get(field_name)) or field_name in self._presence

    def validate(self, data: Mapping[str, Any], new_record: bool = True) -> ErrorBag:
        errors: ErrorBag = {}
        for field_name, (scope, message) in self._presence.items():
            if scope.applies(new_record) and field_name not in data:
                errors.setdefault(field_name, []).append(message)

        for field_name, rules in self._rules.items():
            if field_name not in data:
                continue
            context = {"data": data, "field": field_name, "new_record": new_record}
            for rule in rules:
                if not rule.scope.applies(new_record):
                    continue
                failure = rule.run(data[field_name], context)
                if failure is not None:
                    errors.setdefault(field_name, []).append(failure)
        return errors

    @staticmethod
    def _resolve(rule: str | RuleFn) -> RuleFn:
        if callable(rule):
            return rule
        if isinstance(rule, str) and rule in BUILTIN_RULES:
            return BUILTIN_RULES[rule]
        raise InvalidArgumentError(f"Unknown validation rule: {rule!r}", "rule")

    @staticmethod
    def _scope(on: str | RuleScope | None) -> RuleScope:
        if on is None:
            return RuleScope.ALWAYS
        try:
            return RuleScope(on)
        except ValueError:
            raise InvalidArgumentError(
                f"Rule scope must be 'create' or 'update', got {on!r}", "on",
            ) from None


def run_validator(
    validator: "ValidatorLike", data: Mapping[str, Any], new_record: bool,
) -> ErrorBag:
    """Call validator.validate(data), passing new_record only when it is accepted."""
    if _accepts_new_record(validator.validate):
        return validator.validate(data, new_record=new_record)
    return validator.validate(data)


def _accepts_new_record(method: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(method).parameters
    except (TypeError, ValueError):
        return False
    if "new_record" in params:
        return params["new_record"].kind is not inspect.Parameter.POSITIONAL_ONLY
    return any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values())
