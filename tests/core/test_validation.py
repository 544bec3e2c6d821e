"""Rule-Based Validator — tests for built-in rules, custom rules, scopes and presence.

Tests cover:
    - Rules only run for fields present in the data
    - All failing rules reported in registration order
    - Custom callables returning bool or a message
    - create/update scoping via `on`
    - require_presence modes
    - Unknown rule names fail at add() time
    - run_validator() only passes new_record to validators that accept it
"""

import pytest

from docmarshal.core.errors import InvalidArgumentError
from docmarshal.core.repository_protocols import ValidatorLike
from docmarshal.core.validation import (
    DEFAULT_MESSAGE, PRESENCE_MESSAGE, Validator, run_validator,
)


def test_empty_validator_reports_nothing():
    assert Validator().validate({"title": "x"}) == {}


def test_validator_satisfies_protocol():
    assert isinstance(Validator(), ValidatorLike)


def test_numeric_rule_rejects_text():
    validator = Validator().add("title", "numbery", "numeric")
    assert validator.validate({"title": "Testing"}) == {"title": [DEFAULT_MESSAGE]}
    assert validator.validate({"title": "12.5"}) == {}
    assert validator.validate({"title": 3}) == {}


def test_numeric_rule_rejects_booleans():
    validator = Validator().add("flag", "numeric")
    assert "flag" in validator.validate({"flag": True})


def test_rule_name_doubles_as_builtin():
    validator = Validator().add("title", "not_blank")
    assert validator.validate({"title": "  "}) == {"title": [DEFAULT_MESSAGE]}


def test_rules_skip_absent_fields():
    validator = Validator().add("title", "numbery", "numeric")
    assert validator.validate({"body": "x"}) == {}


def test_all_failing_rules_reported_in_order():
    validator = (
        Validator()
        .add("title", "short", "max_length", length=3, message="too long")
        .add("title", "numbery", "numeric", message="not a number")
    )
    assert validator.validate({"title": "Testing"}) == {
        "title": ["too long", "not a number"],
    }


def test_custom_rule_message_from_return_value():
    def no_shouting(value, context):
        return value != value.upper() or "Stop shouting"

    validator = Validator().add("title", "no_shouting", no_shouting)
    assert validator.validate({"title": "HEY"}) == {"title": ["Stop shouting"]}
    assert validator.validate({"title": "hey"}) == {}


def test_custom_rule_receives_context():
    seen = {}

    def capture(value, context):
        seen.update(context)
        return True

    Validator().add("title", "capture", capture).validate({"title": "A"}, new_record=False)
    assert seen["field"] == "title"
    assert seen["new_record"] is False
    assert seen["data"] == {"title": "A"}


def test_rule_arguments_are_forwarded():
    validator = Validator().add("status", "allowed", "in_list", values=["draft", "live"])
    assert validator.validate({"status": "draft"}) == {}
    assert "status" in validator.validate({"status": "gone"})


def test_range_and_email_rules():
    validator = (
        Validator()
        .add("score", "range", lower=0, upper=10)
        .add("email", "email")
    )
    assert validator.validate({"score": "5", "email": "a@b.io"}) == {}
    errors = validator.validate({"score": 11, "email": "nope"})
    assert set(errors) == {"score", "email"}


def test_scoped_rules_follow_new_record_flag():
    validator = Validator().add("title", "create_only", "numeric", on="create")
    assert "title" in validator.validate({"title": "x"}, new_record=True)
    assert validator.validate({"title": "x"}, new_record=False) == {}


def test_require_presence_always():
    validator = Validator().require_presence("title")
    assert validator.validate({}) == {"title": [PRESENCE_MESSAGE]}
    assert validator.validate({"title": None}) == {}


def test_require_presence_on_create_only():
    validator = Validator().require_presence("title", "create", message="needed")
    assert validator.validate({}, new_record=True) == {"title": ["needed"]}
    assert validator.validate({}, new_record=False) == {}


def test_require_presence_can_be_switched_off():
    validator = Validator().require_presence("title").require_presence("title", False)
    assert validator.validate({}) == {}


def test_remove_rule_by_name():
    validator = (
        Validator()
        .add("title", "numbery", "numeric")
        .add("title", "short", "max_length", length=2)
    )
    validator.remove("title", "numbery")
    assert validator.validate({"title": "abc"}) == {"title": [DEFAULT_MESSAGE]}
    validator.remove("title")
    assert not validator.has("title")


def test_unknown_rule_name_fails_fast():
    with pytest.raises(InvalidArgumentError):
        Validator().add("title", "bogus")


def test_invalid_scope_fails_fast():
    with pytest.raises(InvalidArgumentError):
        Validator().add("title", "numeric", on="sometimes")


def test_validate_does_not_mutate_data():
    data = {"title": "x"}
    Validator().add("title", "numeric").validate(data)
    assert data == {"title": "x"}


def test_run_validator_passes_new_record_when_accepted():
    validator = Validator().add("title", "not_blank", on="update")
    assert run_validator(validator, {"title": ""}, new_record=True) == {}
    assert "title" in run_validator(validator, {"title": ""}, new_record=False)


def test_run_validator_calls_data_only_validators():
    class DataOnly:
        def validate(self, data):
            return {"title": ["seen"]}

    assert isinstance(DataOnly(), ValidatorLike)
    assert run_validator(DataOnly(), {"title": "x"}, new_record=False) == {"title": ["seen"]}


def test_run_validator_passes_new_record_through_kwargs():
    seen = {}

    class Flexible:
        def validate(self, data, **options):
            seen.update(options)
            return {}

    run_validator(Flexible(), {}, new_record=False)
    assert seen == {"new_record": False}
