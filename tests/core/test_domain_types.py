"""Domain Types — verifies enum wire values and rule scopes."""

from docmarshal.core.domain_types import DocumentId, MarshalEvent, RuleScope, WILDCARD


def test_document_id_wraps_str():
    assert DocumentId("abc") == "abc"


def test_before_marshal_event_name():
    assert MarshalEvent.BEFORE_MARSHAL == "Model.beforeMarshal"


def test_wildcard_symbol():
    assert WILDCARD == "*"


def test_rule_scope_applies():
    assert RuleScope.ALWAYS.applies(True)
    assert RuleScope.ALWAYS.applies(False)
    assert RuleScope.CREATE.applies(True)
    assert not RuleScope.CREATE.applies(False)
    assert RuleScope.UPDATE.applies(False)
    assert not RuleScope.UPDATE.applies(True)
