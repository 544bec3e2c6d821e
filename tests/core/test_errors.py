"""Error Hierarchy — verifies codes, statuses and the REST envelope."""

from docmarshal.core.errors import (
    DocumentNotFoundError, ErrorCategory, ErrorSeverity, InvalidArgumentError,
    InvalidOptionsError, InvalidRowError, MarshalError, StoreNotConfiguredError,
    UnknownRulesetError,
)


def test_contract_violations_are_400():
    for exc in (
        InvalidArgumentError("bad", "x"),
        InvalidRowError("nope", 2),
        InvalidOptionsError("bad options"),
    ):
        assert isinstance(exc, MarshalError)
        assert exc.http_status == 400
        assert exc.category is ErrorCategory.VALIDATION


def test_invalid_row_error_reports_index_and_type():
    exc = InvalidRowError("nope", 2)
    assert exc.index == 2
    assert exc.context.row_index == 2
    assert "index 2" in exc.message
    assert "str" in exc.message


def test_not_found_is_404_with_context():
    exc = DocumentNotFoundError("articles", "abc")
    assert exc.http_status == 404
    assert exc.context.collection == "articles"
    assert exc.context.document_id == "abc"


def test_configuration_errors_are_500():
    assert UnknownRulesetError("strict", "articles").http_status == 500
    store_error = StoreNotConfiguredError("articles")
    assert store_error.http_status == 500
    assert store_error.severity is ErrorSeverity.CRITICAL


def test_to_response_envelope():
    body = InvalidRowError("nope", 0).to_response()
    assert body["error"]["code"] == "INVALID_ROW"
    assert body["error"]["category"] == "validation"
    assert body["error"]["severity"] == "error"
    assert body["error"]["context"]["row_index"] == 0
    assert "timestamp" in body["error"]
