"""Identity — tests for id normalisation and document indexing."""

from docmarshal.core.document import Document
from docmarshal.core.identity import index_documents, normalize_id


def test_strings_are_used_as_is():
    assert normalize_id("abc") == "abc"


def test_numbers_match_their_string_form():
    assert normalize_id(2) == normalize_id("2")


def test_unusable_identities():
    for value in (None, "", True, False, {"a": 1}, [1], ()):
        assert normalize_id(value) is None, value


def test_index_skips_non_documents_and_missing_ids():
    with_id = Document({"id": "a"})
    without_id = Document({"title": "no id"})
    indexed = index_documents(["string", {"id": "a"}, without_id, with_id])
    assert indexed == {"a": with_id}


def test_index_keeps_first_document_on_duplicate_ids():
    first = Document({"id": "a", "n": 1})
    second = Document({"id": "a", "n": 2})
    assert index_documents([first, second])["a"] is first


def test_index_honours_custom_id_field():
    doc = Document({"_id": "x"})
    assert index_documents([doc], id_field="_id") == {"x": doc}
