"""Marshaller — turns untrusted key/value input into validated, change-tracked documents.

Invariants:
    - beforeMarshal listeners receive the call's data/options dicts by reference;
      the marshaller re-reads both after dispatch
    - Validation sees every submitted key, before any access filtering
    - A field with a validation error is never written and never marked dirty
    - accessible_fields is an overlay for one call: the document keeps its own policy
    - field_list restricts writes to the listed keys; listed keys bypass the policy
    - is_new is read (to pick create/update rules), never written
    - merge() and merge_many() mutate caller documents in place and return them by reference
    - Validation failures, access rejections and id mismatches are NEVER raised

Design Decisions:
    - Fail fast on non-mapping rows: coercing or skipping malformed rows hides client bugs
    - Identity matching over positional matching in merge_many: row order and
      document order are both caller-controlled and may diverge
    - Envelopes built per call and discarded: no state survives between calls
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from docmarshal.core.document import Document
from docmarshal.core.domain_types import ErrorBag, MarshalEvent
from docmarshal.core.errors import (
    ErrorContext, InvalidArgumentError, InvalidOptionsError, InvalidRowError,
)
from docmarshal.core.identity import index_documents, normalize_id
from docmarshal.core.validation import run_validator
from docmarshal.schemas.options import MarshalOptions, parse_options
from docmarshal.services.collection import Collection

logger = logging.getLogger(__name__)


class Marshaller:
    """Stateless orchestration over one collection."""

    def __init__(self, collection: Collection):
        self._collection = collection

    # --- Entry points ------------------------------------------------------------

    def one(self, data: Mapping[str, Any], options: Mapping[str, Any] | None = None) -> Document:
        """Build one new document from a flat input record."""
        data, opts = self._prepare(data, options)
        errors = self._validate(data, opts, new_record=True)
        document = self._collection.new_document()
        return self._assign(document, data, opts, errors)

    def many(
        self, data_list: Iterable[Mapping[str, Any]], options: Mapping[str, Any] | None = None,
    ) -> list[Document]:
        """one() per row, same options, same order."""
        return [self.one(row, options) for row in self._rows(data_list)]

    def merge(
        self,
        document: Document,
        data: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
    ) -> Document:
        """Patch an existing document in place and return it."""
        if not isinstance(document, Document):
            raise InvalidArgumentError(
                f"merge() needs a Document, got {type(document).__name__}",
                "document",
                ErrorContext(collection=self._collection.name),
            )
        data, opts = self._prepare(data, options)
        errors = self._validate(data, opts, new_record=document.is_new())
        return self._assign(document, data, opts, errors)

    def merge_many(
        self,
        documents: Iterable[object],
        data_list: Iterable[Mapping[str, Any]],
        options: Mapping[str, Any] | None = None,
    ) -> list[Document]:
        """Reconcile rows against documents by id; one result per row, in row order.

        Rows whose id matches an indexed document are merged into it, every
        other row becomes a new document. Documents no row claimed are
        dropped from the result (not mutated, not deleted).
        """
        if isinstance(documents, (str, bytes, Mapping)) or not isinstance(documents, Iterable):
            raise InvalidArgumentError(
                f"merge_many() needs a list of documents, got {type(documents).__name__}",
                "documents",
                ErrorContext(collection=self._collection.name),
            )
        rows = self._rows(data_list)
        id_field = self._collection.id_field
        indexed = index_documents(documents, id_field)

        output: list[Document] = []
        matched = 0
        for row in rows:
            key = normalize_id(row.get(id_field))
            target = indexed.pop(key, None) if key is not None else None
            if target is None:
                output.append(self.one(row, options))
                continue
            matched += 1
            output.append(self.merge(target, row, options))

        logger.info(
            f"Reconciled {len(rows)} row(s) on '{self._collection.name}': "
            f"{matched} merged, {len(rows) - matched} new, {len(indexed)} dropped",
            extra={"collection": self._collection.name},
        )
        return output

    # --- Pipeline steps ----------------------------------------------------------

    def _prepare(
        self, data: object, options: object,
    ) -> tuple[dict[str, Any], MarshalOptions]:
        """Copy input into fresh envelopes, run beforeMarshal, parse the result."""
        if not isinstance(data, Mapping):
            raise InvalidRowError(data, context=ErrorContext(collection=self._collection.name))
        if options is not None and not isinstance(options, Mapping):
            raise InvalidOptionsError(
                f"Options must be a mapping, got {type(options).__name__}",
                context=ErrorContext(collection=self._collection.name),
            )
        data_envelope = _detach(data)
        options_envelope = _detach(options or {})
        if "validate" not in options_envelope and "ruleset" not in options_envelope:
            options_envelope["validate"] = True

        self._collection.dispatch_event(
            MarshalEvent.BEFORE_MARSHAL,
            {"data": data_envelope, "options": options_envelope},
        )
        return data_envelope, parse_options(options_envelope)

    def _validate(
        self, data: dict[str, Any], opts: MarshalOptions, new_record: bool,
    ) -> ErrorBag:
        selector = opts.ruleset
        if selector is False:
            return {}
        if selector is True:
            validator = self._collection.validator()
        elif isinstance(selector, str):
            validator = self._collection.validator(selector)
        else:
            validator = selector
        found = run_validator(validator, data, new_record)
        return {name: list(msgs) for name, msgs in found.items() if msgs}

    def _assign(
        self,
        document: Document,
        data: dict[str, Any],
        opts: MarshalOptions,
        errors: ErrorBag,
    ) -> Document:
        accepted = {name: value for name, value in data.items() if name not in errors}
        written: list[str] = []

        if opts.field_list is not None:
            for name in opts.field_list:
                if name in accepted:
                    document.set(name, accepted[name])
                    written.append(name)
        else:
            policy = document.access_policy.overlay(opts.accessible_fields)
            for name, value in accepted.items():
                if policy.allows(name):
                    document.set(name, value, guard=True, policy=policy)
                    written.append(name)

        document.set_errors(errors)
        rejected = [name for name in accepted if name not in written]
        logger.debug(
            f"Marshalled {'new' if document.is_new() else 'existing'} document "
            f"on '{self._collection.name}'",
            extra={
                "collection": self._collection.name,
                "fields": written,
                "rejected": rejected,
                "invalid": sorted(errors),
            },
        )
        return document

    def _rows(self, data_list: object) -> list[Mapping[str, Any]]:
        """Materialise a row list, failing fast on anything that is not a mapping."""
        if isinstance(data_list, (str, bytes, Mapping)) or not isinstance(data_list, Iterable):
            raise InvalidArgumentError(
                f"Expected a list of rows, got {type(data_list).__name__}",
                "data_list",
                ErrorContext(collection=self._collection.name),
            )
        rows = list(data_list)
        for index, row in enumerate(rows):
            if not isinstance(row, Mapping):
                raise InvalidRowError(
                    row, index, ErrorContext(collection=self._collection.name),
                )
        return rows


def _detach(value: Any) -> Any:
    """Copy nested dicts and lists so envelope mutation never reaches caller input.

    Other objects (validators, documents) stay shared.
    """
    if isinstance(value, Mapping):
        return {key: _detach(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_detach(item) for item in value]
    return value
