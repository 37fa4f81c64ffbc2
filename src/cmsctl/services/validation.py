"""ValidationService — run payloads through the schema validator.

This is the request-layer collaborator of the validator: it resolves the
content type, decodes the payload, calls the pure domain functions, turns
the outcome into a ServiceResult, and notifies observers.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from cmsctl.domain.errors import SchemaError
from cmsctl.domain.ids import validate_uuid
from cmsctl.domain.schema import ContentTypeSchema
from cmsctl.domain.validation import ValidationFailure, validate, validate_uniform
from cmsctl.infrastructure.schema_store import SCHEMA_SUFFIXES, DocumentError, load_schema
from cmsctl.services.base import BaseService
from cmsctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _reject_constant(token: str) -> Any:
    """Refuse the non-standard ``NaN`` and ``Infinity`` literals."""
    msg = f"{token} is not a JSON value"
    raise ValueError(msg)


class ValidationService(BaseService):
    """Validates content payloads and identifiers."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate_content(self, type_ref: str, payload: Any) -> ServiceResult:
        """Validate *payload* against the content type named by *type_ref*.

        *type_ref* is either a path to a schema document or an id/name known
        to the schema store. *payload* is a mapping or raw JSON text.
        """
        op = "validate"
        resolved = self._resolve_schema(op, type_ref)
        if isinstance(resolved, ServiceResult):
            return resolved
        schema = resolved

        data = self._decode_payload(op, payload)
        if isinstance(data, ServiceResult):
            return data

        outcome = validate(
            schema, data, media_max_bytes=self._settings.validation.media_max_bytes
        )
        warnings: list[str] = []
        if isinstance(outcome, ValidationFailure):
            self._notify(schema.name, outcome, warnings)
            return self._failure_result(op, outcome, warnings, content_type=schema.name)

        self._notify(schema.name, None, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "content_type": schema.name,
                "content_type_id": schema.id,
                "record": outcome,
            },
            warnings=warnings,
        )

    def validate_bulk(
        self,
        payload: Any,
        kind: str,
        *,
        enum_options: Sequence[str] | None = None,
    ) -> ServiceResult:
        """Validate every key of *payload* as a required field of *kind*."""
        op = "validate_bulk"
        data = self._decode_payload(op, payload)
        if isinstance(data, ServiceResult):
            return data

        try:
            outcome = validate_uniform(
                data,
                kind,
                enum_options=enum_options,
                media_max_bytes=self._settings.validation.media_max_bytes,
            )
        except SchemaError as exc:
            return self._fail(op, "INVALID_KIND", str(exc), kind=kind)

        label = f"<bulk:{kind}>"
        warnings: list[str] = []
        if isinstance(outcome, ValidationFailure):
            self._notify(label, outcome, warnings)
            return self._failure_result(op, outcome, warnings, kind=kind)

        self._notify(label, None, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"kind": kind, "count": len(outcome), "record": outcome},
            warnings=warnings,
        )

    def check_id(self, value: str) -> ServiceResult:
        """Check that *value* is a canonical lowercase UUID."""
        op = "check_id"
        if not validate_uuid(value):
            return self._fail(op, "INVALID_ID", f"Invalid UUID format: {value}", id=value)
        return ServiceResult(ok=True, op=op, data={"id": value})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_schema(self, op: str, type_ref: str) -> ContentTypeSchema | ServiceResult:
        path = Path(type_ref)
        if path.suffix.lower() in SCHEMA_SUFFIXES and path.is_file():
            try:
                return load_schema(path)
            except DocumentError as exc:
                return self._fail(op, "INVALID_DOCUMENT", str(exc), path=str(path))
            except SchemaError as exc:
                return self._fail(op, "INVALID_SCHEMA", str(exc), path=str(path))

        schema = self.store.get(type_ref)
        if schema is None:
            return self._fail(
                op,
                "CONTENT_TYPE_NOT_FOUND",
                f"Content type not found: {type_ref}",
                content_type=type_ref,
                schema_dir=str(self.store.directory),
            )
        return schema

    def _decode_payload(self, op: str, payload: Any) -> Mapping[str, Any] | ServiceResult:
        if isinstance(payload, str | bytes):
            try:
                payload = json.loads(payload, parse_constant=_reject_constant)
            except ValueError as exc:
                return self._fail(op, "INVALID_PAYLOAD", f"Payload is not valid JSON: {exc}")
        if not isinstance(payload, Mapping):
            return self._fail(op, "INVALID_PAYLOAD", "Payload must be a JSON object")
        return payload

    def _notify(
        self,
        content_type: str,
        failure: ValidationFailure | None,
        warnings: list[str],
    ) -> None:
        if failure is None:
            logger.debug("Payload validated against %s", content_type)
        else:
            logger.debug(
                "Payload rejected by %s: field=%s code=%s",
                content_type,
                failure.field,
                failure.code,
            )
        self._dispatch_event(
            "post_validate",
            {
                "content_type": content_type,
                "ok": failure is None,
                "field": failure.field if failure else None,
                "code": str(failure.code) if failure else None,
            },
            warnings,
        )

    def _failure_result(
        self,
        op: str,
        failure: ValidationFailure,
        warnings: list[str],
        **detail: Any,
    ) -> ServiceResult:
        return self._fail(
            op,
            str(failure.code),
            failure.message,
            field=failure.field,
            reason=failure.reason,
            **detail,
        ).with_warnings(warnings)
