"""Schema validator — type-check a payload against a content-type schema.

:func:`validate` walks the schema's fields in declared order and returns
either a normalized record or the first :class:`ValidationFailure`. It never
raises for a bad payload, performs no I/O, and keeps no state between calls.

:func:`validate_uniform` is the looser bulk entry point: one kind applied to
every key of the payload, with every key treated as required.

INVARIANT: A kind the dispatch does not recognise fails closed with
``UNSUPPORTED_KIND``. Nothing is accepted without a check.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from email.utils import parsedate_to_datetime
from enum import StrEnum
from typing import Any

from cmsctl.domain.errors import SchemaError
from cmsctl.domain.kinds import FieldKind, validate_kind
from cmsctl.domain.schema import ContentTypeSchema, EnumField

MEDIA_MAX_BYTES = 2 * 1024 * 1024

_DATA_URI = re.compile(r"^data:(.+);base64,(.*)\Z")

ValidatedRecord = dict[str, Any]


class FailureCode(StrEnum):
    """Why a field was rejected."""

    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    WRONG_TYPE = "WRONG_TYPE"
    INVALID_DATE = "INVALID_DATE"
    NOT_IN_ENUM = "NOT_IN_ENUM"
    MEDIA_TOO_LARGE = "MEDIA_TOO_LARGE"
    UNSUPPORTED_KIND = "UNSUPPORTED_KIND"


@dataclass(frozen=True)
class ValidationFailure:
    """The first field that failed validation, and why."""

    field: str
    code: FailureCode
    reason: str

    @property
    def message(self) -> str:
        return f"Field '{self.field}' {self.reason}"


# ---------------------------------------------------------------------------
# Per-kind checks
# ---------------------------------------------------------------------------


def _json_type(value: Any) -> str:
    """Name the JSON type of *value* for error messages."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, list | tuple):
        return "array"
    return type(value).__name__


def _is_number(value: Any) -> bool:
    """True for ints and finite floats; NaN and the infinities have no JSON form."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, int)


def _wrong_type(name: str, kind: FieldKind, expected: str, value: Any) -> ValidationFailure:
    return ValidationFailure(
        name,
        FailureCode.WRONG_TYPE,
        f"must be {expected} for kind '{kind}', got {_json_type(value)}",
    )


def render_instant(instant: datetime) -> str:
    """Render *instant* as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    u = instant.astimezone(UTC)
    return (
        f"{u.year:04d}-{u.month:02d}-{u.day:02d}"
        f"T{u.hour:02d}:{u.minute:02d}:{u.second:02d}.{u.microsecond // 1000:03d}Z"
    )


def _parse_date_text(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None


def normalize_date(value: str | date) -> str | None:
    """Parse *value* to an absolute instant and re-render it in UTC.

    Strings are ISO 8601 or RFC 2822 (``Sat, 01 Jun 2024 00:00:00 GMT``).
    Naive datetimes and bare dates are taken as UTC. Returns None when
    *value* is not a valid calendar date/time.
    """
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, date):
        instant = datetime(value.year, value.month, value.day)
    else:
        instant = _parse_date_text(value.strip())
        if instant is None:
            return None
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    try:
        return render_instant(instant)
    except (OverflowError, ValueError):
        return None


def media_size(value: str) -> int:
    """Decoded byte size of a base64 payload, ignoring any ``data:`` URI prefix."""
    match = _DATA_URI.match(value)
    payload = match.group(2) if match else value
    return (len(payload) * 3 + 3) // 4


def _check_value(
    name: str,
    kind: FieldKind,
    value: Any,
    *,
    options: Sequence[str] = (),
    media_max_bytes: int = MEDIA_MAX_BYTES,
) -> Any:
    """Return the normalized value, or a :class:`ValidationFailure`."""
    match kind:
        case FieldKind.NUMBER | FieldKind.PRICE:
            if not _is_number(value):
                return _wrong_type(name, kind, "a number", value)
            return value
        case FieldKind.TEXT:
            if not isinstance(value, str):
                return _wrong_type(name, kind, "a string", value)
            return value
        case FieldKind.BOOLEAN:
            if not isinstance(value, bool):
                return _wrong_type(name, kind, "a boolean", value)
            return value
        case FieldKind.RELATION:
            if not isinstance(value, str):
                return _wrong_type(name, kind, "a string (relation id)", value)
            return value
        case FieldKind.DATE:
            if not isinstance(value, str | date):
                return _wrong_type(name, kind, "a date string or date object", value)
            rendered = normalize_date(value)
            if rendered is None:
                return ValidationFailure(name, FailureCode.INVALID_DATE, "must be a valid date")
            return rendered
        case FieldKind.MEDIA:
            if not isinstance(value, str):
                return _wrong_type(name, kind, "a base64-encoded string", value)
            if media_size(value) > media_max_bytes:
                return ValidationFailure(
                    name,
                    FailureCode.MEDIA_TOO_LARGE,
                    f"exceeds {media_max_bytes} byte size limit for kind 'media'",
                )
            return value
        case FieldKind.ENUM:
            if not isinstance(value, str):
                return _wrong_type(name, kind, "a string", value)
            if value not in options:
                return ValidationFailure(
                    name,
                    FailureCode.NOT_IN_ENUM,
                    f"must be one of: {', '.join(options)} (got {value!r})",
                )
            return value
        case _:
            return ValidationFailure(
                name, FailureCode.UNSUPPORTED_KIND, f"has unsupported kind '{kind}'"
            )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate(
    schema: ContentTypeSchema,
    payload: Mapping[str, Any],
    *,
    media_max_bytes: int = MEDIA_MAX_BYTES,
) -> ValidatedRecord | ValidationFailure:
    """Validate *payload* against *schema*.

    Required fields that are absent or None fail; optional ones are left out
    of the record. Payload keys the schema does not declare are dropped.
    Only the first failure, in schema order, is reported.
    """
    record: ValidatedRecord = {}
    for definition in schema.fields:
        value = payload.get(definition.name)
        if value is None:
            if definition.optional:
                continue
            return ValidationFailure(
                definition.name,
                FailureCode.MISSING_REQUIRED_FIELD,
                "is required and cannot be null",
            )

        options = definition.enum_options if isinstance(definition, EnumField) else ()
        outcome = _check_value(
            definition.name,
            definition.field_kind,
            value,
            options=options,
            media_max_bytes=media_max_bytes,
        )
        if isinstance(outcome, ValidationFailure):
            return outcome
        record[definition.name] = outcome
    return record


def validate_uniform(
    payload: Mapping[str, Any],
    kind: FieldKind | str,
    *,
    enum_options: Sequence[str] | None = None,
    media_max_bytes: int = MEDIA_MAX_BYTES,
) -> ValidatedRecord | ValidationFailure:
    """Validate every key of *payload* as a required field of *kind*.

    Raises:
        SchemaError: If *kind* is not a recognised kind, or is ``enum``
            without any *enum_options*.
    """
    resolved = validate_kind(kind)
    options = tuple(enum_options or ())
    if resolved is FieldKind.ENUM and not options:
        msg = "Kind 'enum' requires a non-empty list of options"
        raise SchemaError(msg)

    record: ValidatedRecord = {}
    for key, value in payload.items():
        if value is None:
            return ValidationFailure(key, FailureCode.MISSING_REQUIRED_FIELD, "cannot be null")
        outcome = _check_value(
            key, resolved, value, options=options, media_max_bytes=media_max_bytes
        )
        if isinstance(outcome, ValidationFailure):
            return outcome
        record[key] = outcome
    return record
