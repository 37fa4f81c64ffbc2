"""Content-type schemas — field definitions and schema-authoring rules.

A content type is an ordered list of field definitions. Each definition is
one variant of a tagged union discriminated on ``kind``:

- :class:`ScalarField`: ``number``, ``text``, ``date``, ``boolean``,
  ``media``, ``price``. Carries only ``name`` and ``optional``.
- :class:`RelationField`: ``relation``. Adds ``relationTarget``.
- :class:`EnumField`: ``enum``. Adds a non-empty ``enumOptions`` list.

Variants reject unknown keys, so ``enumOptions`` can only ever appear on an
enum field and ``relationTarget`` only on a relation field.

Older documents use ``type``, ``options`` and
``relation`` as keys; :func:`parse_schema` accepts those and normalizes them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Annotated, Any, Literal, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from cmsctl.domain.errors import SchemaError
from cmsctl.domain.ids import content_type_id, validate_uuid
from cmsctl.domain.kinds import FieldKind, validate_kind

__all__ = [
    "ContentTypeSchema",
    "EnumField",
    "FieldDefinition",
    "RelationField",
    "ScalarField",
    "SchemaError",
    "parse_schema",
]

# Legacy document key -> canonical key.
LEGACY_FIELD_KEYS: dict[str, str] = {
    "type": "kind",
    "options": "enumOptions",
    "relation": "relationTarget",
}


# ---------------------------------------------------------------------------
# Field definitions
# ---------------------------------------------------------------------------


class _FieldBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: StrictStr
    optional: StrictBool = False

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "Each field must have a non-empty name"
            raise ValueError(msg)
        return value

    @property
    def field_kind(self) -> FieldKind:
        """The declared kind as a :class:`FieldKind` member."""
        return FieldKind(self.kind)  # type: ignore[attr-defined]

    def to_document(self) -> dict[str, Any]:
        """Return the canonical wire form of this definition."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ScalarField(_FieldBase):
    """A field whose kind needs no extra data."""

    kind: Literal["number", "text", "date", "boolean", "media", "price"]


class RelationField(_FieldBase):
    """A reference to a record of another content type (never checked)."""

    kind: Literal["relation"]
    relation_target: StrictStr | None = Field(default=None, alias="relationTarget")


class EnumField(_FieldBase):
    """A fixed choice among ``enum_options`` (exact, case-sensitive)."""

    kind: Literal["enum"]
    enum_options: tuple[StrictStr, ...] = Field(alias="enumOptions", min_length=1)

    @field_validator("enum_options")
    @classmethod
    def _options_distinct(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(value)) != len(value):
            msg = "enumOptions must not contain duplicates"
            raise ValueError(msg)
        return value


FieldDefinition = Annotated[
    ScalarField | RelationField | EnumField,
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Content-type schema
# ---------------------------------------------------------------------------


class ContentTypeSchema(BaseModel):
    """A named, ordered list of field definitions with a stable id.

    Immutable: the only supported mutation is wholesale replacement of the
    field list via :meth:`with_fields`, which returns a new schema.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: StrictStr
    name: StrictStr
    fields: tuple[FieldDefinition, ...] = Field(min_length=1)

    @field_validator("id")
    @classmethod
    def _id_is_uuid(cls, value: str) -> str:
        if not validate_uuid(value):
            msg = f"Invalid UUID format: {value}"
            raise ValueError(msg)
        return value

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            msg = "Content type name must be a non-empty string"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _unique_field_names(self) -> Self:
        seen: set[str] = set()
        for definition in self.fields:
            if definition.name in seen:
                msg = f"Duplicate field name: {definition.name}"
                raise ValueError(msg)
            seen.add(definition.name)
        return self

    @property
    def required_fields(self) -> list[str]:
        """Names of fields that must be present in every payload."""
        return [f.name for f in self.fields if not f.optional]

    def field(self, name: str) -> ScalarField | RelationField | EnumField | None:
        """Return the definition named *name*, or None."""
        for definition in self.fields:
            if definition.name == name:
                return definition
        return None

    def with_fields(
        self,
        fields: Iterable[ScalarField | RelationField | EnumField | Mapping[str, Any]],
    ) -> ContentTypeSchema:
        """Return a copy of this schema with its field list replaced.

        The new list is checked with the same rules as :func:`parse_schema`.

        Raises:
            SchemaError: If the new field list is malformed.
        """
        documents = [f if isinstance(f, Mapping) else f.to_document() for f in fields]
        return parse_schema({"id": self.id, "name": self.name, "fields": documents})

    def to_document(self) -> dict[str, Any]:
        """Return the canonical document form, accepted by :func:`parse_schema`."""
        return {
            "id": self.id,
            "name": self.name,
            "fields": [f.to_document() for f in self.fields],
        }


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def normalize_field_document(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Rename legacy keys (``type``, ``options``, ``relation``) to canonical ones.

    A legacy key is left alone when its canonical counterpart is also
    present, so the conflict surfaces as an unknown-key error.
    """
    doc = dict(raw)
    for legacy, canonical in LEGACY_FIELD_KEYS.items():
        if legacy in doc and canonical not in doc:
            doc[canonical] = doc.pop(legacy)
    return doc


def _check_field_document(raw: Any, index: int) -> dict[str, Any]:
    """Apply the schema-authoring rules to one raw field entry."""
    if not isinstance(raw, Mapping):
        msg = f"Field #{index + 1} must be a mapping"
        raise SchemaError(msg)
    doc = normalize_field_document(raw)

    name = doc.get("name")
    if not isinstance(name, str) or not name.strip():
        msg = "Each field must have a name of type string"
        raise SchemaError(msg)

    kind = doc.get("kind")
    if not isinstance(kind, str):
        msg = f"Field '{name}' must declare a kind"
        raise SchemaError(msg)
    resolved = validate_kind(kind)

    if resolved is FieldKind.ENUM:
        options = doc.get("enumOptions", doc.get("enum_options"))
        if (
            not isinstance(options, list | tuple)
            or not options
            or not all(isinstance(opt, str) for opt in options)
        ):
            msg = f"Field '{name}' of kind 'enum' must have a non-empty 'enumOptions' list of strings"
            raise SchemaError(msg)
    return doc


def _describe(exc: ValidationError, fields: list[dict[str, Any]]) -> str:
    """Render the first pydantic error as a one-line schema message."""
    err = exc.errors()[0]
    loc = err["loc"]
    text = err["msg"].removeprefix("Value error, ")
    if len(loc) >= 2 and loc[0] == "fields" and isinstance(loc[1], int) and loc[1] < len(fields):
        name = fields[loc[1]].get("name")
        key = loc[-1] if len(loc) > 3 else None
        where = f"Field '{name}'" + (f" ({key})" if key else "")
        return f"{where}: {text}"
    if loc:
        return f"{loc[0]}: {text}"
    return text


def parse_schema(document: Mapping[str, Any]) -> ContentTypeSchema:
    """Build a :class:`ContentTypeSchema` from a content-type document.

    The document needs ``name`` and a non-empty ``fields`` list; ``id`` is
    optional and derived from the name when missing.

    Raises:
        SchemaError: On the first rule the document breaks.
    """
    if not isinstance(document, Mapping):
        msg = "Content type document must be a mapping"
        raise SchemaError(msg)

    name = document.get("name")
    if not isinstance(name, str) or not name.strip():
        msg = "Content type name is required and must be a string"
        raise SchemaError(msg)

    raw_fields = document.get("fields")
    if not isinstance(raw_fields, list | tuple) or not raw_fields:
        msg = "Fields must be a non-empty array"
        raise SchemaError(msg)

    fields = [_check_field_document(raw, i) for i, raw in enumerate(raw_fields)]

    data = dict(document)
    data["fields"] = fields
    if data.get("id") is None:
        data["id"] = content_type_id(name)

    try:
        return ContentTypeSchema.model_validate(data)
    except ValidationError as exc:
        raise SchemaError(_describe(exc, fields)) from exc
