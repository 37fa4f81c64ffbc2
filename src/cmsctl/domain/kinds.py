"""Field kinds — the closed set of types a content-type field may declare.

Adding a kind means adding a member here and a branch in
:func:`cmsctl.domain.validation._check_value`; the dispatch fails closed for
anything it does not recognise.
"""

from __future__ import annotations

from enum import StrEnum

from cmsctl.domain.errors import SchemaError


class FieldKind(StrEnum):
    """Primitive and semantic field types."""

    NUMBER = "number"
    TEXT = "text"
    DATE = "date"
    BOOLEAN = "boolean"
    RELATION = "relation"
    MEDIA = "media"
    ENUM = "enum"
    PRICE = "price"


# Kinds whose definitions carry extra data beyond name/optional.
KIND_EXTRAS: dict[FieldKind, str] = {
    FieldKind.RELATION: "relationTarget",
    FieldKind.ENUM: "enumOptions",
}


def validate_kind(kind: str) -> FieldKind:
    """Return the :class:`FieldKind` for *kind*.

    Raises:
        SchemaError: If *kind* is not one of the recognised kinds.
    """
    try:
        return FieldKind(kind)
    except ValueError:
        allowed = ", ".join(k.value for k in FieldKind)
        msg = f"Invalid field kind: {kind}. Must be one of: {allowed}"
        raise SchemaError(msg) from None
