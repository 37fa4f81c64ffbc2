"""Identifier formats for content types and content records.

Content-type ids are canonical UUID strings. Documents that omit an id get
a stable UUID5 derived from the content-type name, so the same document
always resolves to the same id.

INVARIANT: IDs are permanent. A derived id depends only on the name.
"""

from __future__ import annotations

import re
import uuid

UUID_PATTERN: re.Pattern[str] = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)

CONTENT_TYPE_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "cmsctl:content-type")


def validate_uuid(value: object) -> bool:
    """Check whether *value* is a UUID in canonical lowercase ``8-4-4-4-12`` form."""
    if not isinstance(value, str):
        return False
    return UUID_PATTERN.fullmatch(value) is not None


def content_type_id(name: str) -> str:
    """Derive the stable id for a content type named *name*."""
    return str(uuid.uuid5(CONTENT_TYPE_NAMESPACE, name))
