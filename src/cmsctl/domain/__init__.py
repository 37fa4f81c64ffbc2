"""Domain layer — field kinds, content-type schemas, and the validator.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

from cmsctl.domain.errors import SchemaError
from cmsctl.domain.ids import validate_uuid
from cmsctl.domain.kinds import FieldKind, validate_kind
from cmsctl.domain.schema import (
    ContentTypeSchema,
    EnumField,
    FieldDefinition,
    RelationField,
    ScalarField,
    parse_schema,
)
from cmsctl.domain.validation import (
    MEDIA_MAX_BYTES,
    FailureCode,
    ValidatedRecord,
    ValidationFailure,
    validate,
    validate_uniform,
)

__all__ = [
    "MEDIA_MAX_BYTES",
    "ContentTypeSchema",
    "EnumField",
    "FailureCode",
    "FieldDefinition",
    "FieldKind",
    "RelationField",
    "ScalarField",
    "SchemaError",
    "ValidatedRecord",
    "ValidationFailure",
    "parse_schema",
    "validate",
    "validate_kind",
    "validate_uniform",
    "validate_uuid",
]
