"""Schema-authoring errors.

Payload problems are never raised; they come back from the validator as
:class:`~cmsctl.domain.validation.ValidationFailure` values. A malformed
content-type definition is a different class of problem and raises
:class:`SchemaError`.
"""

from __future__ import annotations


class SchemaError(ValueError):
    """A content-type document or field kind is malformed."""
