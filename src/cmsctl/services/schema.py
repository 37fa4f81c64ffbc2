"""SchemaService — inspect content-type documents and the schema store."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from cmsctl.domain.errors import SchemaError
from cmsctl.domain.kinds import KIND_EXTRAS, FieldKind
from cmsctl.domain.schema import ContentTypeSchema
from cmsctl.infrastructure.schema_store import DocumentError, load_schema
from cmsctl.services.base import BaseService
from cmsctl.services.result import ServiceResult


def _describe_schema(schema: ContentTypeSchema) -> dict[str, Any]:
    doc = schema.to_document()
    doc["field_count"] = len(schema.fields)
    doc["required"] = schema.required_fields
    return doc


class SchemaService(BaseService):
    """Checks schema documents and lists what the store knows about."""

    def check_schema(self, path: Path) -> ServiceResult:
        """Check the content-type document at *path* and return its canonical form."""
        op = "check_schema"
        warnings: list[str] = []
        try:
            schema = load_schema(path)
        except DocumentError as exc:
            self._dispatch_event("post_schema_check", {"content_type": None, "ok": False}, warnings)
            return self._fail(op, "INVALID_DOCUMENT", str(exc), path=str(path))
        except SchemaError as exc:
            self._dispatch_event("post_schema_check", {"content_type": None, "ok": False}, warnings)
            return self._fail(op, "INVALID_SCHEMA", str(exc), path=str(path))

        self._dispatch_event("post_schema_check", {"content_type": schema.name, "ok": True}, warnings)
        data = _describe_schema(schema)
        data["path"] = str(path)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def list_types(self) -> ServiceResult:
        """List every content type in the schema store."""
        schemas = self.store.list_schemas()
        items = [
            {"id": s.id, "name": s.name, "field_count": len(s.fields)} for s in schemas
        ]
        return ServiceResult(
            ok=True,
            op="list_types",
            data={"count": len(items), "items": items},
            warnings=self.store.problems,
        )

    def show_type(self, identifier: str) -> ServiceResult:
        """Show one content type from the store, by id or name."""
        op = "show_type"
        schema = self.store.get(identifier)
        if schema is None:
            return self._fail(
                op,
                "CONTENT_TYPE_NOT_FOUND",
                f"Content type not found: {identifier}",
                content_type=identifier,
            )
        return ServiceResult(ok=True, op=op, data=_describe_schema(schema))

    def list_kinds(self) -> ServiceResult:
        """List the closed set of field kinds."""
        items = [{"kind": k.value, "extra": KIND_EXTRAS.get(k)} for k in FieldKind]
        return ServiceResult(
            ok=True, op="list_kinds", data={"count": len(items), "items": items}
        )
