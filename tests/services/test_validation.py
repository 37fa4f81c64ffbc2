"""Tests for ValidationService."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from cmsctl.config.settings import CmsSettings
from cmsctl.domain.ids import content_type_id
from cmsctl.infrastructure.schema_store import SchemaStore
from cmsctl.plugins.hookspecs import hookimpl
from cmsctl.plugins.manager import PluginManager
from cmsctl.services.validation import ValidationService
from tests.conftest import PRODUCT_DOC, VALID_ARTICLE


class RecordingPlugin:
    """Plugin that records post_validate calls for verification."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    @hookimpl
    def post_validate(
        self, content_type: str, ok: bool, field: str | None, code: str | None
    ) -> None:
        self.calls.append({"content_type": content_type, "ok": ok, "field": field, "code": code})


class ExplodingPlugin:
    @hookimpl
    def post_validate(self, content_type: str) -> None:
        raise RuntimeError("observer crashed")


@pytest.fixture
def service(settings: CmsSettings, store: SchemaStore) -> ValidationService:
    return ValidationService(settings, store=store)


@pytest.fixture
def recorder() -> RecordingPlugin:
    return RecordingPlugin()


@pytest.fixture
def observed(
    settings: CmsSettings, store: SchemaStore, recorder: RecordingPlugin
) -> ValidationService:
    pm = PluginManager()
    pm.register_plugin(recorder, name="recorder")
    return ValidationService(settings, store=store, plugins=pm)


class TestValidateContent:
    def test_by_name(self, service: ValidationService) -> None:
        result = service.validate_content("article", dict(VALID_ARTICLE))
        assert result.ok, result.error
        assert result.op == "validate"
        assert result.data["content_type"] == "article"
        assert result.data["content_type_id"] == content_type_id("article")
        assert result.data["record"] == {
            "title": "Hello",
            "published": "2024-01-15T10:30:00.000Z",
            "status": "draft",
        }

    def test_by_id(self, service: ValidationService) -> None:
        payload = {"name": "Lamp", "price": 20, "color": "Red", "in_stock": True}
        result = service.validate_content(PRODUCT_DOC["id"], payload)
        assert result.ok, result.error
        assert result.data["content_type"] == "product"

    def test_by_path(self, service: ValidationService, project_root: Path) -> None:
        path = project_root / "schemas" / "article.yaml"
        result = service.validate_content(str(path), dict(VALID_ARTICLE))
        assert result.ok, result.error

    def test_json_text_payload(self, service: ValidationService) -> None:
        result = service.validate_content("article", '{"title": "T", "published": "2024-01-01", "status": "published"}')
        assert result.ok, result.error

    def test_validation_failure(self, service: ValidationService) -> None:
        result = service.validate_content("article", {**VALID_ARTICLE, "status": "archived"})
        assert not result.ok
        assert result.error.code == "NOT_IN_ENUM"
        assert result.error.message.startswith("Field 'status' must be one of")
        assert result.error.detail["field"] == "status"
        assert result.error.detail["content_type"] == "article"

    def test_missing_required(self, service: ValidationService) -> None:
        result = service.validate_content("article", {"title": "T"})
        assert result.error.code == "MISSING_REQUIRED_FIELD"
        assert result.error.detail["field"] == "published"

    def test_unknown_content_type(self, service: ValidationService) -> None:
        result = service.validate_content("recipe", {})
        assert not result.ok
        assert result.error.code == "CONTENT_TYPE_NOT_FOUND"
        assert result.error.message == "Content type not found: recipe"

    def test_missing_schema_file_falls_back_to_store(self, service: ValidationService) -> None:
        result = service.validate_content("no/such/schema.yaml", {})
        assert result.error.code == "CONTENT_TYPE_NOT_FOUND"

    def test_invalid_schema_file(self, service: ValidationService, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("name: bad\nfields:\n  - name: x\n    kind: blob\n", encoding="utf-8")
        result = service.validate_content(str(path), {})
        assert result.error.code == "INVALID_SCHEMA"
        assert "Invalid field kind: blob" in result.error.message

    def test_unreadable_schema_file(self, service: ValidationService, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        assert service.validate_content(str(path), {}).error.code == "INVALID_DOCUMENT"

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2]", "42", ["title"]])
    def test_invalid_payload(self, service: ValidationService, payload: Any) -> None:
        result = service.validate_content("article", payload)
        assert result.error.code == "INVALID_PAYLOAD"

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_standard_number_literals_rejected(
        self, service: ValidationService, literal: str
    ) -> None:
        result = service.validate_content("product", f'{{"name": "Lamp", "price": {literal}}}')
        assert not result.ok
        assert result.error.code == "INVALID_PAYLOAD"
        assert f"{literal} is not a JSON value" in result.error.message

    def test_non_finite_mapping_value_rejected(self, service: ValidationService) -> None:
        payload = {"name": "Lamp", "price": float("nan"), "color": "Red", "in_stock": True}
        result = service.validate_content("product", payload)
        assert result.error.code == "WRONG_TYPE"
        assert result.error.detail["field"] == "price"

    def test_media_limit_from_settings(self, project_root: Path, store: SchemaStore) -> None:
        (project_root / "cmsctl.toml").write_text("[validation]\nmedia_max_bytes = 3\n")
        settings = CmsSettings.from_cli(project_root=project_root)
        service = ValidationService(settings, store=store)
        payload = {"name": "Lamp", "price": 1, "color": "Red", "in_stock": True, "image": "AAAAAAAA"}
        result = service.validate_content("product", payload)
        assert result.error.code == "MEDIA_TOO_LARGE"
        assert "3 byte size limit" in result.error.message

    def test_store_created_from_settings(self, settings: CmsSettings) -> None:
        result = ValidationService(settings).validate_content("article", dict(VALID_ARTICLE))
        assert result.ok, result.error


class TestValidateBulk:
    def test_success(self, service: ValidationService) -> None:
        result = service.validate_bulk({"a": 1, "b": 2}, "number")
        assert result.ok
        assert result.op == "validate_bulk"
        assert result.data == {"kind": "number", "count": 2, "record": {"a": 1, "b": 2}}

    def test_failure(self, service: ValidationService) -> None:
        result = service.validate_bulk('{"a": null}', "text")
        assert result.error.code == "MISSING_REQUIRED_FIELD"
        assert result.error.detail["kind"] == "text"

    def test_unknown_kind(self, service: ValidationService) -> None:
        result = service.validate_bulk({"a": 1}, "integer")
        assert result.error.code == "INVALID_KIND"

    def test_enum_needs_options(self, service: ValidationService) -> None:
        assert service.validate_bulk({"a": "x"}, "enum").error.code == "INVALID_KIND"
        result = service.validate_bulk({"a": "x"}, "enum", enum_options=["x", "y"])
        assert result.ok


class TestCheckId:
    def test_valid(self, service: ValidationService) -> None:
        result = service.check_id("3f2b8c1e-0a4d-4e6f-9a7b-1c2d3e4f5a6b")
        assert result.ok
        assert result.data == {"id": "3f2b8c1e-0a4d-4e6f-9a7b-1c2d3e4f5a6b"}

    def test_invalid(self, service: ValidationService) -> None:
        result = service.check_id("3F2B8C1E-0A4D-4E6F-9A7B-1C2D3E4F5A6B")
        assert result.error.code == "INVALID_ID"
        assert result.error.message.startswith("Invalid UUID format")


class TestObservers:
    def test_success_notifies(self, observed: ValidationService, recorder: RecordingPlugin) -> None:
        observed.validate_content("article", dict(VALID_ARTICLE))
        assert recorder.calls == [
            {"content_type": "article", "ok": True, "field": None, "code": None}
        ]

    def test_failure_notifies(self, observed: ValidationService, recorder: RecordingPlugin) -> None:
        observed.validate_content("article", {"title": 1})
        assert recorder.calls == [
            {"content_type": "article", "ok": False, "field": "title", "code": "WRONG_TYPE"}
        ]

    def test_bulk_label(self, observed: ValidationService, recorder: RecordingPlugin) -> None:
        observed.validate_bulk({"a": True}, "boolean")
        assert recorder.calls[0]["content_type"] == "<bulk:boolean>"

    def test_not_notified_before_validation(
        self, observed: ValidationService, recorder: RecordingPlugin
    ) -> None:
        observed.validate_content("recipe", {})
        observed.validate_content("article", "{oops")
        assert recorder.calls == []

    def test_failing_observer_is_a_warning(
        self, settings: CmsSettings, store: SchemaStore, recorder: RecordingPlugin
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(ExplodingPlugin(), name="boom")
        pm.register_plugin(recorder, name="recorder")
        service = ValidationService(settings, store=store, plugins=pm)

        result = service.validate_content("article", dict(VALID_ARTICLE))
        assert result.ok
        assert result.warnings == ["Plugin boom failed in post_validate"]
        assert len(recorder.calls) == 1

    def test_failing_observer_does_not_change_failure(
        self, settings: CmsSettings, store: SchemaStore
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(ExplodingPlugin(), name="boom")
        service = ValidationService(settings, store=store, plugins=pm)

        result = service.validate_content("article", {"title": 1})
        assert result.error.code == "WRONG_TYPE"
        assert result.warnings == ["Plugin boom failed in post_validate"]
