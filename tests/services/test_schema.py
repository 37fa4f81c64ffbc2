"""Tests for SchemaService."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from cmsctl.config.settings import CmsSettings
from cmsctl.domain.ids import content_type_id
from cmsctl.infrastructure.schema_store import SchemaStore
from cmsctl.plugins.hookspecs import hookimpl
from cmsctl.plugins.manager import PluginManager
from cmsctl.services.schema import SchemaService
from tests.conftest import PRODUCT_DOC


class CheckRecorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str | None, bool]] = []

    @hookimpl
    def post_schema_check(self, content_type: str | None, ok: bool) -> None:
        self.calls.append((content_type, ok))


@pytest.fixture
def service(settings: CmsSettings, store: SchemaStore) -> SchemaService:
    return SchemaService(settings, store=store)


class TestCheckSchema:
    def test_valid_document(self, service: SchemaService, project_root: Path) -> None:
        path = project_root / "schemas" / "article.yaml"
        result = service.check_schema(path)
        assert result.ok, result.error
        assert result.op == "check_schema"
        assert result.data["name"] == "article"
        assert result.data["id"] == content_type_id("article")
        assert result.data["field_count"] == 5
        assert result.data["required"] == ["title", "published", "status"]
        assert result.data["path"] == str(path)

    def test_legacy_document_normalized(self, service: SchemaService, project_root: Path) -> None:
        result = service.check_schema(project_root / "schemas" / "product.json")
        color: dict[str, Any] = result.data["fields"][2]
        assert color == {
            "name": "color",
            "optional": False,
            "kind": "enum",
            "enumOptions": ["Red", "Green", "Blue"],
        }

    def test_rule_violation(self, service: SchemaService, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("name: bad\nfields:\n  - name: s\n    kind: enum\n", encoding="utf-8")
        result = service.check_schema(path)
        assert not result.ok
        assert result.error.code == "INVALID_SCHEMA"
        assert "enumOptions" in result.error.message
        assert result.error.detail == {"path": str(path)}

    def test_unreadable(self, service: SchemaService, tmp_path: Path) -> None:
        result = service.check_schema(tmp_path / "missing.yaml")
        assert result.error.code == "INVALID_DOCUMENT"

    def test_observer_notified(
        self, settings: CmsSettings, store: SchemaStore, project_root: Path, tmp_path: Path
    ) -> None:
        recorder = CheckRecorder()
        pm = PluginManager()
        pm.register_plugin(recorder)
        service = SchemaService(settings, store=store, plugins=pm)

        service.check_schema(project_root / "schemas" / "article.yaml")
        service.check_schema(tmp_path / "missing.yaml")
        assert recorder.calls == [("article", True), (None, False)]


class TestListTypes:
    def test_lists_sorted(self, service: SchemaService) -> None:
        result = service.list_types()
        assert result.ok
        assert result.data["count"] == 2
        assert result.data["items"] == [
            {"id": content_type_id("article"), "name": "article", "field_count": 5},
            {"id": PRODUCT_DOC["id"], "name": "product", "field_count": 5},
        ]
        assert result.warnings == []

    def test_problems_become_warnings(self, service: SchemaService, project_root: Path) -> None:
        (project_root / "schemas" / "broken.json").write_text("[", encoding="utf-8")
        result = service.list_types()
        assert result.ok
        assert result.data["count"] == 2
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("broken.json:")

    def test_empty_store(self, tmp_path: Path) -> None:
        settings = CmsSettings.from_cli(project_root=tmp_path)
        result = SchemaService(settings).list_types()
        assert result.ok
        assert result.data == {"count": 0, "items": []}


class TestShowType:
    def test_by_name(self, service: SchemaService) -> None:
        result = service.show_type("product")
        assert result.ok
        assert result.data["id"] == PRODUCT_DOC["id"]
        assert [f["name"] for f in result.data["fields"]] == [
            "name",
            "price",
            "color",
            "in_stock",
            "image",
        ]

    def test_not_found(self, service: SchemaService) -> None:
        result = service.show_type("recipe")
        assert result.error.code == "CONTENT_TYPE_NOT_FOUND"


class TestListKinds:
    def test_all_kinds(self, service: SchemaService) -> None:
        result = service.list_kinds()
        assert result.data["count"] == 8
        kinds = {item["kind"]: item["extra"] for item in result.data["items"]}
        assert kinds["enum"] == "enumOptions"
        assert kinds["relation"] == "relationTarget"
        assert kinds["number"] is None
