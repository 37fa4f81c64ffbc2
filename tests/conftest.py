"""Shared pytest fixtures and test helpers for cmsctl tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from cmsctl.config.settings import CmsSettings
from cmsctl.domain.schema import ContentTypeSchema, parse_schema
from cmsctl.infrastructure.schema_store import SchemaStore

ARTICLE_YAML = """\
name: article
fields:
  - name: title
    kind: text
  - name: body
    kind: text
    optional: true
  - name: published
    kind: date
  - name: status
    kind: enum
    enumOptions: [draft, published]
  - name: author
    kind: relation
    relationTarget: author
    optional: true
"""

# Written with the legacy ``type`` / ``options`` keys.
PRODUCT_DOC: dict[str, Any] = {
    "id": "0f8fad5b-d9cb-469f-a165-70867728950e",
    "name": "product",
    "fields": [
        {"name": "name", "type": "text"},
        {"name": "price", "type": "price"},
        {"name": "color", "type": "enum", "options": ["Red", "Green", "Blue"]},
        {"name": "in_stock", "type": "boolean"},
        {"name": "image", "type": "media", "optional": True},
    ],
}

VALID_ARTICLE: dict[str, Any] = {
    "title": "Hello",
    "published": "2024-01-15T10:30:00Z",
    "status": "draft",
}


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clear_cmsctl_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CMSCTL_* variables from the outer environment out of tests."""
    monkeypatch.delenv("CMSCTL_CONFIG", raising=False)
    monkeypatch.delenv("CMSCTL_PROJECT_ROOT", raising=False)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project with a ``schemas/`` directory holding two content types.

    This is the single source of truth for the project layout. All
    project-related fixtures (settings, store, _isolated_project) build on it.
    """
    schemas = tmp_path / "schemas"
    schemas.mkdir()
    (schemas / "article.yaml").write_text(ARTICLE_YAML, encoding="utf-8")
    (schemas / "product.json").write_text(json.dumps(PRODUCT_DOC), encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> CmsSettings:
    return CmsSettings.from_cli(project_root=project_root)


@pytest.fixture
def store(project_root: Path) -> SchemaStore:
    return SchemaStore(project_root / "schemas")


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project root so the CLI finds its schemas.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes. Tests that need the path can also request ``project_root``.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture
def article() -> ContentTypeSchema:
    return parse_schema(
        {
            "name": "article",
            "fields": [
                {"name": "title", "kind": "text"},
                {"name": "body", "kind": "text", "optional": True},
                {"name": "published", "kind": "date"},
                {"name": "status", "kind": "enum", "enumOptions": ["draft", "published"]},
            ],
        }
    )


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_schema(*fields: dict[str, Any], name: str = "thing") -> ContentTypeSchema:
    """Build a schema from raw field documents, asserting it parses."""
    return parse_schema({"name": name, "fields": list(fields)})


def write_payload(directory: Path, payload: Any, name: str = "payload.json") -> Path:
    """Write *payload* as JSON into *directory* and return the path."""
    path = directory / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
