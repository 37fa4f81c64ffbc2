"""File-backed, read-only store of content-type schemas.

Schemas live as one document per file in a directory (``*.yaml``,
``*.yml``, ``*.json``). The store indexes them by id and by name on first
use; a document that fails to parse is skipped and reported through
:attr:`SchemaStore.problems` so one bad file never hides the others.

INVARIANT: The store never writes. Creating, replacing or deleting a
content type is done by editing the files themselves.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from cmsctl.domain.errors import SchemaError
from cmsctl.domain.schema import ContentTypeSchema, parse_schema

SCHEMA_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml", ".json"})

logger = logging.getLogger(__name__)


class DocumentError(Exception):
    """A document could not be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def _new_yaml() -> YAML:
    """Create a fresh safe YAML loader (ruamel.yaml's YAML object is stateful)."""
    return YAML(typ="safe", pure=True)


def parse_document(text: str, *, suffix: str = ".json") -> Any:
    """Parse *text* as JSON, or YAML when *suffix* is ``.yaml``/``.yml``."""
    if suffix in (".yaml", ".yml"):
        return _new_yaml().load(text)
    return json.loads(text)


def load_document(path: Path) -> Any:
    """Read *path* and return its parsed contents as plain Python data.

    Raises:
        DocumentError: If the file cannot be read or does not parse.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise DocumentError(path, "not valid UTF-8") from exc

    try:
        return parse_document(text, suffix=path.suffix.lower())
    except json.JSONDecodeError as exc:
        raise DocumentError(path, f"invalid JSON: {exc}") from exc
    except YAMLError as exc:
        raise DocumentError(path, f"invalid YAML: {exc}") from exc


def load_schema(path: Path) -> ContentTypeSchema:
    """Load and check a single content-type document.

    Raises:
        DocumentError: If the file cannot be read or parsed.
        SchemaError: If the document breaks a schema-authoring rule.
    """
    return parse_schema(load_document(path))


def find_schema_files(directory: Path) -> list[Path]:
    """Return schema documents directly inside *directory*, sorted by name."""
    if not directory.is_dir():
        return []
    return sorted(
        p
        for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in SCHEMA_SUFFIXES and not p.name.startswith(".")
    )


class SchemaStore:
    """Resolve content types by id or name from a directory of documents.

    Usage::

        store = SchemaStore(Path("schemas"))
        schema = store.get("article")
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._by_id: dict[str, ContentTypeSchema] | None = None
        self._by_name: dict[str, ContentTypeSchema] = {}
        self._problems: list[str] = []

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def _index(self) -> dict[str, ContentTypeSchema]:
        if self._by_id is not None:
            return self._by_id

        by_id: dict[str, ContentTypeSchema] = {}
        for path in find_schema_files(self.directory):
            try:
                schema = load_schema(path)
            except (DocumentError, SchemaError) as exc:
                logger.warning("Skipping schema document %s: %s", path.name, exc)
                self._problems.append(f"{path.name}: {exc}")
                continue

            if schema.id in by_id or schema.name in self._by_name:
                logger.warning("Skipping duplicate content type in %s", path.name)
                self._problems.append(
                    f"{path.name}: duplicate content type {schema.name!r} ({schema.id})"
                )
                continue

            by_id[schema.id] = schema
            self._by_name[schema.name] = schema
            logger.debug("Indexed content type %s from %s", schema.name, path.name)

        self._by_id = by_id
        return by_id

    def reload(self) -> None:
        """Drop the in-memory index; the next lookup rereads the directory."""
        self._by_id = None
        self._by_name = {}
        self._problems = []

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def problems(self) -> list[str]:
        """Documents skipped while indexing, one line each."""
        self._index()
        return list(self._problems)

    def get(self, identifier: str) -> ContentTypeSchema | None:
        """Return the content type with id *identifier*, else by name, else None."""
        by_id = self._index()
        if identifier in by_id:
            return by_id[identifier]
        return self._by_name.get(identifier)

    def list_schemas(self) -> list[ContentTypeSchema]:
        """All indexed content types, sorted by name."""
        return sorted(self._index().values(), key=lambda s: s.name)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.get(identifier) is not None

    def __len__(self) -> int:
        return len(self._index())
