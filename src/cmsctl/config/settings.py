"""Unified settings: CLI flags, env vars, and ``cmsctl.toml`` in one object.

Precedence, highest first:

1. keyword arguments (the CLI flags Click parsed)
2. ``CMSCTL_*`` environment variables, ``__`` between section and key
   (``CMSCTL_VALIDATION__MEDIA_MAX_BYTES=1048576``)
3. the discovered ``cmsctl.toml``
4. defaults baked into :mod:`cmsctl.config.models`
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cmsctl.config.discovery import find_config, read_config_table
from cmsctl.config.models import PluginsConfig, SchemasConfig, ValidationConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by one TOML file (or nothing)."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._table: dict[str, Any] = {}
        if toml_path is not None and toml_path.is_file():
            try:
                self._table = read_config_table(toml_path)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._table.get(field_name), field_name, field_name in self._table

    def __call__(self) -> dict[str, Any]:
        return dict(self._table)


# The TOML path has to reach settings_customise_sources, which pydantic
# calls as a classmethod during __init__.
_construction = threading.local()


class CmsSettings(BaseSettings):
    """Resolved settings for one ``cmsctl`` invocation.

    Attributes:
        project_root: Directory holding ``cmsctl.toml``, or the cwd when no
            config file was found. Relative directories resolve against it.
        config_path: The config file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CMSCTL_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # Global CLI flags
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # cmsctl.toml sections
    schemas: SchemasConfig = Field(default_factory=SchemasConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, getattr(_construction, "toml_path", None))
        return (init_settings, env_settings, toml)

    @property
    def schema_dir(self) -> Path:
        """Where the schema store looks for content-type documents."""
        return self.project_root / self.schemas.directory

    @property
    def plugin_dir(self) -> Path:
        """Where single-file local plugins are discovered."""
        return self.project_root / self.plugins.local_dir

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> CmsSettings:
        """Build settings for a CLI invocation.

        An explicit *config_path* that does not exist means "no config file";
        otherwise ``cmsctl.toml`` is searched for upward from *project_root*
        (or the cwd). Without an explicit *project_root*, the config file's
        directory becomes the project root.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path is not None else Path.cwd()

        _construction.toml_path = toml_path
        try:
            return cls(project_root=project_root, config_path=toml_path, **cli_flags)
        finally:
            _construction.toml_path = None
