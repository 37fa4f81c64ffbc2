"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cmsctl.toml only contains overrides.
A project with schemas in ``./schemas`` needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, PositiveInt

from cmsctl.domain.validation import MEDIA_MAX_BYTES

# --- cmsctl.toml sections ---


class SchemasConfig(BaseModel):
    """[schemas] section."""

    model_config = {"frozen": True}

    directory: str = "schemas"


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    media_max_bytes: PositiveInt = MEDIA_MAX_BYTES


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".cmsctl/plugins"


class CmsConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    schemas: SchemasConfig = Field(default_factory=SchemasConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
