"""Locate and read ``cmsctl.toml``.

The file is looked up the way git finds ``.git/``: the starting directory
first, then each parent. ``CMSCTL_CONFIG`` (or ``--config``) names a file
directly and disables the search.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from cmsctl.config.models import CmsConfig

CONFIG_FILENAME = "cmsctl.toml"
CONFIG_ENV_VAR = "CMSCTL_CONFIG"


def _candidates(start: Path) -> Iterator[Path]:
    here = start.resolve()
    for directory in (here, *here.parents):
        yield directory / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), or None.

    A path in ``CMSCTL_CONFIG`` wins over the search; if it does not point
    at a file, no config is used at all.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None
    return next((c for c in _candidates(start or Path.cwd()) if c.is_file()), None)


def read_config_table(path: Path) -> dict[str, Any]:
    """Parse *path* as TOML.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    return tomllib.loads(path.read_text(encoding="utf-8"))


def load_config(path: Path | None = None, cwd: Path | None = None) -> CmsConfig:
    """Return the validated config sections, or defaults when there is no file."""
    resolved = path or find_config(cwd)
    if resolved is None:
        return CmsConfig()
    return CmsConfig.model_validate(read_config_table(resolved))
