"""Pluggy hook specifications for cmsctl validation events.

Hooks are observers: they run after the outcome is decided and cannot
change it. Request/response tracing belongs here rather than inside the
validator.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "cmsctl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class CmsctlHookSpec:
    """Hook specifications for the cmsctl plugin system."""

    @hookspec
    def post_validate(
        self,
        content_type: str,
        ok: bool,
        field: str | None,
        code: str | None,
    ) -> None:
        """Called after a payload is validated.

        *content_type* is the schema name, or ``"<bulk:KIND>"`` for uniform
        validation. *field* and *code* are set only when ``ok`` is False.
        """

    @hookspec
    def post_schema_check(self, content_type: str | None, ok: bool) -> None:
        """Called after a schema document is checked."""
