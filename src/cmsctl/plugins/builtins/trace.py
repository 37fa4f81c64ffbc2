"""Trace plugin — structured debug events for every validation outcome.

Only field names and failure codes are logged, never payload values.
Visible with ``cmsctl -v``.
"""

from __future__ import annotations

import structlog

from cmsctl.plugins.hookspecs import hookimpl

log = structlog.get_logger("cmsctl.plugins.trace")


class TracePlugin:
    """Emits a debug log event per validation and schema check."""

    @hookimpl
    def post_validate(
        self,
        content_type: str,
        ok: bool,
        field: str | None,
        code: str | None,
    ) -> None:
        if ok:
            log.debug("validation passed", content_type=content_type)
        else:
            log.debug("validation failed", content_type=content_type, field=field, code=code)

    @hookimpl
    def post_schema_check(self, content_type: str | None, ok: bool) -> None:
        log.debug("schema checked", content_type=content_type, ok=ok)
