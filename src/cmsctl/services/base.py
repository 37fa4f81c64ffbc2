"""BaseService — shared foundation for cmsctl services.

Every service receives the resolved :class:`CmsSettings`. The schema store
and plugin manager are optional collaborators: the store is created from
``settings.schema_dir`` on first use, and without a plugin manager event
dispatch is a no-op.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from cmsctl.infrastructure.schema_store import SchemaStore
from cmsctl.services.result import ServiceResult

if TYPE_CHECKING:
    from cmsctl.config.settings import CmsSettings
    from cmsctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ValidationService(BaseService):
            def validate_content(self, type_ref: str, payload: Any) -> ServiceResult:
                schema = self.store.get(type_ref)
                ...
    """

    def __init__(
        self,
        settings: CmsSettings,
        *,
        store: SchemaStore | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._plugins = plugins

    @property
    def store(self) -> SchemaStore:
        """The schema store (created lazily from settings)."""
        if self._store is None:
            self._store = SchemaStore(self._settings.schema_dir)
        return self._store

    @staticmethod
    def _fail(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return ServiceResult.failure(op, code, message, **detail)

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch an observer event. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        try:
            warnings.extend(self._plugins.dispatch(hook_name, **payload))
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
