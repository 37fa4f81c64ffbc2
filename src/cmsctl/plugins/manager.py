"""Plugin discovery, registration, and observer dispatch.

Plugins come from two places:

- distributions that declare a ``cmsctl.plugins`` entry point;
- single-file modules in the project's local plugin directory
  (``.cmsctl/plugins/`` by default), one registered instance per class
  that carries ``@hookimpl`` methods.

A plugin that fails to import, instantiate, or run is logged and skipped.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

import pluggy

from cmsctl.plugins.hookspecs import PROJECT_NAME, CmsctlHookSpec

ENTRY_POINT_GROUP = "cmsctl.plugins"
LOCAL_MODULE_PREFIX = "cmsctl_local_plugin_"

logger = logging.getLogger(__name__)


def _load_local_module(py_file: Path) -> ModuleType | None:
    """Import *py_file* under a private module name, or return None on failure."""
    module_name = f"{LOCAL_MODULE_PREFIX}{py_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("Could not create module spec for %s", py_file)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
        sys.modules.pop(module_name, None)
        return None
    return module


class PluginManager:
    """Owns the pluggy manager for the ``cmsctl`` hook specs."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(CmsctlHookSpec)
        self._loaded = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then local plugins from *local_dir*.

        Returns the names of every registered plugin afterwards.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register an already-built plugin object (e.g. a built-in)."""
        plugin_name = name or type(plugin).__name__
        self._pm.register(plugin, name=plugin_name)
        logger.debug("Registered plugin: %s", plugin_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """True once :meth:`discover_and_load` has run."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, hook_name: str, **payload: Any) -> list[str]:
        """Call every implementation of *hook_name* with its own error boundary.

        Returns one warning per implementation that raised; the others still
        run. Implementations may accept any subset of the hook's arguments.
        """
        warnings: list[str] = []
        for impl in getattr(self._pm.hook, hook_name).get_hookimpls():
            kwargs = {arg: payload[arg] for arg in impl.argnames}
            try:
                impl.function(**kwargs)
            except Exception:
                logger.debug(
                    "Plugin %s failed in %s", impl.plugin_name, hook_name, exc_info=True
                )
                warnings.append(f"Plugin {impl.plugin_name} failed in {hook_name}")
        return warnings

    # ------------------------------------------------------------------
    # Discovery helpers
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Register plugin classes from ``*.py`` files in *local_dir*.

        Files whose names start with ``_`` are helpers and are not loaded.
        Each class defined in a module that has hookimpl methods is
        instantiated with no arguments and registered as
        ``<module>.<Class>``.
        """
        if not local_dir.is_dir():
            return
        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module = _load_local_module(py_file)
            if module is None:
                continue
            for cls in self._plugin_classes(module):
                try:
                    instance = cls()
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        cls.__name__,
                        py_file,
                        exc_info=True,
                    )
                    continue
                self.register_plugin(instance, name=f"{module.__name__}.{cls.__name__}")

    def _plugin_classes(self, module: ModuleType) -> list[type]:
        return [
            obj
            for _, obj in inspect.getmembers(module, inspect.isclass)
            if obj.__module__ == module.__name__ and self._has_hook_impls(obj)
        ]

    def _normalize_plugin_instances(self) -> None:
        """Swap plugin classes registered from entry points for instances.

        An entry point may name a class rather than an object; pluggy would
        then call its hookimpls unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not (inspect.isclass(plugin) and self._has_hook_impls(plugin)):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                self._pm.register(plugin(), name=plugin_name)
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s", plugin_name, exc_info=True
                )

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """True if any public attribute of *cls* carries a ``cmsctl_impl`` marker."""
        marker = f"{PROJECT_NAME}_impl"
        return any(
            callable(attr) and getattr(attr, marker, None)
            for name in dir(cls)
            if not name.startswith("_")
            for attr in (getattr(cls, name, None),)
        )
