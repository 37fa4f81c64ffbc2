"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy schema-store and plugin initialization
and centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import click

from cmsctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from cmsctl.config.settings import CmsSettings
    from cmsctl.infrastructure.schema_store import SchemaStore
    from cmsctl.plugins.manager import PluginManager
    from cmsctl.services.base import BaseService
    from cmsctl.services.result import ServiceResult

ServiceT = TypeVar("ServiceT", bound="BaseService")


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store and plugins are created on first use so ``--help`` and
    ``--version`` never touch the filesystem or import plugins.
    """

    def __init__(self, settings: CmsSettings) -> None:
        self.settings = settings
        self._store: SchemaStore | None = None
        self._plugins: PluginManager | None = None

        from cmsctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> SchemaStore:
        """The schema store over ``settings.schema_dir``."""
        if self._store is None:
            from cmsctl.infrastructure.schema_store import SchemaStore

            self._store = SchemaStore(self.settings.schema_dir)
        return self._store

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager with the built-in trace plugin plus discovered ones."""
        if self._plugins is None:
            from cmsctl.plugins.builtins.trace import TracePlugin
            from cmsctl.plugins.manager import PluginManager

            pm = PluginManager()
            pm.register_plugin(TracePlugin(), name="trace")
            if self.settings.plugins.enabled:
                pm.discover_and_load(local_dir=self.settings.plugin_dir)
            self._plugins = pm
        return self._plugins

    def service(self, service_cls: type[ServiceT]) -> ServiceT:
        """Build a service wired to this context's settings, store, and plugins."""
        return service_cls(self.settings, store=self.store, plugins=self.plugins)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
