"""Plugin manager - top-level orchestrator for the plugin system."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union, TYPE_CHECKING

from core.constants import CLI_VERSION
from core.plugins.binder import CommandBinder
from core.plugins.discovery import PluginDiscovery
from core.plugins.errors import PluginLoadError
from core.plugins.lifecycle import PluginLifecycle
from core.plugins.manifest import PluginManifest
from core.plugins.registry import LoadedPlugin, PluginStatus
from core.plugins.types import PreActionHook

if TYPE_CHECKING:
    from core.core_api import CoreApi

logger = logging.getLogger(__name__)

BUILTIN_PATH = "<builtin>"


class PluginManager:
    """Owns the loaded plugins and drives command registration.

    Coordinates discovery, loading, init/teardown hooks and namespace
    aggregation. Plugins are keyed by manifest name; loading a second
    plugin with the same name replaces the first.
    """

    def __init__(
        self,
        core_api: CoreApi,
        discovery: Optional[PluginDiscovery] = None,
        lifecycle: Optional[PluginLifecycle] = None,
        cli_version: str = CLI_VERSION,
    ):
        self.core_api = core_api
        self.discovery = discovery or PluginDiscovery()
        self.lifecycle = lifecycle or PluginLifecycle()
        self.cli_version = cli_version

        self._plugins: Dict[str, LoadedPlugin] = {}
        self._default_plugins: List[str] = []

    def set_default_plugins(self, paths: Sequence[Union[str, Path]]) -> None:
        """Record the plugin locations loaded by initialize(), in order."""
        self._default_plugins = [str(path) for path in paths]

    @property
    def default_plugins(self) -> List[str]:
        return list(self._default_plugins)

    async def initialize(self) -> None:
        """Load every default plugin, run init hooks, register namespaces.

        A plugin that fails to load is treated as an absent optional
        dependency: logged and skipped.
        """
        for path in self._default_plugins:
            try:
                self._load_from_path(path)
            except PluginLoadError as e:
                logger.info(f"Plugin not available: {e}")

        for plugin in list(self._plugins.values()):
            if plugin.is_loaded:
                await self.lifecycle.run_init(plugin, self.core_api)

        namespaces = self.get_all_namespaces()
        self.core_api.state.register_namespaces(namespaces)

        loaded = [plugin for plugin in self._plugins.values() if plugin.is_loaded]
        logger.info(
            f"Plugin system initialized, "
            f"{len(loaded)}/{len(self._default_plugins)} default plugins loaded"
        )

    async def add_plugin(self, path: Union[str, Path]) -> LoadedPlugin:
        """Load one plugin on request.

        Raises:
            PluginLoadError: If the plugin cannot be loaded
        """
        plugin = self._load_from_path(str(path))
        if await self.lifecycle.run_init(plugin, self.core_api):
            self.core_api.state.register_namespaces(plugin.manifest.namespaces)
        return plugin

    def load_manifest(self, manifest: PluginManifest, path: str = BUILTIN_PATH) -> LoadedPlugin:
        """Register an in-memory manifest (statically linked plugins)."""
        self._check_compatibility(manifest, path)
        return self._store(manifest, path)

    def remove_plugin(self, name: str) -> Optional[LoadedPlugin]:
        """Forget a plugin. Its teardown hook is not called.

        Returns:
            The removed record, or None if no plugin had that name
        """
        plugin = self._plugins.pop(name, None)
        if plugin is None:
            logger.debug(f"Plugin not loaded, nothing to remove: {name}")
            return None
        logger.info(f"Removed plugin: {name}")
        return plugin

    def list_plugins(self) -> List[dict]:
        return [plugin.to_summary() for plugin in self._plugins.values()]

    def get_plugin(self, name: str) -> Optional[LoadedPlugin]:
        return self._plugins.get(name)

    def get_all_namespaces(self) -> List[str]:
        """Union of namespaces declared by loaded plugins, first-declared order."""
        namespaces: List[str] = []
        for plugin in self._plugins.values():
            if not plugin.is_loaded:
                continue
            for namespace in plugin.manifest.namespaces:
                if namespace not in namespaces:
                    namespaces.append(namespace)
        return namespaces

    def get_pre_action_hooks(self) -> List[PreActionHook]:
        return [
            plugin.pre_action_hook
            for plugin in self._plugins.values()
            if plugin.is_loaded and plugin.pre_action_hook is not None
        ]

    def register_commands(self, binder: CommandBinder) -> None:
        """Create a command group per loaded plugin and bind all its commands."""
        for plugin in self._plugins.values():
            if not plugin.is_loaded:
                logger.debug(f"Skipping commands of plugin in {plugin.status.value} state: {plugin.name}")
                continue
            binder.add_group(plugin.name, plugin.manifest.description)
            for command in plugin.manifest.commands:
                binder.register_command(plugin, command)

    async def shutdown(self) -> None:
        """Run teardown hooks of loaded plugins."""
        for plugin in list(self._plugins.values()):
            if plugin.is_loaded:
                await self.lifecycle.run_teardown(plugin, self.core_api)
        logger.debug("All plugins torn down")

    def _load_from_path(self, path: str) -> LoadedPlugin:
        try:
            plugin_dir = self.discovery.resolve_plugin_dir(path)
            manifest = self.discovery.load_manifest(plugin_dir)
            self._check_compatibility(manifest, path)
        except Exception as e:
            raise PluginLoadError(f"Failed to load plugin from {path}: {e}") from e
        return self._store(manifest, path)

    def _check_compatibility(self, manifest: PluginManifest, path: str) -> None:
        if not manifest.is_compatible_with(self.cli_version):
            raise PluginLoadError(
                f"Plugin '{manifest.name}' at {path} requires CLI "
                f"'{manifest.compatibility.cli}', running {self.cli_version}"
            )

    def _store(self, manifest: PluginManifest, path: str) -> LoadedPlugin:
        if manifest.name in self._plugins:
            logger.info(f"Replacing plugin '{manifest.name}' with the one from {path}")
        plugin = LoadedPlugin(manifest=manifest, path=path, status=PluginStatus.LOADED)
        self._plugins[manifest.name] = plugin
        logger.info(f"Loaded plugin: {manifest.name} v{manifest.version} from {path}")
        return plugin
