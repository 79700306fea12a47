"""Plugin discovery - resolves and evaluates a plugin's manifest.py."""

import hashlib
import importlib.machinery
import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Union

from core.constants import MANIFEST_ATTRIBUTE, MANIFEST_FILE
from core.plugins.errors import PluginLoadError
from core.plugins.manifest import PluginManifest

logger = logging.getLogger(__name__)


def plugin_package_name(plugin_dir: Path) -> str:
    """Name of the synthetic package a plugin directory is imported under.

    Derived from the resolved path so two plugins with the same directory
    name never share modules.
    """
    digest = hashlib.sha1(str(plugin_dir).encode("utf-8")).hexdigest()[:8]
    safe_name = re.sub(r"\W", "_", plugin_dir.name)
    return f"ledger_cli_plugin_{safe_name}_{digest}"


def unload_plugin_modules(package_name: str) -> None:
    """Drop a plugin package and all of its submodules from sys.modules."""
    prefix = package_name + "."
    for module_name in list(sys.modules):
        if module_name == package_name or module_name.startswith(prefix):
            del sys.modules[module_name]


class PluginDiscovery:
    """Loads PluginManifest values from plugin directories."""

    MANIFEST_FILE = MANIFEST_FILE

    def resolve_plugin_dir(self, plugin_path: Union[str, Path]) -> Path:
        return Path(plugin_path).expanduser().resolve()

    def load_manifest(self, plugin_path: Union[str, Path]) -> PluginManifest:
        """Evaluate ``<plugin_path>/manifest.py`` and return its manifest.

        The plugin directory is imported as its own package, so the manifest
        and its command modules may use relative imports.

        Raises:
            PluginLoadError: If the manifest file or value is missing
            Exception: Whatever the manifest module raises while executing
        """
        plugin_dir = self.resolve_plugin_dir(plugin_path)
        manifest_file = plugin_dir / self.MANIFEST_FILE
        if not manifest_file.is_file():
            raise PluginLoadError(f"No {self.MANIFEST_FILE} found at {plugin_dir}")

        package_name = plugin_package_name(plugin_dir)
        # Reloading a path re-executes the manifest from scratch
        unload_plugin_modules(package_name)

        try:
            sys.modules[package_name] = self._create_package(package_name, plugin_dir)

            spec = importlib.util.spec_from_file_location(f"{package_name}.manifest", manifest_file)
            if spec is None or spec.loader is None:
                raise PluginLoadError(f"Cannot create module spec for {manifest_file}")

            module = importlib.util.module_from_spec(spec)
            sys.modules[spec.name] = module
            spec.loader.exec_module(module)

            manifest = self._extract_manifest(module, plugin_dir)
        except Exception:
            unload_plugin_modules(package_name)
            raise

        logger.debug(f"Evaluated manifest '{manifest.name}' at {plugin_dir}")
        return manifest

    def _create_package(self, package_name: str, plugin_dir: Path) -> ModuleType:
        spec = importlib.machinery.ModuleSpec(package_name, None, is_package=True)
        spec.submodule_search_locations = [str(plugin_dir)]
        return importlib.util.module_from_spec(spec)

    def _extract_manifest(self, module: ModuleType, plugin_dir: Path) -> PluginManifest:
        value = getattr(module, MANIFEST_ATTRIBUTE, None)
        if value is None:
            raise PluginLoadError(f"No manifest found in {plugin_dir}")
        if isinstance(value, PluginManifest):
            return value
        if isinstance(value, dict):
            return PluginManifest.model_validate(value)
        raise PluginLoadError(
            f"'{MANIFEST_ATTRIBUTE}' in {plugin_dir / self.MANIFEST_FILE} must be a "
            f"PluginManifest or dict, got {type(value).__name__}"
        )
