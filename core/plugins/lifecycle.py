"""Plugin lifecycle management - handler resolution and init/teardown hooks."""
from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Optional, TYPE_CHECKING

from core.plugins.discovery import plugin_package_name
from core.plugins.errors import HandlerResolutionError
from core.plugins.manifest import CommandSpec
from core.plugins.registry import LoadedPlugin
from core.plugins.types import PluginContext

if TYPE_CHECKING:
    from core.core_api import CoreApi

logger = logging.getLogger(__name__)

HANDLER_ATTRIBUTE = "handler"


async def invoke(func: Callable[..., Any], *args: Any) -> Any:
    """Call ``func`` and await the result when it is awaitable."""
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def handler_module_path(handler: str) -> str:
    """Turn ``./commands/list`` or ``commands/list.py`` into ``commands.list``."""
    path = handler.strip().replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    if path.endswith(".py"):
        path = path[:-3]
    return ".".join(part for part in path.split("/") if part)


class PluginLifecycle:
    """Resolves command handlers and runs plugin init/teardown hooks."""

    def resolve_handler(self, plugin: LoadedPlugin, command: CommandSpec) -> Callable[..., Any]:
        """Return the callable behind ``command.handler``.

        Path-string handlers are imported on first use and cached by the
        import system afterwards.

        Raises:
            HandlerResolutionError: If the module or exported callable is missing
        """
        if callable(command.handler):
            return command.handler

        module = self._import_handler_module(plugin, command.handler)
        fallback = f"{command.name.replace('-', '_')}_handler"
        for attribute in (HANDLER_ATTRIBUTE, fallback):
            func = getattr(module, attribute, None)
            if func is None:
                continue
            if not callable(func):
                raise HandlerResolutionError(
                    f"'{attribute}' in handler module '{command.handler}' is not callable"
                )
            return func

        raise HandlerResolutionError(
            f"Handler module '{command.handler}' of plugin '{plugin.name}' "
            f"exports neither '{HANDLER_ATTRIBUTE}' nor '{fallback}'"
        )

    def _import_handler_module(self, plugin: LoadedPlugin, handler: str) -> ModuleType:
        dotted = handler_module_path(handler)
        if not dotted:
            raise HandlerResolutionError(f"Empty handler path in plugin '{plugin.name}'")

        plugin_dir = Path(plugin.path).expanduser().resolve()
        package_name = plugin_package_name(plugin_dir)
        try:
            if package_name in sys.modules:
                return importlib.import_module(f"{package_name}.{dotted}")
            return self._import_standalone(plugin_dir, dotted)
        except HandlerResolutionError:
            raise
        except Exception as e:
            raise HandlerResolutionError(
                f"Cannot import handler '{handler}' of plugin '{plugin.name}': {e}"
            ) from e

    def _import_standalone(self, plugin_dir: Path, dotted: str) -> ModuleType:
        """Load a handler module by file location for plugins without a package."""
        relative = Path(*dotted.split("."))
        module_file = plugin_dir / relative.with_suffix(".py")
        if not module_file.is_file():
            module_file = plugin_dir / relative / "__init__.py"
        if not module_file.is_file():
            raise HandlerResolutionError(f"Handler module not found: {plugin_dir / relative}")

        module_name = f"ledger_cli_handler_{dotted.replace('.', '_')}"
        spec = importlib.util.spec_from_file_location(module_name, module_file)
        if spec is None or spec.loader is None:
            raise HandlerResolutionError(f"Cannot create module spec for {module_file}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    async def run_init(self, plugin: LoadedPlugin, api: CoreApi) -> bool:
        """Call the plugin's init hook and keep any pre-action hook it returns.

        Returns:
            True if the plugin stays loaded
        """
        init = plugin.manifest.init
        if init is None:
            return True

        try:
            hook: Optional[Any] = await invoke(init, PluginContext.from_api(api))
        except Exception as e:
            plugin.mark_error(f"init failed: {e}")
            logger.warning(f"Plugin {plugin.name} init failed: {e}")
            return False

        if hook is not None:
            if not callable(hook):
                plugin.mark_error("init returned a non-callable pre-action hook")
                logger.warning(f"Plugin {plugin.name} init returned {type(hook).__name__}, expected a callable")
                return False
            plugin.pre_action_hook = hook

        logger.debug(f"Initialized plugin: {plugin.name}")
        return True

    async def run_teardown(self, plugin: LoadedPlugin, api: CoreApi) -> bool:
        """Call the plugin's teardown hook.

        Returns:
            True if teardown finished without raising
        """
        teardown = plugin.manifest.teardown
        if teardown is None:
            return True

        try:
            await invoke(teardown, PluginContext.from_api(api))
            logger.debug(f"Tore down plugin: {plugin.name}")
            return True
        except Exception as e:
            logger.error(f"Failed to tear down plugin {plugin.name}: {e}")
            return False
