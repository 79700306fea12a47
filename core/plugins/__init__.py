"""Plugin system for ledger-cli.

Imports are lazy so plugin manifests can import the manifest models without
pulling in the binder, executor and output stack.
"""

__all__ = [
    "PluginManifest",
    "CommandSpec",
    "CommandOption",
    "CommandOutputSpec",
    "PluginStateSchema",
    "CommandExecutionResult",
    "CommandHandlerArgs",
    "CommandStatus",
    "PluginContext",
    "LoadedPlugin",
    "PluginStatus",
    "PluginDiscovery",
    "PluginLifecycle",
    "CommandBinder",
    "CommandExecutor",
    "PluginManager",
]


def __getattr__(name):
    if name in ("PluginManifest", "CommandSpec", "CommandOption", "CommandOutputSpec", "PluginStateSchema"):
        from core.plugins import manifest
        return getattr(manifest, name)
    if name in ("CommandExecutionResult", "CommandHandlerArgs", "CommandStatus", "PluginContext"):
        from core.plugins import types
        return getattr(types, name)
    if name in ("LoadedPlugin", "PluginStatus"):
        from core.plugins import registry
        return getattr(registry, name)
    if name == "PluginDiscovery":
        from core.plugins.discovery import PluginDiscovery
        return PluginDiscovery
    if name == "PluginLifecycle":
        from core.plugins.lifecycle import PluginLifecycle
        return PluginLifecycle
    if name == "CommandBinder":
        from core.plugins.binder import CommandBinder
        return CommandBinder
    if name == "CommandExecutor":
        from core.plugins.executor import CommandExecutor
        return CommandExecutor
    if name == "PluginManager":
        from core.plugins.manager import PluginManager
        return PluginManager
    raise AttributeError(f"module 'core.plugins' has no attribute {name!r}")
