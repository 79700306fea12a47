"""plugin-management add"""

from pathlib import Path

from core.plugins.errors import PluginLoadError
from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import AddPluginOutput


async def add_handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    """Load a plugin to validate it, then remember its path for future runs."""
    path = args.args["path"]
    args.logger.log(f"Adding plugin from {path}...")

    try:
        plugin = await args.api.plugins.add_plugin(path)
    except PluginLoadError as e:
        return CommandExecutionResult.failure(str(e))

    if not plugin.is_loaded:
        args.api.plugins.remove_plugin(plugin.name)
        return CommandExecutionResult.failure(f"Plugin {plugin.name} failed to initialize: {plugin.error}")

    plugin_dir = str(Path(plugin.path).expanduser().resolve())
    added = args.config.add_plugin_path(plugin_dir)
    message = (
        f"Plugin {plugin.name} added successfully"
        if added
        else f"Plugin {plugin.name} was already registered"
    )
    return CommandExecutionResult.success(
        AddPluginOutput(name=plugin.name, path=plugin_dir, added=added, message=message)
    )
