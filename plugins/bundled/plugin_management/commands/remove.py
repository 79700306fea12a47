"""plugin-management remove"""

from pathlib import Path

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import RemovePluginOutput


def remove_handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    name = args.args["name"]
    args.logger.log(f"Removing plugin {name}...")

    plugin = args.api.plugins.remove_plugin(name)
    if plugin is None:
        return CommandExecutionResult.failure(f"Plugin '{name}' not found")

    if args.config.remove_plugin_path(str(Path(plugin.path).expanduser().resolve())):
        message = f"Plugin {name} removed successfully"
    else:
        # Bundled plugins are not listed in config and come back on the next run
        message = f"Plugin {name} removed for this session; it is a default plugin and will load again"

    return CommandExecutionResult.success(RemovePluginOutput(name=name, removed=True, message=message))
