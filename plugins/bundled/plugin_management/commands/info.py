"""plugin-management info"""

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import PluginDetails, PluginInfoOutput


def info_handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    name = args.args["name"]
    args.logger.verbose(f"Getting plugin information: {name}")

    plugin = args.api.plugins.get_plugin(name)
    if plugin is None:
        return CommandExecutionResult.success(
            PluginInfoOutput(found=False, message=f"Plugin '{name}' not found")
        )

    info = plugin.to_dict()
    details = PluginDetails(
        name=info["name"],
        display_name=info["displayName"],
        version=info["version"],
        status=info["status"],
        path=info["path"],
        description=info["description"],
        error=info["error"],
        commands=info["commands"],
        capabilities=info["capabilities"],
        namespaces=info["namespaces"],
    )
    return CommandExecutionResult.success(
        PluginInfoOutput(found=True, plugin=details, message="Plugin information retrieved successfully")
    )
