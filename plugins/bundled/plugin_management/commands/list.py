"""plugin-management list"""

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import ListPluginsOutput, PluginSummary


def list_handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    manager = args.api.plugins
    args.logger.verbose("Getting plugin list...")

    plugins = []
    for summary in manager.list_plugins():
        plugin = manager.get_plugin(summary["name"])
        plugins.append(
            PluginSummary(
                name=plugin.name,
                display_name=plugin.manifest.display_name or plugin.name,
                version=plugin.manifest.version,
                status=summary["status"],
                path=summary["path"],
            )
        )
    return CommandExecutionResult.success(ListPluginsOutput(plugins=plugins, count=len(plugins)))
