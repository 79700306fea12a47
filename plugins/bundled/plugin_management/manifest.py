"""Plugin management plugin - add, remove and inspect plugins."""

from core.plugins.manifest import CommandOption, CommandOutputSpec, CommandSpec, PluginManifest

from .commands.add import add_handler
from .commands.info import info_handler
from .commands.list import list_handler
from .commands.remove import remove_handler
from .schema import (
    ADD_PLUGIN_TEMPLATE,
    LIST_PLUGINS_TEMPLATE,
    PLUGIN_INFO_TEMPLATE,
    REMOVE_PLUGIN_TEMPLATE,
    AddPluginOutput,
    ListPluginsOutput,
    PluginInfoOutput,
    RemovePluginOutput,
)

manifest = PluginManifest(
    name="plugin-management",
    version="1.0.0",
    display_name="Plugin Management",
    description="Manage plugins (add, remove, list, info)",
    capabilities=["plugin:manage", "plugin:list", "plugin:info"],
    commands=[
        CommandSpec(
            name="add",
            summary="Add a plugin from path",
            description="Load a plugin directory and keep it for future runs",
            options=[
                CommandOption(name="path", short="p", required=True, description="Plugin directory"),
            ],
            handler=add_handler,
            output=CommandOutputSpec(schema=AddPluginOutput, human_template=ADD_PLUGIN_TEMPLATE),
        ),
        CommandSpec(
            name="remove",
            summary="Remove a plugin",
            description="Remove a plugin from the system",
            options=[
                CommandOption(name="name", short="n", required=True, description="Plugin name"),
            ],
            handler=remove_handler,
            output=CommandOutputSpec(schema=RemovePluginOutput, human_template=REMOVE_PLUGIN_TEMPLATE),
        ),
        CommandSpec(
            name="list",
            summary="List all plugins",
            description="Show all loaded plugins",
            handler=list_handler,
            output=CommandOutputSpec(schema=ListPluginsOutput, human_template=LIST_PLUGINS_TEMPLATE),
        ),
        CommandSpec(
            name="info",
            summary="Get plugin information",
            description="Show detailed information about a specific plugin",
            options=[
                CommandOption(name="name", short="n", required=True, description="Plugin name"),
            ],
            handler=info_handler,
            output=CommandOutputSpec(schema=PluginInfoOutput, human_template=PLUGIN_INFO_TEMPLATE),
        ),
    ],
)
