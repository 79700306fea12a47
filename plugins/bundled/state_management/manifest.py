"""State management plugin - inspect, clear and back up state of all plugins."""

from core.plugins.manifest import CommandOption, CommandOutputSpec, CommandSpec, PluginManifest

from .schema import (
    CLEAR_STATE_TEMPLATE,
    LIST_STATE_TEMPLATE,
    STATE_BACKUP_TEMPLATE,
    STATE_INFO_TEMPLATE,
    STATE_STATS_TEMPLATE,
    ClearStateOutput,
    ListStateOutput,
    StateBackupOutput,
    StateInfoOutput,
    StateStatsOutput,
)

manifest = PluginManifest(
    name="state-management",
    version="1.0.0",
    display_name="State Management",
    description="Manage state data for all plugins",
    capabilities=["state:manage", "state:backup"],
    commands=[
        CommandSpec(
            name="list",
            summary="List all state data",
            description="Show all stored state data across plugins",
            options=[
                CommandOption(name="namespace", short="n", description="Only list this namespace"),
            ],
            handler="./commands/list",
            output=CommandOutputSpec(schema=ListStateOutput, human_template=LIST_STATE_TEMPLATE),
        ),
        CommandSpec(
            name="clear",
            summary="Clear state data",
            description="Clear state data for a specific namespace or all data",
            options=[
                CommandOption(name="namespace", short="n", description="Only clear this namespace"),
                CommandOption(name="confirm", short="c", type="boolean", description="Confirm the deletion"),
            ],
            handler="./commands/clear",
            output=CommandOutputSpec(schema=ClearStateOutput, human_template=CLEAR_STATE_TEMPLATE),
        ),
        CommandSpec(
            name="info",
            summary="Show state information",
            description="Display information about stored state data",
            handler="./commands/info",
            output=CommandOutputSpec(schema=StateInfoOutput, human_template=STATE_INFO_TEMPLATE),
        ),
        CommandSpec(
            name="backup",
            summary="Create state backup",
            description="Create a backup of all state data",
            options=[
                CommandOption(name="output", short="o", description="Backup file path"),
            ],
            handler="./commands/backup",
            output=CommandOutputSpec(schema=StateBackupOutput, human_template=STATE_BACKUP_TEMPLATE),
        ),
        CommandSpec(
            name="stats",
            summary="Show state statistics",
            description="Display detailed statistics about stored state data",
            handler="./commands/stats",
            output=CommandOutputSpec(schema=StateStatsOutput, human_template=STATE_STATS_TEMPLATE),
        ),
    ],
)
