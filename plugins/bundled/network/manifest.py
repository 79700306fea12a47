"""Network plugin - list and switch ledger networks."""

import logging

from core.plugins.manifest import (
    CommandOption,
    CommandOutputSpec,
    CommandSpec,
    CompatibilityRange,
    PluginManifest,
    PluginStateSchema,
)

from .commands.list import list_handler
from .commands.use import use_handler
from .schema import (
    LIST_NETWORKS_TEMPLATE,
    NETWORK_NAMESPACE,
    NETWORK_STATE_SCHEMA,
    USE_NETWORK_TEMPLATE,
    ListNetworksOutput,
    UseNetworkOutput,
)

logger = logging.getLogger(__name__)


def init(context):
    """Warn early when the configured network is unknown."""
    current = context.config.get_current_network()
    if current not in context.config.get_available_networks():
        context.logger.warn(f"Configured network '{current}' is unknown, use 'network use' to pick one")
    logger.debug(f"Network plugin initialized, active network: {current}")


manifest = PluginManifest(
    name="network",
    version="1.0.0",
    display_name="Network Plugin",
    description="Manage ledger network configurations",
    compatibility=CompatibilityRange(cli="^1.0.0", core="^1.0.0", api="^1.0.0"),
    capabilities=["state:read", "state:write", "config:read", "config:write"],
    commands=[
        CommandSpec(
            name="list",
            summary="List all available networks",
            description="List all available networks with their configuration",
            handler=list_handler,
            output=CommandOutputSpec(schema=ListNetworksOutput, human_template=LIST_NETWORKS_TEMPLATE),
        ),
        CommandSpec(
            name="use",
            summary="Switch to a specific network",
            description="Switch the active network to the specified network name",
            options=[
                CommandOption(
                    name="network",
                    short="N",
                    required=True,
                    description="Network name (testnet, mainnet, previewnet, localnet)",
                ),
            ],
            handler=use_handler,
            output=CommandOutputSpec(schema=UseNetworkOutput, human_template=USE_NETWORK_TEMPLATE),
        ),
        CommandSpec(
            name="get-operator",
            summary="Get operator for a network",
            description="Show the operator account configured for a network",
            options=[
                CommandOption(
                    name="network",
                    short="n",
                    description="Target network (defaults to current network)",
                ),
            ],
            handler="commands/get_operator",
        ),
    ],
    state_schemas=[
        PluginStateSchema(namespace=NETWORK_NAMESPACE, version=1, json_schema=NETWORK_STATE_SCHEMA, scope="profile"),
    ],
    init=init,
)
