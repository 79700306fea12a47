"""network list"""

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import ListNetworksOutput, NetworkSummary


async def list_handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    config = args.config

    try:
        current = config.get_current_network()
        networks = []
        for name in config.get_available_networks():
            network = config.get_network_config(name)
            networks.append(
                NetworkSummary(
                    name=name,
                    is_active=name == current,
                    is_testnet=network.is_testnet,
                    rpc_url=network.rpc_url,
                    mirror_node_url=network.mirror_node_url,
                    operator_id=network.operator_id,
                )
            )
        return CommandExecutionResult.success(ListNetworksOutput(networks=networks, active_network=current))
    except ValueError as e:
        return CommandExecutionResult.failure(f"Failed to list networks: {e}")
