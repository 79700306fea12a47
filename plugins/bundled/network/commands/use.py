"""network use"""

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import NETWORK_NAMESPACE, UseNetworkOutput
from .common import record_switch


def use_handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    network = args.args.get("network")
    if not network:
        return CommandExecutionResult.failure("Network name is required. Use --network <name>")

    args.logger.verbose(f"Switching to network: {network}")

    previous = args.config.get_current_network()
    try:
        args.config.set_current_network(network)
    except ValueError as e:
        return CommandExecutionResult.failure(f"Failed to switch network: {e}")

    args.state.set(NETWORK_NAMESPACE, "active", record_switch(network, previous))
    return CommandExecutionResult.success(UseNetworkOutput(active_network=network, previous_network=previous))
