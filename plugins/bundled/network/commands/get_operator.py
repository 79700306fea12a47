"""network get-operator

Legacy command: reports through the logger and ends the process itself.
"""

import sys

from core.plugins.types import CommandHandlerArgs


def get_operator_handler(args: CommandHandlerArgs) -> None:
    logger = args.logger
    config = args.config
    network = args.args.get("network")

    if network and network not in config.get_available_networks():
        logger.error(f"Network '{network}' is not available")
        logger.log(f"   Available networks: {', '.join(config.get_available_networks())}")
        sys.exit(1)

    target = network or config.get_current_network()
    logger.log(f"Getting operator for network: {target}")

    try:
        operator_id = config.get_operator_id(target)
    except ValueError as e:
        logger.error(f"Failed to get operator: {e}")
        sys.exit(1)

    if not operator_id:
        logger.warn(f"No operator configured for network: {target}")
        sys.exit(0)

    logger.log(f"Operator found for network: {target}")
    logger.log(f"   Account ID: {operator_id}")
    sys.exit(0)
