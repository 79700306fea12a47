"""state-management info"""

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import StateInfoOutput
from .common import namespace_info


def handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    state = args.api.state
    args.logger.log("Getting state information...")

    try:
        infos = [namespace_info(state, ns, state.list(ns)) for ns in state.get_namespaces()]
        output = StateInfoOutput(
            storage_directory=state.get_storage_directory(),
            is_initialized=state.is_initialized(),
            total_entries=sum(info.entry_count for info in infos),
            total_size=sum(info.size for info in infos),
            namespaces=infos,
        )
        return CommandExecutionResult.success(output)
    except Exception as e:
        return CommandExecutionResult.failure(f"Failed to get state information: {e}")
