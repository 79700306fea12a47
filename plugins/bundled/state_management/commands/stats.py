"""state-management stats"""

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import StateStatsOutput
from .common import namespace_info


def handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    state = args.api.state
    args.logger.log("Getting state statistics...")

    try:
        namespaces = state.get_namespaces()
        infos = [namespace_info(state, ns, state.list(ns)) for ns in namespaces]
        output = StateStatsOutput(
            total_namespaces=len(namespaces),
            total_entries=sum(info.entry_count for info in infos),
            total_size=sum(info.size for info in infos),
            namespaces=infos,
        )
        return CommandExecutionResult.success(output)
    except Exception as e:
        return CommandExecutionResult.failure(f"Failed to get statistics: {e}")
