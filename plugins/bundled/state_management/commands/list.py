"""state-management list"""

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import ListStateOutput
from .common import namespace_info


def handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    state = args.api.state
    namespace = args.args.get("namespace")

    args.logger.log("Listing state data...")

    try:
        infos = []
        if namespace:
            infos.append(namespace_info(state, namespace, state.list(namespace)))
        else:
            for ns in state.get_namespaces():
                entries = state.list(ns)
                # Empty namespaces are hidden from the overview
                if entries:
                    infos.append(namespace_info(state, ns, entries))

        output = ListStateOutput(
            namespaces=infos,
            total_namespaces=len(infos),
            total_entries=sum(info.entry_count for info in infos),
            total_size=sum(info.size for info in infos),
            filtered_namespace=namespace,
        )
        return CommandExecutionResult.success(output)
    except Exception as e:
        return CommandExecutionResult.failure(f"Failed to list state data: {e}")
