"""state-management clear"""

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import ClearStateOutput


def clear_handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    state = args.api.state
    namespace = args.args.get("namespace")

    if not args.args.get("confirm"):
        if namespace:
            message = f"This will clear all data in namespace: {namespace}. Add --confirm flag to proceed."
        else:
            message = "This will clear ALL state data across all plugins. Add --confirm flag to proceed."
        return CommandExecutionResult.failure(message)

    args.logger.log("Clearing state data...")

    try:
        if namespace:
            cleared = len(state.list(namespace))
            state.clear(namespace)
            output = ClearStateOutput(
                cleared=True,
                namespace=namespace,
                entries_cleared=cleared,
                message=f"Cleared {cleared} entries from namespace: {namespace}",
            )
        else:
            namespaces = state.get_namespaces()
            cleared = 0
            for ns in namespaces:
                entries = state.list(ns)
                if entries:
                    state.clear(ns)
                    cleared += len(entries)
            output = ClearStateOutput(
                cleared=True,
                entries_cleared=cleared,
                total_namespaces=len(namespaces),
                message=f"Cleared {cleared} total entries across {len(namespaces)} namespaces",
            )
        return CommandExecutionResult.success(output)
    except Exception as e:
        return CommandExecutionResult.failure(f"Failed to clear state data: {e}")
