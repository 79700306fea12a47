"""Execution adapter - runs a bound command and applies the output contract."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, TYPE_CHECKING

from pydantic import ValidationError

from core.plugins.errors import HandlerContractError
from core.plugins.lifecycle import PluginLifecycle, invoke
from core.plugins.manifest import CommandSpec
from core.plugins.registry import LoadedPlugin
from core.plugins.types import CommandExecutionResult, CommandHandlerArgs, CommandStatus

if TYPE_CHECKING:
    from core.core_api import CoreApi

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class CommandExecutor:
    """Invokes command handlers and turns their results into exit codes.

    Never terminates the process. Structured commands always yield 0 or 1;
    legacy commands yield None, meaning the handler owned its own outcome.
    """

    def __init__(self, api: CoreApi, lifecycle: Optional[PluginLifecycle] = None):
        self.api = api
        self.lifecycle = lifecycle or PluginLifecycle()

    def _pre_action_hooks(self) -> Iterable[Any]:
        manager = self.api.plugins
        if manager is None:
            return []
        return manager.get_pre_action_hooks()

    async def execute(self, plugin: LoadedPlugin, command: CommandSpec, args: Dict[str, Any]) -> Optional[int]:
        context = f"{plugin.name} {command.name}"
        handler_args = CommandHandlerArgs.from_api(self.api, args)

        try:
            for hook in self._pre_action_hooks():
                await invoke(hook, plugin.name, command.name, args)
            handler = self.lifecycle.resolve_handler(plugin, command)
            result = await invoke(handler, handler_args)
        except Exception as e:
            logger.debug(f"Command '{context}' raised", exc_info=True)
            self.api.logger.error(f"Command '{context}' failed: {e}")
            return EXIT_FAILURE

        if not command.uses_output_contract:
            if result is not None:
                logger.debug(f"Legacy command '{context}' returned a value, ignoring it")
            return None

        try:
            execution = self._coerce_result(result)
        except HandlerContractError as e:
            self.api.logger.error(f"Internal error: command '{context}' {e}")
            return EXIT_FAILURE

        if execution.status != CommandStatus.SUCCESS:
            if execution.error_message:
                self.api.logger.error(execution.error_message)
            logger.info(f"Command '{context}' finished with status {execution.status.value}")
            return EXIT_FAILURE

        if execution.output_json is not None:
            return self._render(command, context, execution.output_json)
        return EXIT_SUCCESS

    def _coerce_result(self, result: Any) -> CommandExecutionResult:
        if result is None:
            raise HandlerContractError("declares an output schema but returned no result")
        if isinstance(result, CommandExecutionResult):
            return result
        if isinstance(result, dict):
            try:
                return CommandExecutionResult.model_validate(result)
            except ValidationError as e:
                raise HandlerContractError(f"returned a malformed result: {e}") from e
        raise HandlerContractError(
            f"must return a CommandExecutionResult, got {type(result).__name__}"
        )

    def _render(self, command: CommandSpec, context: str, output_json: str) -> int:
        # Import here to keep the output stack off the load path
        from core.services.output_service import OutputRenderError

        output = self.api.output
        try:
            output.handle_command_output(
                output_json=output_json,
                schema=command.output.output_schema,
                template=command.output.human_template,
                format=output.get_format(),
            )
        except OutputRenderError as e:
            self.api.logger.error(f"Failed to render output of '{context}': {e}")
            return EXIT_FAILURE
        return EXIT_SUCCESS
