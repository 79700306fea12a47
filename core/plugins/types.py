"""Handler-facing types: the argument bundle and the structured result contract."""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Union, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from core.core_api import CoreApi
    from core.services.config_service import ConfigService
    from core.services.logger_service import LoggerService
    from core.services.state_service import StateService


class CommandStatus(str, Enum):
    """Outcome reported by a structured handler."""

    SUCCESS = "success"
    FAILURE = "failure"
    PARTIAL = "partial"


class CommandExecutionResult(BaseModel):
    """Value returned by handlers whose command declares an output spec.

    ``output_json`` is a serialized JSON document matching the declared
    output schema and is expected on success. ``error_message`` is meant
    for humans and accompanies failure and partial results.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: CommandStatus
    error_message: Optional[str] = Field(default=None, alias="errorMessage")
    output_json: Optional[str] = Field(default=None, alias="outputJson")

    @classmethod
    def success(cls, output: Any = None) -> "CommandExecutionResult":
        return cls(status=CommandStatus.SUCCESS, output_json=_dump_output(output))

    @classmethod
    def failure(cls, message: str) -> "CommandExecutionResult":
        return cls(status=CommandStatus.FAILURE, error_message=message)

    @classmethod
    def partial(cls, message: str, output: Any = None) -> "CommandExecutionResult":
        return cls(status=CommandStatus.PARTIAL, error_message=message, output_json=_dump_output(output))

    @property
    def is_success(self) -> bool:
        return self.status == CommandStatus.SUCCESS


@dataclass
class CommandHandlerArgs:
    """Argument bundle passed to every command handler.

    ``state``, ``config`` and ``logger`` are the same objects reachable
    through ``api``; they are exposed for convenience only.
    """

    args: Dict[str, Any]
    api: CoreApi
    state: StateService
    config: ConfigService
    logger: LoggerService

    @classmethod
    def from_api(cls, api: CoreApi, args: Dict[str, Any]) -> "CommandHandlerArgs":
        return cls(args=args, api=api, state=api.state, config=api.config, logger=api.logger)


@dataclass
class PluginContext:
    """Context passed to a plugin's init and teardown hooks."""

    api: CoreApi
    state: StateService
    config: ConfigService
    logger: LoggerService

    @classmethod
    def from_api(cls, api: CoreApi) -> "PluginContext":
        return cls(api=api, state=api.state, config=api.config, logger=api.logger)


HandlerResult = Union[None, CommandExecutionResult, Dict[str, Any]]
CommandHandler = Callable[[CommandHandlerArgs], Union[HandlerResult, Awaitable[HandlerResult]]]

# Returned by a plugin's init hook; called as hook(plugin_name, command_name, args) before each command
PreActionHook = Callable[[str, str, Dict[str, Any]], Any]


def _dump_output(output: Any) -> Optional[str]:
    if output is None:
        return None
    if isinstance(output, str):
        return output
    if isinstance(output, BaseModel):
        return output.model_dump_json(exclude_none=True)
    return json.dumps(output, ensure_ascii=False)
