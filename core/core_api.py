"""Core API facade handed to every plugin handler and hook."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from core.services.config_service import ConfigService
from core.services.logger_service import LoggerService
from core.services.output_service import OutputService
from core.services.state_service import StateService

if TYPE_CHECKING:
    from core.plugins.manager import PluginManager


@dataclass
class CoreApi:
    """Capability surface available to plugins.

    ``plugins`` is attached after construction because the plugin manager
    itself depends on the facade.
    """

    state: StateService
    config: ConfigService
    logger: LoggerService
    output: OutputService
    plugins: Optional[PluginManager] = field(default=None, repr=False)
