"""Factories wiring the Core API services and the plugin manager."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from core.constants import CONFIG_FILE, DEFAULT_PLUGINS, PLUGIN_PATHS_ENV, STATE_DIR
from core.core_api import CoreApi
from core.plugins.manager import PluginManager
from core.services.config_service import ConfigService
from core.services.logger_service import LoggerService
from core.services.output_service import OutputService
from core.services.state_service import StateService

logger = logging.getLogger(__name__)


def get_env_plugin_paths() -> List[str]:
    """Extra plugin paths from LEDGER_CLI_PLUGIN_PATHS (colon separated)."""
    raw = os.getenv(PLUGIN_PATHS_ENV, "")
    return [path.strip() for path in raw.split(os.pathsep) if path.strip()]


def create_core_api(
    state_dir: Union[str, Path] = STATE_DIR,
    config_file: Union[str, Path] = CONFIG_FILE,
    output_format: Optional[str] = None,
) -> CoreApi:
    """Build the Core API facade. ``output_format`` overrides the configured format."""
    config = ConfigService(Path(config_file))
    api = CoreApi(
        state=StateService(Path(state_dir)),
        config=config,
        logger=LoggerService(),
        output=OutputService(format=output_format or config.get_format()),
    )
    logger.debug(f"Created Core API (state: {state_dir}, config: {config_file})")
    return api


def create_plugin_manager(api: CoreApi, default_plugins: Optional[List[Union[str, Path]]] = None) -> PluginManager:
    """Build the plugin manager and attach it to the facade.

    Default plugins are the bundled ones, followed by paths persisted in
    config and paths from the environment.
    """
    manager = PluginManager(api)
    if default_plugins is None:
        default_plugins = [*DEFAULT_PLUGINS, *api.config.get_plugin_paths(), *get_env_plugin_paths()]
    manager.set_default_plugins(default_plugins)
    api.plugins = manager
    logger.debug(f"Created PluginManager with {len(default_plugins)} default plugins")
    return manager
