"""Global constants for the ledger CLI."""

import os
from pathlib import Path

CLI_NAME = "ledger-cli"
CLI_VERSION = "1.0.0"

# Directory paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# CLI home directory (supports LEDGER_CLI_HOME env var, relative paths resolve against cwd)
_home_env = os.getenv("LEDGER_CLI_HOME", "")
if _home_env:
    _home_path = Path(_home_env)
    CLI_HOME = _home_path if _home_path.is_absolute() else (Path.cwd() / _home_path).resolve()
else:
    CLI_HOME = Path.home() / ".ledger-cli"

STATE_DIR = CLI_HOME / "state"                        # <home>/state (namespace storage files)
CONFIG_FILE = CLI_HOME / "config.json"                # <home>/config.json
LOG_DIR = CLI_HOME / "logs"                           # <home>/logs

BUNDLED_PLUGINS_DIR = PROJECT_ROOT / "plugins" / "bundled"

# Plugins loaded on every start, in this order
DEFAULT_PLUGINS = [
    BUNDLED_PLUGINS_DIR / "plugin_management",
    BUNDLED_PLUGINS_DIR / "state_management",
    BUNDLED_PLUGINS_DIR / "network",
]

# Extra plugin paths from the environment, colon separated
PLUGIN_PATHS_ENV = "LEDGER_CLI_PLUGIN_PATHS"

MANIFEST_FILE = "manifest.py"
MANIFEST_ATTRIBUTE = "manifest"

OUTPUT_FORMATS = ("human", "json")
DEFAULT_OUTPUT_FORMAT = "human"
