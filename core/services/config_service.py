"""CLI configuration service - manages <home>/config.json and network settings."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from core.constants import DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "testnet"


class NetworkConfig(BaseModel):
    """Endpoints and operator of a single ledger network."""

    name: str
    rpc_url: str = Field(..., description="JSON-RPC relay endpoint")
    mirror_node_url: str = Field(..., description="Mirror node REST endpoint")
    is_testnet: bool = True
    operator_id: Optional[str] = Field(default=None, description="Operator account ID, e.g. 0.0.1234")


DEFAULT_NETWORKS: Dict[str, Dict[str, Any]] = {
    "localnet": {
        "rpc_url": "http://localhost:7546",
        "mirror_node_url": "http://localhost:8081/api/v1",
        "is_testnet": True,
    },
    "testnet": {
        "rpc_url": "https://testnet.hashio.io/api",
        "mirror_node_url": "https://testnet.mirrornode.hedera.com/api/v1",
        "is_testnet": True,
    },
    "previewnet": {
        "rpc_url": "https://previewnet.hashio.io/api",
        "mirror_node_url": "https://previewnet.mirrornode.hedera.com/api/v1",
        "is_testnet": True,
    },
    "mainnet": {
        "rpc_url": "https://mainnet.hashio.io/api",
        "mirror_node_url": "https://mainnet.mirrornode.hedera.com/api/v1",
        "is_testnet": False,
    },
}


class ConfigService:
    """Manages the CLI configuration file.

    Config format:
    {
        "network": "testnet",
        "format": "human",
        "plugins": ["/path/to/extra/plugin"],
        "networks": {
            "testnet": {"rpc_url": "...", "mirror_node_url": "...", "operator_id": "0.0.2"}
        }
    }

    Environment overrides (not persisted): LEDGER_CLI_NETWORK,
    LEDGER_CLI_FORMAT and <NETWORK>_OPERATOR_ID.
    """

    def __init__(self, config_file: Path):
        self.config_file = Path(config_file)
        self._config: Dict[str, Any] = self._load()

    def _defaults(self) -> Dict[str, Any]:
        return {
            "network": DEFAULT_NETWORK,
            "format": DEFAULT_OUTPUT_FORMAT,
            "plugins": [],
            "networks": {},
        }

    def _load(self) -> Dict[str, Any]:
        """Load config from file, falling back to defaults if not found."""
        config = self._defaults()
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    config.update(loaded)
                else:
                    logger.error(f"Ignoring malformed config file: {self.config_file}")
            except (json.JSONDecodeError, IOError) as e:
                logger.error(f"Error loading config: {e}")
        return config

    def _save(self) -> None:
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved config to {self.config_file}")

    # Networks

    def get_available_networks(self) -> List[str]:
        names = list(DEFAULT_NETWORKS)
        for name in self._config.get("networks", {}):
            if name not in names:
                names.append(name)
        return names

    def get_current_network(self) -> str:
        return os.getenv("LEDGER_CLI_NETWORK") or self._config.get("network", DEFAULT_NETWORK)

    def set_current_network(self, network: str) -> None:
        if network not in self.get_available_networks():
            raise ValueError(
                f"Unknown network '{network}'. Available: {', '.join(self.get_available_networks())}"
            )
        self._config["network"] = network
        self._save()
        logger.info(f"Switched network to: {network}")

    def get_network_config(self, network: Optional[str] = None) -> NetworkConfig:
        """Merged built-in and user settings for a network.

        Raises:
            ValueError: If the network is unknown or its settings are invalid
        """
        name = network or self.get_current_network()
        settings: Dict[str, Any] = dict(DEFAULT_NETWORKS.get(name, {}))
        settings.update(self._config.get("networks", {}).get(name, {}))
        if not settings:
            raise ValueError(f"Unknown network '{name}'")

        env_operator = os.getenv(f"{name.upper()}_OPERATOR_ID")
        if env_operator:
            settings["operator_id"] = env_operator

        try:
            return NetworkConfig(name=name, **settings)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration for network '{name}': {e}") from e

    def get_operator_id(self, network: Optional[str] = None) -> Optional[str]:
        return self.get_network_config(network).operator_id

    # Output

    def get_format(self) -> str:
        value = os.getenv("LEDGER_CLI_FORMAT") or self._config.get("format", DEFAULT_OUTPUT_FORMAT)
        if value not in OUTPUT_FORMATS:
            logger.warning(f"Unknown output format '{value}', using {DEFAULT_OUTPUT_FORMAT}")
            return DEFAULT_OUTPUT_FORMAT
        return value

    # Plugin paths

    def get_plugin_paths(self) -> List[str]:
        return list(self._config.get("plugins", []))

    def add_plugin_path(self, path: str) -> bool:
        """Persist an extra plugin path. Returns False if it was already present."""
        paths = self._config.setdefault("plugins", [])
        if path in paths:
            return False
        paths.append(path)
        self._save()
        logger.info(f"Added plugin path: {path}")
        return True

    def remove_plugin_path(self, path: str) -> bool:
        """Forget an extra plugin path. Returns False if it was not present."""
        paths = self._config.get("plugins", [])
        if path not in paths:
            return False
        paths.remove(path)
        self._save()
        logger.info(f"Removed plugin path: {path}")
        return True
