"""Loaded plugin records owned by the plugin manager."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from core.plugins.manifest import PluginManifest
from core.plugins.types import PreActionHook


class PluginStatus(str, Enum):
    """Plugin load states."""

    LOADED = "loaded"
    ERROR = "error"


@dataclass
class LoadedPlugin:
    """Represents a plugin whose manifest was loaded and validated."""

    manifest: PluginManifest
    path: str  # origin as given to the manager, or "<builtin>"
    status: PluginStatus = PluginStatus.LOADED
    error: Optional[str] = None
    pre_action_hook: Optional[PreActionHook] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def is_loaded(self) -> bool:
        return self.status == PluginStatus.LOADED

    def mark_error(self, message: str) -> None:
        self.status = PluginStatus.ERROR
        self.error = message

    def to_summary(self) -> dict:
        """Snapshot used by list_plugins()."""
        return {
            "name": self.manifest.name,
            "path": self.path,
            "status": self.status.value,
        }

    def to_dict(self) -> dict:
        """Serialize the plugin record with its manifest metadata."""
        return {
            "name": self.manifest.name,
            "version": self.manifest.version,
            "displayName": self.manifest.display_name or self.manifest.name,
            "description": self.manifest.description,
            "path": self.path,
            "status": self.status.value,
            "error": self.error,
            "commands": [command.name for command in self.manifest.commands],
            "capabilities": list(self.manifest.capabilities),
            "namespaces": self.manifest.namespaces,
        }
