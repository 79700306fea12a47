"""Namespaced key/value state persisted as one JSON file per namespace."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

STORAGE_SUFFIX = "-storage.json"


class StateService:
    """Manages ``<storage_dir>/<namespace>-storage.json`` files.

    File format:
    {
        "data": {
            "<key>": <value>
        }
    }

    Namespaces are created on first use. Every write is flushed to disk
    immediately.
    """

    def __init__(self, storage_dir: Path):
        self.storage_dir = Path(storage_dir)
        self._stores: Dict[str, Dict[str, Any]] = {}
        self._ensure_storage_dir()
        self._discover_existing_namespaces()

    def _ensure_storage_dir(self) -> None:
        if not self.storage_dir.exists():
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created state directory: {self.storage_dir}")

    def _discover_existing_namespaces(self) -> None:
        namespaces = sorted(
            path.name[: -len(STORAGE_SUFFIX)]
            for path in self.storage_dir.glob(f"*{STORAGE_SUFFIX}")
        )
        for namespace in namespaces:
            self._get_store(namespace)
        if namespaces:
            logger.debug(f"Discovered {len(namespaces)} existing namespaces: {', '.join(namespaces)}")

    def _storage_file(self, namespace: str) -> Path:
        return self.storage_dir / f"{namespace}{STORAGE_SUFFIX}"

    def _load(self, namespace: str) -> Dict[str, Any]:
        """Load a namespace from disk, starting empty if missing or unreadable."""
        path = self._storage_file(namespace)
        if path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    content = json.load(f)
                data = content.get("data", {}) if isinstance(content, dict) else {}
                if isinstance(data, dict):
                    return data
                logger.error(f"Ignoring malformed state file: {path}")
            except (json.JSONDecodeError, IOError) as e:
                logger.error(f"Error loading state namespace '{namespace}': {e}")
        return {}

    def _save(self, namespace: str) -> None:
        self._ensure_storage_dir()
        path = self._storage_file(namespace)
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"data": self._stores[namespace]}, f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved state namespace '{namespace}' to {path}")

    def _get_store(self, namespace: str) -> Dict[str, Any]:
        if namespace not in self._stores:
            self._stores[namespace] = self._load(namespace)
            logger.debug(f"Created store for namespace: {namespace}")
        return self._stores[namespace]

    def register_namespaces(self, namespaces: Iterable[str]) -> None:
        names = list(namespaces)
        for namespace in names:
            self._get_store(namespace)
        logger.debug(f"Registered {len(names)} namespaces: {', '.join(names)}")

    def get(self, namespace: str, key: str, default: Any = None) -> Any:
        return self._get_store(namespace).get(key, default)

    def set(self, namespace: str, key: str, value: Any) -> None:
        self._get_store(namespace)[key] = value
        self._save(namespace)

    def delete(self, namespace: str, key: str) -> None:
        store = self._get_store(namespace)
        if key in store:
            del store[key]
            self._save(namespace)

    def list(self, namespace: str) -> List[Any]:
        return list(self._get_store(namespace).values())

    def clear(self, namespace: str) -> None:
        self._get_store(namespace).clear()
        self._save(namespace)
        logger.info(f"Cleared state namespace: {namespace}")

    def has(self, namespace: str, key: str) -> bool:
        return key in self._get_store(namespace)

    def get_namespaces(self) -> List[str]:
        return list(self._stores)

    def get_keys(self, namespace: str) -> List[str]:
        return list(self._get_store(namespace))

    def get_storage_directory(self) -> str:
        return str(self.storage_dir)

    def is_initialized(self) -> bool:
        return self.storage_dir.exists()

    def get_last_modified(self, namespace: str) -> Optional[datetime]:
        """Modification time of a namespace file, or None if never written."""
        path = self._storage_file(namespace)
        if not path.exists():
            return None
        return datetime.fromtimestamp(path.stat().st_mtime)

    def get_storage_size(self, namespace: str) -> int:
        path = self._storage_file(namespace)
        return path.stat().st_size if path.exists() else 0
