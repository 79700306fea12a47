"""Helpers shared by the state-management commands."""

import json
from datetime import datetime
from typing import Any, List

from ..schema import NamespaceInfo


def serialized_size(data: Any) -> int:
    return len(json.dumps(data, ensure_ascii=False).encode("utf-8"))


def namespace_info(state, namespace: str, entries: List[Any]) -> NamespaceInfo:
    modified = state.get_last_modified(namespace)
    return NamespaceInfo(
        name=namespace,
        entry_count=len(entries),
        size=serialized_size(entries),
        last_modified=modified.isoformat(timespec="seconds") if modified else None,
    )


def local_timestamp() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")
