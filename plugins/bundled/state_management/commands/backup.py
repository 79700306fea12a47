"""state-management backup"""

import json
from pathlib import Path

from core.plugins.types import CommandExecutionResult, CommandHandlerArgs

from ..schema import StateBackupOutput
from .common import serialized_size, local_timestamp


def backup_handler(args: CommandHandlerArgs) -> CommandExecutionResult:
    """Write every namespace's entries to a single JSON backup file."""
    state = args.api.state
    args.logger.log("Creating state backup...")

    try:
        namespaces = state.get_namespaces()
        timestamp = local_timestamp()
        backup = {
            "timestamp": timestamp,
            "namespaces": {},
            "metadata": {"total_namespaces": len(namespaces), "total_size": 0},
        }
        for ns in namespaces:
            entries = state.list(ns)
            backup["namespaces"][ns] = entries
            backup["metadata"]["total_size"] += serialized_size(entries)

        filename = args.args.get("output") or f"ledger-cli-backup-{timestamp.replace(':', '-')}.json"
        path = Path(filename).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(backup, f, indent=2, ensure_ascii=False)

        output = StateBackupOutput(
            success=True,
            file_path=str(path),
            timestamp=timestamp,
            total_namespaces=len(namespaces),
            total_size=backup["metadata"]["total_size"],
            namespaces=namespaces,
        )
        return CommandExecutionResult.success(output)
    except Exception as e:
        return CommandExecutionResult.failure(f"Failed to create backup: {e}")
