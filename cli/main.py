#!/usr/bin/env python
"""
ledger-cli - plugin-driven ledger wallet CLI

Usage:
    ledger-cli [--format human|json] [--verbose] <plugin> <command> [options] [args...]
    python -m cli.main network list
    python -m cli.main --format json state-management stats
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv

# Load environment variables FIRST (before importing project modules)
load_dotenv(".env")

from rich.console import Console

from core.constants import LOG_DIR
from core.dependencies import create_core_api, create_plugin_manager
from core.plugins.binder import FORMAT_DEST, VERBOSE_DEST, CommandBinder, parse_global_args
from core.plugins.errors import ParameterError
from core.plugins.executor import EXIT_FAILURE, EXIT_SUCCESS, CommandExecutor
from core.services.logger_service import PLUGIN_LOGGER_NAME

logger = logging.getLogger(__name__)

# Diagnostics go to stderr; stdout carries command output only
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

EXIT_INTERRUPTED = 130


class ConsoleLogFilter(logging.Filter):
    """Let plugin messages through at INFO while other loggers stay at WARNING."""

    def __init__(self, verbose: bool = False):
        super().__init__()
        self.verbose = verbose

    def filter(self, record: logging.LogRecord) -> bool:
        if self.verbose or record.levelno >= logging.WARNING:
            return True
        return record.name.startswith(PLUGIN_LOGGER_NAME) and record.levelno >= logging.INFO


def setup_logging(verbose: bool = False, log_dir: Path = LOG_DIR) -> None:
    """Configure the root logger: a file log plus a quiet stderr handler."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # File handler - records INFO and above
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_dir / "cli.log", encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG)
    console_handler.addFilter(ConsoleLogFilter(verbose))
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)


async def run_cli(argv: Sequence[str], output_format: Optional[str] = None) -> int:
    """Bootstrap plugins, dispatch one command and return its exit code."""
    api = create_core_api(output_format=output_format)
    manager = create_plugin_manager(api)
    await manager.initialize()

    try:
        binder = CommandBinder()
        manager.register_commands(binder)
        invocation = binder.parse(argv)

        executor = CommandExecutor(api, manager.lifecycle)
        exit_code = await executor.execute(
            invocation.bound.plugin,
            invocation.bound.command,
            invocation.args,
        )
    finally:
        await manager.shutdown()

    # Legacy handlers report no outcome; reaching here means they did not exit
    return EXIT_SUCCESS if exit_code is None else exit_code


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)

    try:
        global_args, remaining = parse_global_args(argv)
        setup_logging(verbose=getattr(global_args, VERBOSE_DEST))
        return asyncio.run(run_cli(remaining, getattr(global_args, FORMAT_DEST)))
    except ParameterError as e:
        err_console.print(f"Error: {e}", style="red", markup=False)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        err_console.print("\ninterrupted", style="yellow", markup=False)
        return EXIT_INTERRUPTED


def run():
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
