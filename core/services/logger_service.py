"""Leveled logger handed to plugins through the Core API."""

import logging
from typing import Optional

PLUGIN_LOGGER_NAME = "ledger_cli.plugin"


class LoggerService:
    """Thin facade over a stdlib logger.

    Handlers are configured by the entry point; the console handler writes
    to stderr so stdout stays reserved for command output.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(PLUGIN_LOGGER_NAME)

    def log(self, message: str) -> None:
        self._logger.info(message)

    def verbose(self, message: str) -> None:
        self._logger.debug(message)

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def warn(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)
