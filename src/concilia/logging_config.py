"""
Configuration centralisée des logs de Concilia.

Format : 2026-01-06T14:05:52Z [concilia] LEVEL module: message

Variable d'environnement :
    CONCILIA_LOG_LEVEL : DEBUG, INFO, WARNING (défaut), ERROR.

Usage :
    from concilia.logging_config import configure_logging

    configure_logging()
    logger = logging.getLogger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone

LOGGER_NAME = "concilia"
ENV_VAR = "CONCILIA_LOG_LEVEL"


class ISO8601Formatter(logging.Formatter):
    """Horodatage ISO8601 UTC, nom court du module émetteur."""

    def __init__(self, source: str = LOGGER_NAME) -> None:
        self.source = source
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        name = record.name.removeprefix(f"{self.source}.")
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{timestamp} [{self.source}] {record.levelname} {name}: {message}"


def _level_from_env(default: int) -> int:
    name = os.getenv(ENV_VAR, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def configure_logging(level: int | None = None) -> logging.Logger:
    """
    Configure le logger "concilia" (sortie sur stderr, le rapport console restant sur stdout).

    Args:
        level: Niveau explicite ; sinon CONCILIA_LOG_LEVEL, sinon WARNING.

    Returns:
        Le logger "concilia" configuré. Appels répétés sans doublon de handler.
    """
    if level is None:
        level = _level_from_env(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
