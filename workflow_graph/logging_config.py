"""Unified logging configuration for the workflow graph service."""
from __future__ import annotations

import logging

from .config import LOG_DIR, LOG_LEVEL

API_LOGGER_NAME = "workflow_graph.api"
CLIENT_LOGGER_NAME = "workflow_graph.n8n_client"

# Prevent duplicate handlers
_configured_loggers: set[str] = set()


def setup_logger(name: str, filename: str) -> logging.Logger:
    """Setup a logger with file and console handlers.

    Args:
        name: Logger name (e.g., 'api', 'n8n_client')
        filename: Log file name (e.g., 'api.log')

    Returns:
        Configured logger instance
    """
    if name in _configured_loggers:
        return logging.getLogger(name)

    level = logging.getLevelName(LOG_LEVEL)
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # Prevent duplicate logs

    # File handler
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(LOG_DIR / filename, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
    ))

    # Console handler
    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(message)s"
    ))

    logger.addHandler(fh)
    logger.addHandler(sh)

    _configured_loggers.add(name)
    return logger


# Pre-configured loggers
def get_api_logger() -> logging.Logger:
    """Logger for API requests."""
    return setup_logger(API_LOGGER_NAME, "api.log")


def get_client_logger() -> logging.Logger:
    """Logger for calls against the n8n REST API."""
    return setup_logger(CLIENT_LOGGER_NAME, "n8n_client.log")
