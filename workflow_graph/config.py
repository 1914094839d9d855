"""Workflow graph configuration — single source of truth for all env vars.

All values are read from environment variables with defaults. The graph
engine itself takes no configuration; these settings drive the n8n client,
the default workflow settings and the HTTP surface.
"""

from __future__ import annotations

import os
from pathlib import Path


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _str(key: str, default: str) -> str:
    return os.getenv(key, default)


# =====================================================================
# n8n REST API
# =====================================================================

# Base URL of the public API, including the /api/v1 prefix
N8N_API_URL = _str("N8N_API_URL", "http://localhost:5678/api/v1").rstrip("/")

# API key sent as X-N8N-API-KEY
N8N_API_KEY = _str("N8N_API_KEY", "")

N8N_HTTP_TIMEOUT = _float("N8N_HTTP_TIMEOUT", 30.0)
N8N_HTTP_MAX_CONNECTIONS = _int("N8N_HTTP_MAX_CONNECTIONS", 10)


# =====================================================================
# Default workflow settings (applied when a caller omits settings)
# =====================================================================

DEFAULT_TIMEZONE = _str("DEFAULT_TIMEZONE", "UTC")
DEFAULT_EXECUTION_TIMEOUT = _int("DEFAULT_EXECUTION_TIMEOUT", 3600)


# =====================================================================
# HTTP surface
# =====================================================================

API_HOST = _str("API_HOST", "0.0.0.0")
API_PORT = _int("API_PORT", 8000)

# Comma-separated list of allowed origins
_default_origins = "http://localhost:3000,http://127.0.0.1:3000"
CORS_ORIGINS = [
    o.strip() for o in _str("CORS_ORIGINS", _default_origins).split(",") if o.strip()
]


# =====================================================================
# Logging
# =====================================================================

LOG_DIR = Path(_str("LOG_DIR", str(Path.cwd() / "logs")))
LOG_LEVEL = _str("LOG_LEVEL", "INFO").upper()
