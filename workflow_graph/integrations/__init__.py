"""External integrations (n8n REST API)."""

from .n8n_client import N8nApiError, N8nClient

__all__ = ["N8nApiError", "N8nClient"]
