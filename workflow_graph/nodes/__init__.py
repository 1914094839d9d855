"""Node type metadata used by the graph engine."""

from .capabilities import (
    DEFAULT_CAPABILITIES,
    MAIN_PORT,
    NODE_CAPABILITIES,
    NodePortCapabilities,
    get_node_capabilities,
    is_known_node_type,
    list_node_capabilities,
)

__all__ = [
    "DEFAULT_CAPABILITIES",
    "MAIN_PORT",
    "NODE_CAPABILITIES",
    "NodePortCapabilities",
    "get_node_capabilities",
    "is_known_node_type",
    "list_node_capabilities",
]
