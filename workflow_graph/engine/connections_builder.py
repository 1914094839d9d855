"""Connection Graph Builder

Turns the high-level edge DSL into the nested connection structure the n8n
execution engine stores on a workflow:

    {source_name: {output_port: [[{node, type, index}, ...], ...]}}

The outer list of a port is indexed by output slot; each slot holds the
targets fed from that slot.

Key Components:
- EdgeDefinition: One human-authored link between two nodes' ports
- build_connections_from_edges: Fail-fast builder
- ConnectionBuildError / UnknownNodeError / UnsupportedPortError

Building is all-or-nothing: the first edge that references an unknown node
or an unsupported port aborts the whole build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, TypedDict, Union

from ..nodes.capabilities import MAIN_PORT, get_node_capabilities

logger = logging.getLogger(__name__)


class ConnectionTarget(TypedDict):
    node: str
    type: str
    index: int


# Slot index -> targets; None marks a slot no edge wrote
PortConnections = List[Optional[List[ConnectionTarget]]]
NodeConnections = Dict[str, PortConnections]
Connections = Dict[str, NodeConnections]


class ConnectionBuildError(ValueError):
    """Raised when an edge list cannot be turned into connections."""


class UnknownNodeError(ConnectionBuildError):
    """An edge names a node that is not in the node list."""


class UnsupportedPortError(ConnectionBuildError):
    """An edge uses a port the node type does not expose."""


def _check_index(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConnectionBuildError(
            f"Edge {field_name} must be a non-negative integer, got {value!r}"
        )
    return value


def _check_str(value: Any, field_name: str) -> None:
    if not isinstance(value, str):
        raise ConnectionBuildError(f"Edge {field_name} must be a string, got {value!r}")


def _or_zero(value: Any) -> Any:
    return 0 if value is None else value


@dataclass
class EdgeDefinition:
    """Definition of an edge connecting two nodes by name.

    Attributes:
        from_node: Source node name
        to_node: Target node name
        from_port: Output port on the source (default "main")
        to_port: Input port on the target (defaults to from_port)
        from_index: Output slot on the source (default 0)
        to_index: Input index on the target (default 0)
    """

    from_node: str
    to_node: str
    from_port: str = MAIN_PORT
    to_port: Optional[str] = None
    from_index: int = 0
    to_index: int = 0

    def __post_init__(self):
        """Resolve defaults and validate names, ports and indices."""
        if self.to_port is None:
            self.to_port = self.from_port
        _check_str(self.from_node, "from")
        _check_str(self.to_node, "to")
        _check_str(self.from_port, "fromPort")
        _check_str(self.to_port, "toPort")
        self.from_index = _check_index(self.from_index, "fromIndex")
        self.to_index = _check_index(self.to_index, "toIndex")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EdgeDefinition":
        """Create an edge from the camelCase DSL form.

        Example:
            EdgeDefinition.from_dict({"from": "Chat Model", "to": "Agent",
                                      "fromPort": "ai_languageModel"})
        """
        if not isinstance(data, Mapping):
            raise ConnectionBuildError(f"Edge must be an object, got {type(data).__name__}")
        missing = [key for key in ("from", "to") if not data.get(key)]
        if missing:
            raise ConnectionBuildError(f"Edge is missing required field(s): {', '.join(missing)}")

        from_port = data.get("fromPort")
        return cls(
            from_node=data["from"],
            to_node=data["to"],
            from_port=MAIN_PORT if from_port is None else from_port,
            to_port=data.get("toPort"),
            from_index=_or_zero(data.get("fromIndex")),
            to_index=_or_zero(data.get("toIndex")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase DSL form."""
        return {
            "from": self.from_node,
            "to": self.to_node,
            "fromPort": self.from_port,
            "toPort": self.to_port,
            "fromIndex": self.from_index,
            "toIndex": self.to_index,
        }


EdgeLike = Union[EdgeDefinition, Mapping[str, Any]]


def _ensure_slot(port_connections: PortConnections, index: int) -> List[ConnectionTarget]:
    """Return the target list for a slot, creating it (and holes before it)."""
    if len(port_connections) <= index:
        port_connections.extend([None] * (index + 1 - len(port_connections)))
    slot = port_connections[index]
    if slot is None:
        slot = []
        port_connections[index] = slot
    return slot


def build_connections_from_edges(
    nodes: Iterable[Mapping[str, Any]],
    edges: Iterable[EdgeLike],
) -> Connections:
    """Build the n8n connections object from a node list and an edge list.

    Edges are applied in input order, which fixes the order of targets
    inside each slot. Duplicate edges produce duplicate targets.

    Args:
        nodes: Nodes with ``name`` and optional ``type``
        edges: EdgeDefinition instances or camelCase edge dicts

    Returns:
        Nested connections dict. Slots below a requested ``fromIndex`` that
        no edge wrote are left as ``None``.

    Raises:
        UnknownNodeError: If an edge names a node not in ``nodes``
        UnsupportedPortError: If a port is not legal for the node type
        ConnectionBuildError: If an edge is malformed

    Example:
        connections = build_connections_from_edges(
            nodes=[{"name": "A", "type": "n8n-nodes-base.set"},
                   {"name": "B", "type": "n8n-nodes-base.set"}],
            edges=[{"from": "A", "to": "B"}],
        )
        # {"A": {"main": [[{"node": "B", "type": "main", "index": 0}]]}}
    """
    name_to_type: Dict[str, str] = {}
    for node in nodes:
        if not isinstance(node, Mapping):
            raise ConnectionBuildError(f"Node must be an object, got {type(node).__name__}")
        name = node.get("name")
        # Edges address nodes by string name only
        if isinstance(name, str):
            name_to_type[name] = node.get("type") or ""

    connections: Connections = {}
    edge_count = 0

    for raw_edge in edges:
        edge = raw_edge if isinstance(raw_edge, EdgeDefinition) else EdgeDefinition.from_dict(raw_edge)
        edge_count += 1

        if edge.from_node not in name_to_type:
            raise UnknownNodeError(f"Edge refers to unknown source node: {edge.from_node}")
        if edge.to_node not in name_to_type:
            raise UnknownNodeError(f"Edge refers to unknown target node: {edge.to_node}")

        from_type = name_to_type[edge.from_node]
        to_type = name_to_type[edge.to_node]
        if edge.from_port not in get_node_capabilities(from_type).outputs:
            raise UnsupportedPortError(
                f'Node "{edge.from_node}" (type {from_type}) does not support '
                f'output port "{edge.from_port}"'
            )
        if edge.to_port not in get_node_capabilities(to_type).inputs:
            raise UnsupportedPortError(
                f'Node "{edge.to_node}" (type {to_type}) does not support '
                f'input port "{edge.to_port}"'
            )

        ports = connections.setdefault(edge.from_node, {})
        port_connections = ports.setdefault(edge.from_port, [])
        _ensure_slot(port_connections, edge.from_index).append(
            {"node": edge.to_node, "type": edge.to_port, "index": edge.to_index}
        )

    logger.debug(f"Built connections for {len(connections)} source node(s) from {edge_count} edge(s)")
    return connections
