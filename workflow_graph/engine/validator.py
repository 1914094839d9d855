"""Graph Validator for n8n workflows.

Checks a node list and its connections object against the structural,
port-capability and expression-reference rules the execution engine relies
on. Unlike the connection builder this is fail-soft: every check runs and
all issues are returned together, so a caller can fix them in one pass.

Checks, in order:
1. Node identity: name/id present and unique, position is an (x, y) pair
2. Connection sources exist
3. Output ports are legal for the source node type
4. Port/slot/target structure, target existence, input port and index
5. ``$('Node Name')`` expression references point at existing nodes
"""

from __future__ import annotations

import logging
from numbers import Real
from typing import Any, Dict, List, Mapping, Sequence, Set

from ..nodes.capabilities import get_node_capabilities
from .expressions import deep_find_node_refs
from .results import ValidationIssue, ValidationResult

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_valid_position(position: Any) -> bool:
    return (
        _is_sequence(position)
        and len(position) == 2
        and all(_is_number(coord) for coord in position)
    )


def _validate_nodes(
    nodes: Sequence[Any],
    errors: List[ValidationIssue],
) -> Dict[str, Mapping[str, Any]]:
    """Check node identity fields and return the name -> node lookup."""
    name_set: Set[Any] = set()
    id_set: Set[Any] = set()
    by_name: Dict[str, Mapping[str, Any]] = {}

    for index, node in enumerate(nodes):
        if not isinstance(node, Mapping):
            errors.append(ValidationIssue(f"Node at index {index} must be an object"))
            continue

        name = node.get("name")
        node_id = node.get("id")
        if not name:
            errors.append(ValidationIssue("Node missing name"))
        if not node_id:
            errors.append(ValidationIssue(f'Node "{name}" missing id'))

        # Only hashable values can be tracked; a list name is a schema issue
        if isinstance(name, str):
            if name in name_set:
                errors.append(ValidationIssue(f"Duplicate node name: {name}"))
            name_set.add(name)
            by_name.setdefault(name, node)
        if isinstance(node_id, (str, int)) and not isinstance(node_id, bool):
            if node_id in id_set:
                errors.append(ValidationIssue(f"Duplicate node id: {node_id}"))
            id_set.add(node_id)

        if not _is_valid_position(node.get("position")):
            errors.append(ValidationIssue(f'Node "{name}" has invalid position'))

    return by_name


def _validate_targets(
    source_name: str,
    port_name: str,
    slot_index: int,
    targets: Sequence[Any],
    by_name: Mapping[str, Mapping[str, Any]],
    errors: List[ValidationIssue],
) -> None:
    location = f"{source_name}.{port_name}[{slot_index}]"

    for target_index, target in enumerate(targets):
        if not isinstance(target, Mapping):
            errors.append(ValidationIssue(f"Invalid target at {location}[{target_index}]"))
            continue

        target_name = target.get("node")
        target_node = by_name.get(target_name) if isinstance(target_name, str) else None
        if target_node is None:
            errors.append(
                ValidationIssue(f"Target node not found: {target_name} (from {source_name}.{port_name})")
            )

        input_port = target.get("type")
        if not isinstance(input_port, str):
            errors.append(
                ValidationIssue(
                    f"Target type must be a string at {location} → {target_name}, got {input_port!r}"
                )
            )
        elif target_node is not None:
            target_type = target_node.get("type")
            if input_port not in get_node_capabilities(target_type).inputs:
                errors.append(
                    ValidationIssue(
                        f'Target node "{target_name}" (type {target_type}) does not '
                        f'accept input port "{input_port}"'
                    )
                )

        index = target.get("index")
        if not _is_number(index):
            errors.append(ValidationIssue(f"Target index must be number at {location} → {target_name}"))
        elif index < 0 or not float(index).is_integer():
            errors.append(
                ValidationIssue(f"Target index must be a non-negative integer at {location} → {target_name}")
            )


def _validate_connections(
    connections: Any,
    by_name: Mapping[str, Mapping[str, Any]],
    errors: List[ValidationIssue],
) -> None:
    if connections is None:
        return
    if not isinstance(connections, Mapping):
        errors.append(ValidationIssue("Connections must be an object"))
        return

    for source_name, ports in connections.items():
        source_node = by_name.get(source_name)
        if source_node is None:
            errors.append(ValidationIssue(f"Connections reference unknown source node: {source_name}"))
            continue
        if not isinstance(ports, Mapping):
            errors.append(ValidationIssue(f'Connections for "{source_name}" must be an object'))
            continue

        source_type = source_node.get("type")
        caps = get_node_capabilities(source_type)

        for port_name, port_connections in ports.items():
            if port_name not in caps.outputs:
                errors.append(
                    ValidationIssue(
                        f'Node "{source_name}" (type {source_type}) cannot output on port "{port_name}"'
                    )
                )
            # Keep going so nested problems surface in the same pass
            if not _is_sequence(port_connections):
                errors.append(
                    ValidationIssue(f'Port "{source_name}.{port_name}" must be an array per output index')
                )
                continue

            for slot_index, targets in enumerate(port_connections):
                # Unwritten slot below a higher output index
                if targets is None:
                    continue
                if not _is_sequence(targets):
                    errors.append(
                        ValidationIssue(
                            f'Port "{source_name}.{port_name}[{slot_index}]" must be an array of targets'
                        )
                    )
                    continue
                _validate_targets(source_name, port_name, slot_index, targets, by_name, errors)


def _validate_expression_refs(
    nodes: Sequence[Any],
    by_name: Mapping[str, Mapping[str, Any]],
    errors: List[ValidationIssue],
) -> None:
    for node in nodes:
        if not isinstance(node, Mapping) or not node.get("parameters"):
            continue
        for ref in sorted(deep_find_node_refs(node["parameters"])):
            if ref not in by_name:
                errors.append(
                    ValidationIssue(
                        f'Node "{node.get("name")}" has expression reference to unknown node "{ref}"'
                    )
                )


def validate_nodes_and_connections(nodes: Any, connections: Any) -> ValidationResult:
    """Validate a workflow's nodes and connections.

    Never raises: malformed input is reported as issues. Every check runs
    regardless of earlier failures; only the per-port checks of an unknown
    connection source are skipped.

    Args:
        nodes: List of n8n node dicts
        connections: n8n connections object (``None`` is treated as empty)

    Returns:
        ValidationResult with all issues found, in check order
    """
    errors: List[ValidationIssue] = []

    if not _is_sequence(nodes):
        errors.append(ValidationIssue("Nodes must be an array"))
        nodes = []

    by_name = _validate_nodes(nodes, errors)
    _validate_connections(connections, by_name, errors)
    _validate_expression_refs(nodes, by_name, errors)

    if errors:
        logger.debug(f"Graph validation found {len(errors)} issue(s) across {len(nodes)} node(s)")
    return ValidationResult(errors=errors)
