"""Expression utilities for n8n templates.

n8n parameters may embed expressions such as
``={{ $('Fetch Orders').item.json.id }}``. The ``$('Node Name')`` calls are
references to other nodes by name; the graph validator uses
``deep_find_node_refs`` to make sure every referenced node exists.
"""

from __future__ import annotations

import re
from typing import Any, List, Set

# Matches $('Node Name') and $("Node Name")
NODE_REF_PATTERN = re.compile(r"""\$\(\s*['"]([^'"]+)['"]\s*\)""")


def is_expression(value: Any) -> bool:
    """Check whether a value is a full ``={{ ... }}`` expression string."""
    if not isinstance(value, str):
        return False
    trimmed = value.strip()
    return trimmed.startswith("={{") and trimmed.endswith("}}")


def normalize_expression(value: str) -> str:
    """Turn a template into the ``=``-prefixed form n8n evaluates.

    ``{{ $json.x }}`` becomes ``={{ $json.x }}``; values that already start
    with ``=`` are returned unchanged; anything else gets a ``=`` prefix.
    """
    trimmed = value.strip()
    if trimmed.startswith("={{") and trimmed.endswith("}}"):
        return value
    if trimmed.startswith("{{") and trimmed.endswith("}}"):
        return f"={trimmed}"
    if trimmed.startswith("="):
        return value
    return f"={value}"


def find_node_refs_in_string(text: str) -> List[str]:
    """Return every node name referenced in ``text``, in order of appearance."""
    return NODE_REF_PATTERN.findall(text)


def deep_find_node_refs(tree: Any) -> Set[str]:
    """Collect node references from an arbitrary JSON-like tree.

    Visits strings, list/tuple elements and dict values (keys are not
    scanned). Numbers, booleans, None and unknown objects contribute
    nothing. Uses an explicit stack so deeply nested parameters cannot hit
    the recursion limit.

    Args:
        tree: Node parameters or any JSON-compatible value

    Returns:
        Set of referenced node names (empty if none)
    """
    refs: Set[str] = set()
    stack: List[Any] = [tree]

    while stack:
        value = stack.pop()
        if isinstance(value, str):
            refs.update(find_node_refs_in_string(value))
        elif isinstance(value, dict):
            stack.extend(value.values())
        elif isinstance(value, (list, tuple)):
            stack.extend(value)
        # int, float, bool, None: nothing to scan

    return refs
