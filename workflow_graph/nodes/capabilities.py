"""Node Capability Registry

Static lookup from an n8n node type to the named ports it may use as
outputs and as inputs. Both the connection builder and the graph validator
consult this table, so they always agree on which links are legal.

Key Components:
- NodePortCapabilities: Immutable port sets for one node type
- NODE_CAPABILITIES: Read-only table of known node types
- get_node_capabilities: Lookup with fallback to DEFAULT_CAPABILITIES

The table is fixed at import time. Supporting a new node type means adding
an entry here; there is no runtime registration API.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional

MAIN_PORT = "main"


@dataclass(frozen=True)
class NodePortCapabilities:
    """Allowed connection ports for a node type.

    Attributes:
        outputs: Ports this node can OUTPUT on (e.g. main, ai_languageModel)
        inputs: Ports this node can ACCEPT as inputs
    """

    outputs: FrozenSet[str]
    inputs: FrozenSet[str]

    def to_dict(self) -> Dict[str, List[str]]:
        """Convert to dictionary format with sorted port lists."""
        return {
            "outputs": sorted(self.outputs),
            "inputs": sorted(self.inputs),
        }


def _caps(outputs: List[str], inputs: List[str]) -> NodePortCapabilities:
    return NodePortCapabilities(outputs=frozenset(outputs), inputs=frozenset(inputs))


# Fallback capabilities when node type is unknown
DEFAULT_CAPABILITIES = _caps([MAIN_PORT], [MAIN_PORT])

# Default n8n nodes only use 'main'; list the ones that know other ports
NODE_CAPABILITIES: Mapping[str, NodePortCapabilities] = MappingProxyType({
    # LangChain agent accepts the AI sub-node ports as inputs
    "@n8n/n8n-nodes-langchain.agent": _caps(
        outputs=[MAIN_PORT],
        inputs=[MAIN_PORT, "ai_languageModel", "ai_outputParser"],
    ),
    # Chat model feeds an agent through ai_languageModel
    "@n8n/n8n-nodes-langchain.lmChatOpenAi": _caps(
        outputs=["ai_languageModel", MAIN_PORT],
        inputs=[MAIN_PORT],
    ),
    # Structured output parser feeds an agent through ai_outputParser
    "@n8n/n8n-nodes-langchain.outputParserStructured": _caps(
        outputs=["ai_outputParser", MAIN_PORT],
        inputs=[MAIN_PORT],
    ),
})


def get_node_capabilities(node_type: Optional[str]) -> NodePortCapabilities:
    """Get the port capabilities for a node type.

    Never fails: unknown, empty or missing types resolve to
    ``DEFAULT_CAPABILITIES``.
    """
    if not isinstance(node_type, str):
        return DEFAULT_CAPABILITIES
    return NODE_CAPABILITIES.get(node_type, DEFAULT_CAPABILITIES)


def is_known_node_type(node_type: Optional[str]) -> bool:
    """Check whether a node type has an explicit capability entry."""
    return isinstance(node_type, str) and node_type in NODE_CAPABILITIES


def list_node_capabilities() -> Dict[str, NodePortCapabilities]:
    """List all node types with explicit capabilities.

    Returns:
        A new dict; mutating it does not affect the registry
    """
    return dict(NODE_CAPABILITIES)
