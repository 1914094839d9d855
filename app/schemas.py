"""Pydantic request/response models for the workflow graph API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EdgeRequest(BaseModel):
    """Edge in the high-level DSL (camelCase keys, ``from``/``to`` by node name)."""
    model_config = ConfigDict(populate_by_name=True)

    from_node: str = Field(alias="from")
    to_node: str = Field(alias="to")
    fromPort: Optional[str] = None
    toPort: Optional[str] = None
    fromIndex: Optional[int] = Field(default=None, ge=0)
    toIndex: Optional[int] = Field(default=None, ge=0)

    def to_edge_dict(self) -> Dict[str, Any]:
        """Return the dict form the connection builder accepts."""
        return self.model_dump(by_alias=True, exclude_none=True)


class BuildConnectionsRequest(BaseModel):
    """Nodes plus edges to turn into an n8n connections object."""
    nodes: List[Dict[str, Any]]
    edges: List[EdgeRequest]


class BuildConnectionsResponse(BaseModel):
    connections: Dict[str, Any]


class ValidateWorkflowRequest(BaseModel):
    """Workflow to validate without sending it to n8n.

    ``connections`` wins over ``edges`` when both are given.
    """
    name: Optional[str] = None
    nodes: List[Any] = Field(default_factory=list)
    connections: Optional[Dict[str, Any]] = None
    edges: Optional[List[EdgeRequest]] = None
    settings: Optional[Dict[str, Any]] = None


class CreateWorkflowRequest(BaseModel):
    """Request to create a workflow in n8n."""
    name: str
    nodes: List[Any] = Field(default_factory=list)
    connections: Optional[Dict[str, Any]] = None
    edges: Optional[List[EdgeRequest]] = None
    settings: Optional[Dict[str, Any]] = None
    active: bool = False
    tags: Optional[List[str]] = None


class UpdateWorkflowRequest(BaseModel):
    """Request to update a workflow in n8n; omitted fields are kept."""
    name: Optional[str] = None
    nodes: Optional[List[Any]] = None
    connections: Optional[Dict[str, Any]] = None
    edges: Optional[List[EdgeRequest]] = None


class ValidationIssueResponse(BaseModel):
    """Single validation issue."""
    message: str
    path: Optional[str] = None


class ValidationResponse(BaseModel):
    """Merged shape + graph validation result."""
    valid: bool
    errors: List[ValidationIssueResponse]


class NodeCapabilitiesResponse(BaseModel):
    """Ports a node type may use."""
    node_type: str
    known: bool
    outputs: List[str]
    inputs: List[str]


class WorkflowSummaryResponse(BaseModel):
    """Workflow data returned after create/update."""
    id: Optional[str] = None
    name: Optional[str] = None
    active: Optional[bool] = None
    message: str


class HealthResponse(BaseModel):
    """n8n connectivity status."""
    status: str
    api_url: str
