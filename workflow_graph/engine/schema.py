"""Workflow shape schema (pydantic models).

Describes the fields the n8n REST API requires on a workflow body: ``name``,
``nodes``, ``connections`` and ``settings``, with each node requiring
``id``, ``name``, ``type`` and a two-number ``position``. Extra keys are
allowed everywhere; only the listed fields are checked.

This is purely structural. Graph rules (unique names, legal ports, known
targets) live in ``validator.py``.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictStr,
    ValidationError,
)

from .results import ValidationIssue, ValidationResult

SaveDataMode = Literal["all", "none"]


class NodeShape(BaseModel):
    """A single n8n node.

    Optional keys may be absent; a present ``null`` is rejected.
    """
    model_config = ConfigDict(extra="allow")

    id: StrictStr
    name: StrictStr
    type: StrictStr
    typeVersion: StrictFloat = Field(default=None)
    position: Annotated[List[StrictFloat], Field(min_length=2, max_length=2)]
    parameters: Dict[str, Any] = Field(default=None)
    credentials: Dict[str, Any] = Field(default=None)


class WorkflowSettingsShape(BaseModel):
    """Workflow settings as accepted by the n8n public API."""
    model_config = ConfigDict(extra="allow")

    saveExecutionProgress: StrictBool = Field(default=None)
    saveManualExecutions: StrictBool = Field(default=None)
    saveDataErrorExecution: SaveDataMode = Field(default=None)
    saveDataSuccessExecution: SaveDataMode = Field(default=None)
    executionTimeout: StrictFloat = Field(default=None)
    errorWorkflow: StrictStr = Field(default=None)
    timezone: StrictStr = Field(default=None)
    executionOrder: StrictStr = Field(default=None)


class WorkflowShape(BaseModel):
    """Workflow body sent to create/update endpoints."""
    model_config = ConfigDict(extra="allow")

    name: StrictStr
    nodes: List[NodeShape]
    connections: Dict[str, Any]
    settings: WorkflowSettingsShape


def _json_pointer(loc: tuple) -> str:
    return "/" + "/".join(str(part) for part in loc)


def validate_workflow_shape(workflow: Any) -> ValidationResult:
    """Check a workflow object against the required-field schema.

    Never raises. Each pydantic error becomes a ValidationIssue whose
    ``path`` is a JSON pointer to the offending value (``/`` for the root).

    Args:
        workflow: Workflow dict (name, nodes, connections, settings)

    Returns:
        ValidationResult with one issue per schema violation
    """
    try:
        WorkflowShape.model_validate(workflow)
    except ValidationError as e:
        issues = []
        for err in e.errors():
            loc = tuple(err.get("loc", ()))
            path = _json_pointer(loc)
            msg = err.get("msg") or "Invalid"
            message = f"{'.'.join(str(p) for p in loc)}: {msg}" if loc else msg
            issues.append(ValidationIssue(message=message, path=path))
        return ValidationResult(errors=issues)
    return ValidationResult.ok()


def workflow_json_schema() -> Dict[str, Any]:
    """Return the JSON schema of the workflow shape."""
    return WorkflowShape.model_json_schema()
