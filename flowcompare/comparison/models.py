"""Workflow definition and diff models."""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .equality import MISSING


# Node and edge ids are opaque identity keys
EntityId = Union[str, int]


class DiffStatus(str, Enum):
    """Classification of a graph entity across two versions."""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class ChangeType(str, Enum):
    """Types of field-level changes on a modified node."""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


# Workflow graph

class WorkflowNode(BaseModel):
    """Workflow node as stored in a version definition."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: EntityId = Field(..., description="Stable node identity")
    type: Optional[str] = Field(default=None, description="Node type")
    position: Optional[Dict[str, Any]] = Field(
        default=None, description="Node position in the canvas"
    )
    data: Dict[str, Any] = Field(default_factory=dict, description="Label and configuration")

    @field_validator("data", mode="before")
    @classmethod
    def default_data(cls, v):
        """Treat null data as empty."""
        return {} if v is None else v

    def comparable(self) -> Dict[str, Any]:
        """Return every field that takes part in node equality."""
        return self.model_dump(by_alias=True)


class WorkflowEdge(BaseModel):
    """Connection between two workflow nodes."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: EntityId = Field(..., description="Stable edge identity")
    source: EntityId = Field(..., description="Source node id")
    target: EntityId = Field(..., description="Target node id")
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")
    label: Any = Field(default=None, description="Edge label")

    def comparable(self) -> Dict[str, Any]:
        """Return every field that takes part in edge equality."""
        return self.model_dump(by_alias=True)


class WorkflowDefinition(BaseModel):
    """Versioned workflow graph."""

    model_config = ConfigDict(extra="allow")

    nodes: List[WorkflowNode] = Field(default_factory=list)
    edges: List[WorkflowEdge] = Field(default_factory=list)
    settings: Optional[Any] = Field(default=None, description="Workflow settings")
    variables: Optional[Any] = Field(default=None, description="Workflow variables")

    @field_validator("nodes", "edges", mode="before")
    @classmethod
    def default_empty(cls, v):
        """Treat an explicit null collection as empty."""
        return [] if v is None else v

    def field_value(self, name: str) -> Any:
        """Return a field value, or ``MISSING`` when it was never provided."""
        if name not in self.model_fields_set:
            return MISSING
        return getattr(self, name)


# Diff results

class PropertyChange(BaseModel):
    """A single field-level difference on a modified node."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Dotted field locator")
    base_value: Any = Field(default=None, description="Value in the base version")
    compare_value: Any = Field(default=None, description="Value in the compare version")
    change_type: ChangeType = Field(..., description="Kind of change")

    def describe(self) -> str:
        """Render the change the way the comparison panel lists it."""
        from .summary import format_value

        if self.change_type == ChangeType.ADDED:
            return f"{self.path}: + {format_value(self.compare_value)}"
        if self.change_type == ChangeType.REMOVED:
            return f"{self.path}: - {format_value(self.base_value)}"
        return (
            f"{self.path}: {format_value(self.base_value)}"
            f" → {format_value(self.compare_value)}"
        )


class NodeDiff(BaseModel):
    """Diff entry for a single node."""

    model_config = ConfigDict(frozen=True)

    node_id: EntityId
    status: DiffStatus
    base_node: Optional[WorkflowNode] = None
    compare_node: Optional[WorkflowNode] = None
    property_changes: Optional[List[PropertyChange]] = None


class EdgeDiff(BaseModel):
    """Diff entry for a single edge."""

    model_config = ConfigDict(frozen=True)

    edge_id: EntityId
    status: DiffStatus
    base_edge: Optional[WorkflowEdge] = None
    compare_edge: Optional[WorkflowEdge] = None


class DiffSummary(BaseModel):
    """Per-category change counts."""

    model_config = ConfigDict(frozen=True)

    nodes_added: int = 0
    nodes_removed: int = 0
    nodes_modified: int = 0
    nodes_unchanged: int = 0
    edges_added: int = 0
    edges_removed: int = 0
    edges_modified: int = 0
    edges_unchanged: int = 0
    total_changes: int = 0


class WorkflowDiff(BaseModel):
    """Structural difference between two workflow versions."""

    model_config = ConfigDict(frozen=True)

    base_version: Any = Field(..., description="Base version label")
    compare_version: Any = Field(..., description="Compare version label")
    summary: DiffSummary
    node_diffs: List[NodeDiff] = Field(default_factory=list)
    edge_diffs: List[EdgeDiff] = Field(default_factory=list)
    settings_changed: bool = False
    variables_changed: bool = False

    @property
    def has_changes(self) -> bool:
        """Check if anything differs between the two versions."""
        return (
            self.summary.total_changes > 0
            or self.settings_changed
            or self.variables_changed
        )

    def get_node_diff(self, node_id: EntityId) -> Optional[NodeDiff]:
        """Get the diff entry of a node by id."""
        return next((d for d in self.node_diffs if d.node_id == node_id), None)

    def get_edge_diff(self, edge_id: EntityId) -> Optional[EdgeDiff]:
        """Get the diff entry of an edge by id."""
        return next((d for d in self.edge_diffs if d.edge_id == edge_id), None)
