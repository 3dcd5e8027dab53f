"""Version history API schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from flowcompare.comparison.models import WorkflowDefinition

from .versions import WorkflowVersion


class VersionCreate(BaseModel):
    """Schema for recording a workflow version."""
    definition: WorkflowDefinition = Field(..., description="Workflow graph")
    version: Optional[int] = Field(None, ge=1, description="Version number (next one if omitted)")
    created_by: Optional[str] = Field(None, description="User who created the version")
    message: Optional[str] = Field(None, description="Version message")


class VersionSummary(BaseModel):
    """Version metadata without the definition."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    workflow_id: str
    version: int
    created_at: datetime
    created_by: Optional[str] = None
    message: Optional[str] = None
    content_hash: str
    node_count: int
    edge_count: int

    @classmethod
    def from_version(cls, version: WorkflowVersion) -> "VersionSummary":
        return cls(
            id=version.id,
            workflow_id=version.workflow_id,
            version=version.version,
            created_at=version.created_at,
            created_by=version.created_by,
            message=version.message,
            content_hash=version.content_hash(),
            node_count=len(version.definition.nodes),
            edge_count=len(version.definition.edges),
        )


class VersionListResponse(BaseModel):
    """Paginated version list."""
    items: List[VersionSummary]
    total: int
    limit: Optional[int]
    offset: int
