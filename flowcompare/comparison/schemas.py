"""Comparison API schemas."""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from .line_diff import LineDiffSegment, LineDiffStats
from .models import WorkflowDefinition
from .patch import SplitRow, UnifiedLine

VersionLabel = Union[int, str]


class LineDiffView(str, Enum):
    """Textual diff projections."""
    UNIFIED = "unified"
    SPLIT = "split"


class ComparisonRequest(BaseModel):
    """Two inline definitions to compare."""
    base: WorkflowDefinition = Field(..., description="Base definition")
    compare: WorkflowDefinition = Field(..., description="Compare definition")
    base_version: VersionLabel = Field(..., description="Base version label")
    compare_version: VersionLabel = Field(..., description="Compare version label")


class LineDiffResponse(BaseModel):
    """Line diff with the requested projection."""
    base_version: VersionLabel
    compare_version: VersionLabel
    view: LineDiffView
    stats: LineDiffStats
    segments: List[LineDiffSegment] = Field(default_factory=list)
    unified: Optional[List[UnifiedLine]] = Field(None, description="Unified view rows")
    split: Optional[List[SplitRow]] = Field(None, description="Split view rows")


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(..., description="Error type")
    detail: str = Field(..., description="Error details")
