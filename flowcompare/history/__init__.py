"""Workflow version history module for FlowCompare."""

from .exceptions import (
    DefinitionLoadError,
    VersionHistoryError,
    WorkflowVersionConflictError,
    WorkflowVersionMismatchError,
    WorkflowVersionNotFoundError,
)
from .service import ComparisonCache, ComparisonResult, VersionComparisonService
from .versions import WorkflowVersion, WorkflowVersionStore

__all__ = [
    "DefinitionLoadError",
    "VersionHistoryError",
    "WorkflowVersionConflictError",
    "WorkflowVersionMismatchError",
    "WorkflowVersionNotFoundError",
    "ComparisonCache",
    "ComparisonResult",
    "VersionComparisonService",
    "WorkflowVersion",
    "WorkflowVersionStore",
]
