"""Workflow version comparison engine."""

from .equality import MISSING, deep_equal
from .graph_diff import (
    coerce_definition,
    compute_edge_diffs,
    compute_node_diffs,
    compute_workflow_diff,
    diff_properties,
)
from .line_diff import (
    LineChangeKind,
    LineDiffSegment,
    LineDiffStats,
    diff_definitions,
    diff_lines,
    diff_stats,
    serialize_definition,
    split_lines,
)
from .models import (
    ChangeType,
    DiffStatus,
    DiffSummary,
    EdgeDiff,
    NodeDiff,
    PropertyChange,
    WorkflowDefinition,
    WorkflowDiff,
    WorkflowEdge,
    WorkflowNode,
)
from .patch import (
    SplitCell,
    SplitRow,
    UnifiedLine,
    build_split_view,
    build_unified_view,
    generate_patch,
    patch_filename,
    render_unified_text,
)
from .summary import describe_summary, filter_diffs, format_value, summarize

__all__ = [
    "MISSING",
    "deep_equal",
    "coerce_definition",
    "compute_edge_diffs",
    "compute_node_diffs",
    "compute_workflow_diff",
    "diff_properties",
    "LineChangeKind",
    "LineDiffSegment",
    "LineDiffStats",
    "diff_definitions",
    "diff_lines",
    "diff_stats",
    "serialize_definition",
    "split_lines",
    "ChangeType",
    "DiffStatus",
    "DiffSummary",
    "EdgeDiff",
    "NodeDiff",
    "PropertyChange",
    "WorkflowDefinition",
    "WorkflowDiff",
    "WorkflowEdge",
    "WorkflowNode",
    "SplitCell",
    "SplitRow",
    "UnifiedLine",
    "build_split_view",
    "build_unified_view",
    "generate_patch",
    "patch_filename",
    "render_unified_text",
    "describe_summary",
    "filter_diffs",
    "format_value",
    "summarize",
]
