"""Diff summary aggregation and display helpers."""

import json
from typing import Any, List, Tuple

from .models import DiffStatus, DiffSummary, EdgeDiff, NodeDiff, WorkflowDiff


def _count(diffs, status: DiffStatus) -> int:
    return sum(1 for diff in diffs if diff.status == status)


def summarize(node_diffs: List[NodeDiff], edge_diffs: List[EdgeDiff]) -> DiffSummary:
    """Count diff entries by status for nodes and edges.

    Unchanged entries are counted but never contribute to ``total_changes``.
    """
    nodes_added = _count(node_diffs, DiffStatus.ADDED)
    nodes_removed = _count(node_diffs, DiffStatus.REMOVED)
    nodes_modified = _count(node_diffs, DiffStatus.MODIFIED)
    edges_added = _count(edge_diffs, DiffStatus.ADDED)
    edges_removed = _count(edge_diffs, DiffStatus.REMOVED)
    edges_modified = _count(edge_diffs, DiffStatus.MODIFIED)

    return DiffSummary(
        nodes_added=nodes_added,
        nodes_removed=nodes_removed,
        nodes_modified=nodes_modified,
        nodes_unchanged=_count(node_diffs, DiffStatus.UNCHANGED),
        edges_added=edges_added,
        edges_removed=edges_removed,
        edges_modified=edges_modified,
        edges_unchanged=_count(edge_diffs, DiffStatus.UNCHANGED),
        total_changes=(
            nodes_added + nodes_removed + nodes_modified
            + edges_added + edges_removed + edges_modified
        ),
    )


def describe_summary(summary: DiffSummary) -> List[str]:
    """Human-readable lines for the non-zero counts of a summary."""
    parts = [
        (summary.nodes_added, "node(s) added"),
        (summary.nodes_removed, "node(s) removed"),
        (summary.nodes_modified, "node(s) modified"),
        (summary.edges_added, "connection(s) added"),
        (summary.edges_removed, "connection(s) removed"),
        (summary.edges_modified, "connection(s) modified"),
    ]
    lines = [f"{count} {label}" for count, label in parts if count > 0]
    if summary.total_changes == 0:
        lines.append("No changes detected")
    return lines


def filter_diffs(
    diff: WorkflowDiff,
    show_unchanged: bool = False,
) -> Tuple[List[NodeDiff], List[EdgeDiff]]:
    """Return the node and edge entries to display."""
    if show_unchanged:
        return list(diff.node_diffs), list(diff.edge_diffs)
    return (
        [d for d in diff.node_diffs if d.status != DiffStatus.UNCHANGED],
        [d for d in diff.edge_diffs if d.status != DiffStatus.UNCHANGED],
    )


def format_value(value: Any) -> str:
    """Format a property value for display."""
    if value is None:
        return "null"
    if isinstance(value, str):
        return f'"{value}"'
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
