"""Structural diff of two workflow definitions.

Nodes and edges are matched by id. Entries are reported in base order first
(removed, modified or unchanged), followed by the entities that only exist in
the compare version, in compare order.
"""

from typing import Any, Dict, List, Mapping, Optional, Union

import structlog

from .equality import MISSING, deep_equal
from .models import (
    ChangeType,
    DiffStatus,
    EdgeDiff,
    NodeDiff,
    PropertyChange,
    WorkflowDefinition,
    WorkflowDiff,
    WorkflowEdge,
    WorkflowNode,
)
from .summary import summarize

logger = structlog.get_logger()

DefinitionInput = Union[WorkflowDefinition, Mapping[str, Any], None]

# Fields reported on their own by diff_properties
_NODE_IDENTITY_FIELDS = ("id",)
_NODE_SPECIAL_FIELDS = ("data", "position")


def coerce_definition(definition: DefinitionInput) -> WorkflowDefinition:
    """Validate a plain mapping into a WorkflowDefinition."""
    if isinstance(definition, WorkflowDefinition):
        return definition
    if definition is None:
        return WorkflowDefinition()
    return WorkflowDefinition.model_validate(definition)


def compute_workflow_diff(
    base: DefinitionInput,
    compare: DefinitionInput,
    base_version: Any,
    compare_version: Any,
) -> WorkflowDiff:
    """Compute the structural diff between two workflow definitions."""
    base_definition = coerce_definition(base)
    compare_definition = coerce_definition(compare)

    node_diffs = compute_node_diffs(base_definition.nodes, compare_definition.nodes)
    edge_diffs = compute_edge_diffs(base_definition.edges, compare_definition.edges)

    settings_changed = not deep_equal(
        base_definition.field_value("settings"),
        compare_definition.field_value("settings"),
    )
    variables_changed = not deep_equal(
        base_definition.field_value("variables"),
        compare_definition.field_value("variables"),
    )

    summary = summarize(node_diffs, edge_diffs)

    logger.debug(
        "Computed workflow diff",
        base_version=base_version,
        compare_version=compare_version,
        total_changes=summary.total_changes,
        settings_changed=settings_changed,
        variables_changed=variables_changed,
    )

    return WorkflowDiff(
        base_version=base_version,
        compare_version=compare_version,
        summary=summary,
        node_diffs=node_diffs,
        edge_diffs=edge_diffs,
        settings_changed=settings_changed,
        variables_changed=variables_changed,
    )


def compute_node_diffs(
    base_nodes: List[WorkflowNode],
    compare_nodes: List[WorkflowNode],
) -> List[NodeDiff]:
    """Classify every node of both versions."""
    diffs: List[NodeDiff] = []
    base_node_map = {node.id: node for node in base_nodes}
    compare_node_map = {node.id: node for node in compare_nodes}

    for base_node in base_nodes:
        compare_node = compare_node_map.get(base_node.id)

        if compare_node is None:
            diffs.append(NodeDiff(
                node_id=base_node.id,
                status=DiffStatus.REMOVED,
                base_node=base_node,
            ))
        elif not deep_equal(base_node.comparable(), compare_node.comparable()):
            diffs.append(NodeDiff(
                node_id=base_node.id,
                status=DiffStatus.MODIFIED,
                base_node=base_node,
                compare_node=compare_node,
                property_changes=diff_properties(base_node, compare_node),
            ))
        else:
            diffs.append(NodeDiff(
                node_id=base_node.id,
                status=DiffStatus.UNCHANGED,
                base_node=base_node,
                compare_node=compare_node,
            ))

    for compare_node in compare_nodes:
        if compare_node.id not in base_node_map:
            diffs.append(NodeDiff(
                node_id=compare_node.id,
                status=DiffStatus.ADDED,
                compare_node=compare_node,
            ))

    return diffs


def compute_edge_diffs(
    base_edges: List[WorkflowEdge],
    compare_edges: List[WorkflowEdge],
) -> List[EdgeDiff]:
    """Classify every edge of both versions."""
    diffs: List[EdgeDiff] = []
    base_edge_map = {edge.id: edge for edge in base_edges}
    compare_edge_map = {edge.id: edge for edge in compare_edges}

    for base_edge in base_edges:
        compare_edge = compare_edge_map.get(base_edge.id)

        if compare_edge is None:
            diffs.append(EdgeDiff(
                edge_id=base_edge.id,
                status=DiffStatus.REMOVED,
                base_edge=base_edge,
            ))
        elif not deep_equal(base_edge.comparable(), compare_edge.comparable()):
            diffs.append(EdgeDiff(
                edge_id=base_edge.id,
                status=DiffStatus.MODIFIED,
                base_edge=base_edge,
                compare_edge=compare_edge,
            ))
        else:
            diffs.append(EdgeDiff(
                edge_id=base_edge.id,
                status=DiffStatus.UNCHANGED,
                base_edge=base_edge,
                compare_edge=compare_edge,
            ))

    for compare_edge in compare_edges:
        if compare_edge.id not in base_edge_map:
            diffs.append(EdgeDiff(
                edge_id=compare_edge.id,
                status=DiffStatus.ADDED,
                compare_edge=compare_edge,
            ))

    return diffs


def diff_properties(
    base_node: WorkflowNode,
    compare_node: WorkflowNode,
) -> List[PropertyChange]:
    """Compute field-level changes between two versions of a node.

    ``data`` keys are reported as ``data.<key>``, the position as a single
    ``position`` entry, and any other differing field under its own name, so
    every field used to classify the node as modified shows up here.
    """
    changes = _diff_mapping(base_node.data or {}, compare_node.data or {}, prefix="data.")

    if not deep_equal(base_node.position, compare_node.position):
        changes.append(PropertyChange(
            path="position",
            base_value=base_node.position,
            compare_value=compare_node.position,
            change_type=ChangeType.MODIFIED,
        ))

    skipped = _NODE_IDENTITY_FIELDS + _NODE_SPECIAL_FIELDS
    base_fields = {k: v for k, v in base_node.comparable().items() if k not in skipped}
    compare_fields = {k: v for k, v in compare_node.comparable().items() if k not in skipped}
    changes.extend(_diff_mapping(base_fields, compare_fields))

    return changes


def _diff_mapping(
    base: Dict[str, Any],
    compare: Dict[str, Any],
    prefix: str = "",
) -> List[PropertyChange]:
    """Compare the top-level keys of two mappings, base keys first."""
    changes: List[PropertyChange] = []
    keys = list(base) + [key for key in compare if key not in base]

    for key in keys:
        base_value = base.get(key, MISSING)
        compare_value = compare.get(key, MISSING)
        change_type: Optional[ChangeType] = None

        if base_value is MISSING:
            change_type = ChangeType.ADDED
        elif compare_value is MISSING:
            change_type = ChangeType.REMOVED
        elif not deep_equal(base_value, compare_value):
            change_type = ChangeType.MODIFIED

        if change_type is not None:
            changes.append(PropertyChange(
                path=f"{prefix}{key}",
                base_value=None if base_value is MISSING else base_value,
                compare_value=None if compare_value is MISSING else compare_value,
                change_type=change_type,
            ))

    return changes
