"""Line-level diff of serialized workflow definitions.

Definitions are serialized to canonical JSON (sorted keys, fixed indentation)
so that the textual diff reflects content rather than formatting. The diff is
a shortest edit script computed with Myers' O(ND) algorithm, grouped into
maximal runs of added, removed and unchanged lines.
"""

import json
from enum import Enum
from typing import Any, List, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from flowcompare.config import settings

from .graph_diff import DefinitionInput, coerce_definition

logger = structlog.get_logger()


class LineChangeKind(str, Enum):
    """Classification of a line in a textual diff."""
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


class LineDiffSegment(BaseModel):
    """A maximal run of consecutive lines sharing one classification."""

    model_config = ConfigDict(frozen=True)

    kind: LineChangeKind = Field(..., description="Classification of every line in the run")
    value: str = Field(..., description="Raw text of the run, line terminators included")
    count: int = Field(..., ge=1, description="Number of lines in the run")

    @property
    def lines(self) -> List[str]:
        """Lines of the run without their terminators."""
        lines = self.value.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return lines


class LineDiffStats(BaseModel):
    """Added and removed line counts of a textual diff."""

    model_config = ConfigDict(frozen=True)

    additions: int = 0
    deletions: int = 0


def serialize_definition(
    definition: DefinitionInput,
    indent: Optional[int] = None,
    sort_keys: Optional[bool] = None,
) -> str:
    """Serialize a workflow definition to its canonical text form."""
    workflow = coerce_definition(definition)
    payload = workflow.model_dump(mode="json", by_alias=True, exclude_unset=True)
    text = json.dumps(
        payload,
        indent=settings.serialization_indent if indent is None else indent,
        sort_keys=settings.serialization_sort_keys if sort_keys is None else sort_keys,
        ensure_ascii=False,
    )
    return text + "\n"


def split_lines(text: str) -> List[str]:
    """Split text into lines, keeping each line's terminator.

    A final terminator does not start an extra empty line.
    """
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def diff_lines(base_text: str, compare_text: str) -> List[LineDiffSegment]:
    """Compute the line diff between two texts.

    Within each block of changes, removed lines are reported before added
    lines.
    """
    base_lines = split_lines(base_text)
    compare_lines = split_lines(compare_text)

    prefix = 0
    limit = min(len(base_lines), len(compare_lines))
    while prefix < limit and base_lines[prefix] == compare_lines[prefix]:
        prefix += 1

    suffix = 0
    limit -= prefix
    while (
        suffix < limit
        and base_lines[-1 - suffix] == compare_lines[-1 - suffix]
    ):
        suffix += 1

    ops = [(LineChangeKind.UNCHANGED, line) for line in base_lines[:prefix]]
    ops.extend(_shortest_edit(
        base_lines[prefix:len(base_lines) - suffix],
        compare_lines[prefix:len(compare_lines) - suffix],
    ))
    if suffix:
        ops.extend((LineChangeKind.UNCHANGED, line) for line in base_lines[-suffix:])

    segments = _group(ops)
    logger.debug(
        "Computed line diff",
        base_lines=len(base_lines),
        compare_lines=len(compare_lines),
        segments=len(segments),
    )
    return segments


def diff_definitions(base: DefinitionInput, compare: DefinitionInput) -> List[LineDiffSegment]:
    """Serialize two definitions and diff their text."""
    return diff_lines(serialize_definition(base), serialize_definition(compare))


def diff_stats(segments: List[LineDiffSegment]) -> LineDiffStats:
    """Count the added and removed lines of a diff."""
    additions = sum(s.count for s in segments if s.kind == LineChangeKind.ADDED)
    deletions = sum(s.count for s in segments if s.kind == LineChangeKind.REMOVED)
    return LineDiffStats(additions=additions, deletions=deletions)


def _shortest_edit(a: List[str], b: List[str]) -> List[Tuple[LineChangeKind, str]]:
    """Myers shortest edit script from ``a`` to ``b``."""
    n, m = len(a), len(b)
    if n == 0:
        return [(LineChangeKind.ADDED, line) for line in b]
    if m == 0:
        return [(LineChangeKind.REMOVED, line) for line in a]

    max_d = n + m
    offset = max_d + 1
    v = [0] * (2 * max_d + 3)
    # trace[d] holds the furthest x per diagonal k in [-d, d] before step d
    trace: List[List[int]] = []

    for d in range(max_d + 1):
        trace.append(v[offset - d:offset + d + 1])
        done = False
        for k in range(-d, d + 1, 2):
            if k == -d or (k != d and v[offset + k - 1] < v[offset + k + 1]):
                x = v[offset + k + 1]
            else:
                x = v[offset + k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[offset + k] = x
            if x >= n and y >= m:
                done = True
                break
        if done:
            break

    return _backtrack(trace, a, b)


def _backtrack(
    trace: List[List[int]],
    a: List[str],
    b: List[str],
) -> List[Tuple[LineChangeKind, str]]:
    ops: List[Tuple[LineChangeKind, str]] = []
    x, y = len(a), len(b)

    for d in range(len(trace) - 1, 0, -1):
        snapshot = trace[d]
        k = x - y

        if k == -d or (k != d and snapshot[k - 1 + d] < snapshot[k + 1 + d]):
            prev_k = k + 1
        else:
            prev_k = k - 1
        prev_x = snapshot[prev_k + d]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            ops.append((LineChangeKind.UNCHANGED, a[x - 1]))
            x -= 1
            y -= 1

        if x == prev_x:
            ops.append((LineChangeKind.ADDED, b[prev_y]))
        else:
            ops.append((LineChangeKind.REMOVED, a[prev_x]))
        x, y = prev_x, prev_y

    while x > 0 and y > 0:
        ops.append((LineChangeKind.UNCHANGED, a[x - 1]))
        x -= 1
        y -= 1

    ops.reverse()
    return ops


def _group(ops: List[Tuple[LineChangeKind, Any]]) -> List[LineDiffSegment]:
    """Merge per-line operations into maximal runs."""
    segments: List[LineDiffSegment] = []
    unchanged: List[str] = []
    removed: List[str] = []
    added: List[str] = []

    def flush(kind: LineChangeKind, lines: List[str]) -> None:
        if lines:
            segments.append(LineDiffSegment(kind=kind, value="".join(lines), count=len(lines)))
            lines.clear()

    for kind, line in ops:
        if kind == LineChangeKind.UNCHANGED:
            flush(LineChangeKind.REMOVED, removed)
            flush(LineChangeKind.ADDED, added)
            unchanged.append(line)
        else:
            flush(LineChangeKind.UNCHANGED, unchanged)
            (removed if kind == LineChangeKind.REMOVED else added).append(line)

    flush(LineChangeKind.UNCHANGED, unchanged)
    flush(LineChangeKind.REMOVED, removed)
    flush(LineChangeKind.ADDED, added)
    return segments
