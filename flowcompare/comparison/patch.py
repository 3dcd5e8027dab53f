"""Unified, split and patch projections of a line diff.

All projections are derived from the segments alone; the diff itself is never
recomputed.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from flowcompare.config import settings
from flowcompare.exceptions import ConfigurationError

from .line_diff import LineChangeKind, LineDiffSegment

_MARKERS = {
    LineChangeKind.ADDED: "+",
    LineChangeKind.REMOVED: "-",
    LineChangeKind.UNCHANGED: " ",
}


class UnifiedLine(BaseModel):
    """A line of the unified view."""

    model_config = ConfigDict(frozen=True)

    old_number: Optional[int] = None
    new_number: Optional[int] = None
    marker: str
    kind: LineChangeKind
    text: str


class SplitCell(BaseModel):
    """One side of a split view row."""

    model_config = ConfigDict(frozen=True)

    number: int
    text: str
    kind: LineChangeKind


class SplitRow(BaseModel):
    """A row of the split view; an empty side is ``None``."""

    model_config = ConfigDict(frozen=True)

    left: Optional[SplitCell] = None
    right: Optional[SplitCell] = None


def build_unified_view(segments: List[LineDiffSegment]) -> List[UnifiedLine]:
    """Interleave all lines with old and new line numbers."""
    result: List[UnifiedLine] = []
    old_number = 1
    new_number = 1

    for segment in segments:
        for line in segment.lines:
            old: Optional[int] = None
            new: Optional[int] = None
            if segment.kind == LineChangeKind.ADDED:
                new = new_number
                new_number += 1
            elif segment.kind == LineChangeKind.REMOVED:
                old = old_number
                old_number += 1
            else:
                old = old_number
                new = new_number
                old_number += 1
                new_number += 1

            result.append(UnifiedLine(
                old_number=old,
                new_number=new,
                marker=_MARKERS[segment.kind],
                kind=segment.kind,
                text=line,
            ))

    return result


def build_split_view(segments: List[LineDiffSegment]) -> List[SplitRow]:
    """Align base lines on the left and compare lines on the right."""
    rows: List[SplitRow] = []
    left_number = 1
    right_number = 1

    for segment in segments:
        for line in segment.lines:
            if segment.kind == LineChangeKind.ADDED:
                rows.append(SplitRow(
                    right=SplitCell(number=right_number, text=line, kind=segment.kind),
                ))
                right_number += 1
            elif segment.kind == LineChangeKind.REMOVED:
                rows.append(SplitRow(
                    left=SplitCell(number=left_number, text=line, kind=segment.kind),
                ))
                left_number += 1
            else:
                rows.append(SplitRow(
                    left=SplitCell(number=left_number, text=line, kind=segment.kind),
                    right=SplitCell(number=right_number, text=line, kind=segment.kind),
                ))
                left_number += 1
                right_number += 1

    return rows


def render_unified_text(lines: List[UnifiedLine], show_line_numbers: bool = True) -> str:
    """Render the unified view as plain text."""
    if not lines:
        return ""

    width = max(
        len(str(n))
        for line in lines
        for n in (line.old_number, line.new_number, 1)
        if n is not None
    )
    rendered = []
    for line in lines:
        row = f"{line.marker} {line.text}"
        if show_line_numbers:
            old = str(line.old_number) if line.old_number is not None else ""
            new = str(line.new_number) if line.new_number is not None else ""
            row = f"{old:>{width}} {new:>{width}} | {row}"
        rendered.append(row)
    return "\n".join(rendered)


def generate_patch(
    segments: List[LineDiffSegment],
    base_version: Any,
    compare_version: Any,
) -> str:
    """Build the exportable patch document for a line diff."""
    lines = [
        f"--- workflow v{base_version}",
        f"+++ workflow v{compare_version}",
        "",
    ]

    for segment in segments:
        if segment.kind == LineChangeKind.ADDED:
            prefix = "+ "
        elif segment.kind == LineChangeKind.REMOVED:
            prefix = "- "
        else:
            prefix = "  "
        lines.extend(f"{prefix}{line}" for line in segment.lines)

    return "\n".join(lines)


def patch_filename(base_version: Any, compare_version: Any) -> str:
    """Suggested file name for an exported patch."""
    template = settings.patch_filename_template
    try:
        return template.format(base=base_version, compare=compare_version)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigurationError(f"Invalid patch file name template {template!r}: {e}")
