"""Comparison API routes for inline workflow definitions."""

from fastapi import APIRouter, Query, Response

from .graph_diff import compute_workflow_diff
from .line_diff import diff_definitions, diff_stats
from .models import WorkflowDiff
from .patch import build_split_view, build_unified_view, generate_patch, patch_filename
from .schemas import ComparisonRequest, LineDiffResponse, LineDiffView

router = APIRouter(prefix="/comparisons", tags=["Comparisons"])


def patch_response(content: str, filename: str) -> Response:
    """Plain-text patch served as a file download."""
    return Response(
        content=content,
        media_type="text/plain",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/diff", response_model=WorkflowDiff)
async def compare_definitions(request: ComparisonRequest) -> WorkflowDiff:
    """Compute the structural diff of two definitions."""
    return compute_workflow_diff(
        request.base,
        request.compare,
        request.base_version,
        request.compare_version,
    )


@router.post("/lines", response_model=LineDiffResponse)
async def compare_lines(
    request: ComparisonRequest,
    view: LineDiffView = Query(LineDiffView.UNIFIED),
) -> LineDiffResponse:
    """Compute the line diff of two definitions."""
    segments = diff_definitions(request.base, request.compare)

    response = LineDiffResponse(
        base_version=request.base_version,
        compare_version=request.compare_version,
        view=view,
        stats=diff_stats(segments),
        segments=segments,
    )
    if view == LineDiffView.SPLIT:
        response.split = build_split_view(segments)
    else:
        response.unified = build_unified_view(segments)
    return response


@router.post("/patch")
async def export_patch(request: ComparisonRequest) -> Response:
    """Export the line diff of two definitions as a patch file."""
    segments = diff_definitions(request.base, request.compare)
    content = generate_patch(segments, request.base_version, request.compare_version)
    return patch_response(content, patch_filename(request.base_version, request.compare_version))
