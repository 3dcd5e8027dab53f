"""Workflow version history API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from flowcompare.comparison.routes import patch_response
from flowcompare.history.dependencies import get_comparison_service, get_version_store
from flowcompare.history.exceptions import (
    WorkflowVersionConflictError,
    WorkflowVersionMismatchError,
    WorkflowVersionNotFoundError,
)
from flowcompare.history.schemas import VersionCreate, VersionListResponse, VersionSummary
from flowcompare.history.service import ComparisonResult, VersionComparisonService
from flowcompare.history.versions import WorkflowVersion, WorkflowVersionStore

router = APIRouter(prefix="/workflows", tags=["Versions"])


@router.post(
    "/{workflow_id}/versions",
    response_model=VersionSummary,
    status_code=status.HTTP_201_CREATED,
)
async def create_version(
    workflow_id: str,
    version_data: VersionCreate,
    store: WorkflowVersionStore = Depends(get_version_store),
) -> VersionSummary:
    """Record a new version of a workflow."""
    try:
        if version_data.version is None:
            version = await store.create_version(
                workflow_id=workflow_id,
                definition=version_data.definition,
                created_by=version_data.created_by,
                message=version_data.message,
            )
        else:
            version = await store.add_version(WorkflowVersion(
                workflow_id=workflow_id,
                version=version_data.version,
                created_by=version_data.created_by,
                message=version_data.message,
                definition=version_data.definition,
            ))
        return VersionSummary.from_version(version)
    except WorkflowVersionConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )


@router.get("/{workflow_id}/versions", response_model=VersionListResponse)
async def list_versions(
    workflow_id: str,
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    store: WorkflowVersionStore = Depends(get_version_store),
) -> VersionListResponse:
    """List versions of a workflow, newest first."""
    total = len(await store.list_versions(workflow_id))
    versions = await store.list_versions(workflow_id, limit=limit, offset=offset)

    return VersionListResponse(
        items=[VersionSummary.from_version(v) for v in versions],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{workflow_id}/versions/compare", response_model=ComparisonResult)
async def compare_versions(
    workflow_id: str,
    base: str = Query(..., description="Base version ID"),
    compare: str = Query(..., description="Compare version ID"),
    service: VersionComparisonService = Depends(get_comparison_service),
) -> ComparisonResult:
    """Compare two recorded versions of a workflow."""
    try:
        return await service.compare_versions(base, compare, workflow_id=workflow_id)
    except WorkflowVersionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except WorkflowVersionMismatchError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/{workflow_id}/versions/compare/patch")
async def export_version_patch(
    workflow_id: str,
    base: str = Query(..., description="Base version ID"),
    compare: str = Query(..., description="Compare version ID"),
    service: VersionComparisonService = Depends(get_comparison_service),
) -> Response:
    """Export the line diff of two recorded versions as a patch file."""
    try:
        filename, content = await service.export_patch(base, compare, workflow_id=workflow_id)
        return patch_response(content, filename)
    except WorkflowVersionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except WorkflowVersionMismatchError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("/{workflow_id}/versions/{version_id}", response_model=WorkflowVersion)
async def get_version(
    workflow_id: str,
    version_id: str,
    store: WorkflowVersionStore = Depends(get_version_store),
) -> WorkflowVersion:
    """Get a single version with its definition."""
    try:
        version = await store.get_version(version_id)
    except WorkflowVersionNotFoundError:
        version = None

    if version is None or version.workflow_id != workflow_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Version not found",
        )
    return version
