"""Workflow version records and the version history store.

Versions are immutable once recorded: the store only ever adds records or
drops the oldest ones when a retention limit is configured.
"""

import asyncio
import hashlib
import json
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from flowcompare.comparison.models import WorkflowDefinition
from flowcompare.config import settings

from .exceptions import WorkflowVersionConflictError, WorkflowVersionNotFoundError

logger = structlog.get_logger()


class WorkflowVersion(BaseModel):
    """Immutable snapshot of a workflow definition."""

    id: str = Field(default_factory=lambda: str(uuid4()), description="Version ID")
    workflow_id: str = Field(..., description="Workflow ID")
    version: int = Field(..., ge=1, description="Sequential version number")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp",
    )
    created_by: Optional[str] = Field(default=None, description="User who created this version")
    message: Optional[str] = Field(default=None, description="Version message")
    definition: WorkflowDefinition = Field(
        default_factory=WorkflowDefinition, description="Workflow graph"
    )

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("workflow_id")
    @classmethod
    def validate_workflow_id(cls, v):
        """Validate workflow id is not blank."""
        if not v or not v.strip():
            raise ValueError("Workflow ID cannot be empty")
        return v.strip()

    def content_hash(self) -> str:
        """Calculate SHA-256 hash of the definition content."""
        content = self.definition.model_dump(mode="json", by_alias=True, exclude_unset=True)
        content_json = json.dumps(content, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(content_json.encode("utf-8")).hexdigest()


class WorkflowVersionStore:
    """In-memory version history for workflows."""

    def __init__(self, max_versions_per_workflow: Optional[int] = None):
        self.logger = logger.bind(component="workflow_version_store")
        self.max_versions_per_workflow = (
            settings.max_versions_per_workflow
            if max_versions_per_workflow is None
            else max_versions_per_workflow
        )
        self._versions: Dict[str, WorkflowVersion] = {}
        self._by_workflow: Dict[str, List[str]] = {}
        self._lock = asyncio.Lock()

    async def add_version(self, version: WorkflowVersion) -> WorkflowVersion:
        """Record an existing version snapshot."""
        async with self._lock:
            if version.id in self._versions:
                raise WorkflowVersionConflictError(f"Version {version.id} already exists")

            for existing in self._iter_workflow(version.workflow_id):
                if existing.version == version.version:
                    raise WorkflowVersionConflictError(
                        f"Workflow {version.workflow_id} already has version {version.version}"
                    )

            self._versions[version.id] = version
            self._by_workflow.setdefault(version.workflow_id, []).append(version.id)
            self._prune(version.workflow_id)

        self.logger.info(
            "Workflow version recorded",
            workflow_id=version.workflow_id,
            version_id=version.id,
            version=version.version,
        )
        return version

    async def create_version(
        self,
        workflow_id: str,
        definition: WorkflowDefinition,
        created_by: Optional[str] = None,
        message: Optional[str] = None,
    ) -> WorkflowVersion:
        """Record a definition as the next version of a workflow."""
        latest = await self.get_latest_version(workflow_id)
        version = WorkflowVersion(
            workflow_id=workflow_id,
            version=latest.version + 1 if latest else 1,
            created_by=created_by,
            message=message,
            definition=definition,
        )
        return await self.add_version(version)

    async def get_version(self, version_id: str) -> WorkflowVersion:
        """Get a version by id."""
        version = self._versions.get(version_id)
        if version is None:
            raise WorkflowVersionNotFoundError(f"Version {version_id} not found")
        return version

    async def list_versions(
        self,
        workflow_id: str,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[WorkflowVersion]:
        """List versions of a workflow, newest first."""
        versions = sorted(
            self._iter_workflow(workflow_id),
            key=lambda v: v.version,
            reverse=True,
        )
        end = None if limit is None else offset + limit
        return versions[offset:end]

    async def get_latest_version(self, workflow_id: str) -> Optional[WorkflowVersion]:
        """Get the highest version of a workflow."""
        versions = await self.list_versions(workflow_id, limit=1)
        return versions[0] if versions else None

    def _iter_workflow(self, workflow_id: str):
        for version_id in self._by_workflow.get(workflow_id, []):
            yield self._versions[version_id]

    def _prune(self, workflow_id: str) -> None:
        """Drop the oldest versions beyond the retention limit."""
        if not self.max_versions_per_workflow:
            return

        ids = self._by_workflow.get(workflow_id, [])
        excess = len(ids) - self.max_versions_per_workflow
        if excess <= 0:
            return

        ids.sort(key=lambda version_id: self._versions[version_id].version)
        for version_id in ids[:excess]:
            del self._versions[version_id]
        del ids[:excess]

        self.logger.debug(
            "Pruned workflow versions",
            workflow_id=workflow_id,
            removed=excess,
        )
