"""Comparison of recorded workflow versions."""

from collections import OrderedDict
from typing import List, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from flowcompare.comparison import (
    LineDiffSegment,
    LineDiffStats,
    WorkflowDiff,
    compute_workflow_diff,
    diff_definitions,
    diff_stats,
    generate_patch,
    patch_filename,
)
from flowcompare.config import settings

from .exceptions import WorkflowVersionMismatchError
from .versions import WorkflowVersionStore

logger = structlog.get_logger()

VersionPair = Tuple[str, str]


class ComparisonResult(BaseModel):
    """Result of comparing two recorded workflow versions."""

    model_config = ConfigDict(frozen=True)

    workflow_id: str = Field(..., description="Workflow ID")
    base_version_id: str = Field(..., description="Base version ID")
    compare_version_id: str = Field(..., description="Compare version ID")
    base_version: int = Field(..., description="Base version number")
    compare_version: int = Field(..., description="Compare version number")
    diff: WorkflowDiff = Field(..., description="Structural diff")
    line_stats: LineDiffStats = Field(..., description="Added and removed line counts")
    segments: List[LineDiffSegment] = Field(default_factory=list, description="Line diff runs")
    patch_filename: str = Field(..., description="Suggested patch file name")


class ComparisonCache:
    """LRU cache of comparisons keyed by (base id, compare id).

    Versions never change once recorded, so entries never need invalidation.
    """

    def __init__(self, max_size: int):
        self.max_size = max_size
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[VersionPair, ComparisonResult]" = OrderedDict()

    def get(self, key: VersionPair) -> Optional[ComparisonResult]:
        result = self._entries.get(key)
        if result is None:
            self.misses += 1
            return None
        self.hits += 1
        self._entries.move_to_end(key)
        return result

    def put(self, key: VersionPair, result: ComparisonResult) -> None:
        if self.max_size <= 0:
            return
        self._entries[key] = result
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: VersionPair) -> bool:
        return key in self._entries


class VersionComparisonService:
    """Compares recorded versions and exports patches."""

    def __init__(self, store: WorkflowVersionStore, cache_size: Optional[int] = None):
        self.store = store
        self.cache = ComparisonCache(
            settings.comparison_cache_size if cache_size is None else cache_size
        )
        self.logger = logger.bind(component="version_comparison_service")

    async def compare_versions(
        self,
        base_version_id: str,
        compare_version_id: str,
        workflow_id: Optional[str] = None,
    ) -> ComparisonResult:
        """Compare two versions, reusing a cached result for the same pair.

        Both versions are resolved before the cache is consulted, so a version
        dropped by retention is reported as missing even if a comparison of it
        is still cached.
        """
        base = await self.store.get_version(base_version_id)
        compare = await self.store.get_version(compare_version_id)
        self._check_workflow(base.workflow_id, compare.workflow_id, workflow_id)

        key = (base_version_id, compare_version_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        self.logger.info(
            "Comparing workflow versions",
            workflow_id=base.workflow_id,
            base_version=base.version,
            compare_version=compare.version,
        )

        diff = compute_workflow_diff(
            base.definition,
            compare.definition,
            base.version,
            compare.version,
        )
        segments = diff_definitions(base.definition, compare.definition)

        result = ComparisonResult(
            workflow_id=base.workflow_id,
            base_version_id=base.id,
            compare_version_id=compare.id,
            base_version=base.version,
            compare_version=compare.version,
            diff=diff,
            line_stats=diff_stats(segments),
            segments=segments,
            patch_filename=patch_filename(base.version, compare.version),
        )
        self.cache.put(key, result)

        self.logger.info(
            "Workflow versions compared",
            workflow_id=base.workflow_id,
            total_changes=diff.summary.total_changes,
            additions=result.line_stats.additions,
            deletions=result.line_stats.deletions,
        )
        return result

    async def export_patch(
        self,
        base_version_id: str,
        compare_version_id: str,
        workflow_id: Optional[str] = None,
    ) -> Tuple[str, str]:
        """Return the patch file name and content for two versions."""
        result = await self.compare_versions(base_version_id, compare_version_id, workflow_id)
        content = generate_patch(result.segments, result.base_version, result.compare_version)
        return result.patch_filename, content

    @staticmethod
    def _check_workflow(base_workflow: str, compare_workflow: str, expected: Optional[str]) -> None:
        if base_workflow != compare_workflow:
            raise WorkflowVersionMismatchError(
                "Versions belong to different workflows and cannot be compared"
            )
        if expected is not None and base_workflow != expected:
            raise WorkflowVersionMismatchError(
                f"Versions do not belong to workflow {expected}"
            )
