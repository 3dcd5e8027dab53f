"""Version history dependencies for dependency injection."""

from functools import lru_cache

from flowcompare.history.service import VersionComparisonService
from flowcompare.history.versions import WorkflowVersionStore


@lru_cache()
def get_version_store() -> WorkflowVersionStore:
    """Get the global version store instance."""
    return WorkflowVersionStore()


@lru_cache()
def get_comparison_service() -> VersionComparisonService:
    """Get the global comparison service instance."""
    return VersionComparisonService(get_version_store())
