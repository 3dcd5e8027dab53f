"""Version history exceptions."""

from flowcompare.exceptions import ConflictError, NotFoundError, ValidationError


class VersionHistoryError(Exception):
    """Base exception for version history errors."""
    pass


class WorkflowVersionNotFoundError(VersionHistoryError, NotFoundError):
    """Raised when a workflow version is not found."""
    pass


class WorkflowVersionConflictError(VersionHistoryError, ConflictError):
    """Raised when a version id or version number is already taken."""
    pass


class WorkflowVersionMismatchError(VersionHistoryError, ValidationError):
    """Raised when two compared versions belong to different workflows."""
    pass


class DefinitionLoadError(VersionHistoryError, ValidationError):
    """Raised when a workflow definition file cannot be loaded."""
    pass
