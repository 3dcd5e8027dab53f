"""Base exceptions for FlowCompare."""


class FlowCompareException(Exception):
    """Base exception for all FlowCompare errors."""
    pass


class ConfigurationError(FlowCompareException):
    """Raised when there's a configuration error."""
    pass


class ValidationError(FlowCompareException):
    """Raised when validation fails."""
    pass


class NotFoundError(FlowCompareException):
    """Raised when a resource is not found."""
    pass


class ConflictError(FlowCompareException):
    """Raised when there's a conflict."""
    pass
