"""
Exception classes for DailyFlow.
"""


class DailyFlowError(Exception):
    """Base exception for all DailyFlow errors."""
    pass


class ConfigurationError(DailyFlowError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(DailyFlowError):
    """Raised when input fails validation at the model or service boundary."""
    pass


class EntityNotFoundError(DailyFlowError):
    """Raised when a habit, goal, project, day or notification does not exist."""

    def __init__(self, kind: str, entity_id):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id!r} not found")


class FutureDateError(ValidationError):
    """Raised when a completion is toggled for a date after today."""
    pass


class StorageError(DailyFlowError):
    """Raised when user data cannot be read or written."""
    pass
