"""Exceptions for record duplication."""


class DuplicateRecordError(Exception):
    """Base exception for duplicate-record errors."""


class ConfigurationError(DuplicateRecordError):
    """Raised when the step configuration is missing or malformed."""


class NotFoundError(DuplicateRecordError):
    """Raised when a collection or source record cannot be found."""


class StoreOperationError(DuplicateRecordError):
    """Raised when the record store fails to fetch or create a record.

    The message is the underlying store error's message, unchanged, so the
    outcome stays readable for whoever configured the workflow.
    """

    def __init__(self, message: str, operation: str | None = None):
        """Initialize with the store's message and the failing operation."""
        super().__init__(message)
        self.operation = operation


class PluginError(DuplicateRecordError):
    """Raised when the host workflow plugin is unavailable at load time."""
