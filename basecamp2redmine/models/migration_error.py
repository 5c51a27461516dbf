"""Defines exceptions for the script generation process."""


class MigrationError(Exception):
    """Base exception for generation errors.

    Should be used when a migration component encounters an error
    that prevents it from continuing execution.
    """

    def __init__(self, message: str, *args: object, **kwargs: object) -> None:
        """Initialize the exception with a descriptive message.

        Args:
            message: Detailed error message
            *args: Additional positional arguments for Exception
            **kwargs: Additional keyword arguments for Exception

        """
        super().__init__(message, *args, **kwargs)
        self.message = message


class InvalidArgumentError(MigrationError, ValueError):
    """Raised when a helper is called with arguments it cannot honour."""


class BackupParseError(MigrationError):
    """Raised when the backup file cannot be read or is not well-formed XML."""


class RecordShapeError(MigrationError):
    """Raised when a record lacks a required field or carries a malformed id."""

    def __init__(self, message: str, *, element: str | None = None, field: str | None = None) -> None:
        """Initialize with the offending element and field names."""
        super().__init__(message)
        self.element = element
        self.field = field


class LinkageError(MigrationError):
    """Raised when a record references a parent that has no handle."""

    def __init__(self, message: str, *, table: str, source_id: str) -> None:
        """Initialize with the parent table and id that could not be resolved."""
        super().__init__(message)
        self.table = table
        self.source_id = source_id


class DuplicateRecordError(MigrationError):
    """Raised when the same source id is registered twice in one id table."""
