"""Models package for data structures used in the application."""

from basecamp2redmine.models.component_results import ComponentResult
from basecamp2redmine.models.migration_error import (
    BackupParseError,
    DuplicateRecordError,
    InvalidArgumentError,
    LinkageError,
    MigrationError,
    RecordShapeError,
)
from basecamp2redmine.models.migration_results import MigrationResult

__all__ = [
    "BackupParseError",
    "ComponentResult",
    "DuplicateRecordError",
    "InvalidArgumentError",
    "LinkageError",
    "MigrationError",
    "MigrationResult",
    "RecordShapeError",
]
