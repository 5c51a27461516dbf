"""Base migration class providing common functionality for all migration components."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from basecamp2redmine.models import ComponentResult, LinkageError, MigrationError
from basecamp2redmine.models.operations import Handle, ScriptItem, Skip
from basecamp2redmine.utils.text import truncate

if TYPE_CHECKING:
    from basecamp2redmine.models.mapping import IdTables
    from basecamp2redmine.type_definitions import BasecampBackup, EntityType, SourceId
    from basecamp2redmine.utils.filters import FilterSet
    from config import Settings


class BaseMigration:
    """Base class for all migration components.

    A component turns one kind of source record into script items. All
    components of a run share the same settings, id tables, filters and
    backup; the orchestrator runs them in dependency order so that every
    parent handle is registered before its dependents look it up.
    """

    # Id table the component registers its records in
    TABLE: EntityType

    def __init__(
        self,
        settings: Settings,
        tables: IdTables,
        filters: FilterSet,
        backup: BasecampBackup,
    ) -> None:
        """Initialize the component with the run-scoped state.

        Args:
            settings: Validated generator settings
            tables: Id tables shared by every component of the run
            filters: Filters shared by every component of the run
            backup: Parsed backup file

        """
        self.settings = settings
        self.tables = tables
        self.filters = filters
        self.backup = backup
        self.items: list[ScriptItem] = []
        self.logger = logging.getLogger(f"basecamp2redmine.{self.__class__.__name__}")

    def shorten(self, text: str, max_length: int) -> str:
        """Center-truncate ``text`` using the configured ellipsis."""
        return truncate(text, max_length, self.settings.ellipsis)

    def skip(self, result: ComponentResult, source_id: SourceId, message: str) -> None:
        """Emit a skip trace and mark ``source_id`` as excluded in this component's table."""
        self.items.append(Skip(message))
        self.tables.mark_excluded(self.TABLE, source_id)
        result.skipped_count += 1
        result.skipped_ids.append(source_id)
        self.logger.debug("%s", message)

    def resolve_parent(self, table: EntityType, source_id: SourceId) -> Handle | None:
        """Return the handle of a parent record, or ``None`` if it was excluded.

        A parent that was seen and excluded yields ``None`` so that the
        caller can skip its dependent. With ``strict_linkage`` that case is
        an error as well.

        Raises:
            LinkageError: If the parent is unknown, or excluded in strict mode

        """
        if (table, source_id) in self.tables:
            return self.tables.resolve(table, source_id)
        if self.tables.is_excluded(table, source_id) and not self.settings.strict_linkage:
            return None
        return self.tables.resolve(table, source_id)

    def build(self, result: ComponentResult) -> None:
        """Append the script items of every record to ``self.items``."""
        raise NotImplementedError

    def run(self) -> ComponentResult:
        """Build this component's script items.

        Generation errors are not caught here: a broken record aborts the
        whole run before any output is written.

        Returns:
            ComponentResult with counts of generated and skipped records

        Raises:
            MigrationError: If a record cannot be mapped

        """
        result = ComponentResult()
        try:
            self.build(result)
        except LinkageError as e:
            self.logger.error("Linkage failed in %s: %s", self.__class__.__name__, e.message)
            raise
        except MigrationError:
            self.logger.exception("Generation failed in %s", self.__class__.__name__)
            raise

        result.success = True
        result.success_count = result.total_count - result.skipped_count
        result.message = (
            f"Generated {result.success_count} of {result.total_count} {self.TABLE.replace('_', ' ')}"
            f" ({result.skipped_count} skipped)"
        )
        result["items"] = len(self.items)
        self.logger.info(result.message)
        return result
