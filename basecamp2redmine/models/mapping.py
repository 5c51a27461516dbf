"""Id tables linking Basecamp ids to handles in the generated script.

One ``IdTables`` instance lives for exactly one generation run. Each table
mirrors a Ruby hash declared in the script prologue; a source id is
registered when its find-or-create block is built and is never removed.
"""

import logging
from typing import ClassVar

from basecamp2redmine.models.migration_error import DuplicateRecordError, LinkageError
from basecamp2redmine.models.operations import Handle
from basecamp2redmine.type_definitions import EntityType, SourceId

logger = logging.getLogger(__name__)


class IdTables:
    """Append-only source id -> handle maps, one per entity type."""

    TABLES: ClassVar[tuple[EntityType, ...]] = (
        "organizations",
        "projects",
        "todo_lists",
        "todos",
        "messages",
        "comments",
    )

    def __init__(self) -> None:
        self._handles: dict[EntityType, dict[SourceId, Handle]] = {table: {} for table in self.TABLES}
        self._excluded: dict[EntityType, set[SourceId]] = {table: set() for table in self.TABLES}

    def register(self, table: EntityType, source_id: SourceId) -> Handle:
        """Register ``source_id`` and return its handle.

        Raises:
            DuplicateRecordError: If the id is already registered in ``table``

        """
        handles = self._handles[table]
        if source_id in handles:
            msg = f"Duplicate id {source_id} in {table}"
            raise DuplicateRecordError(msg)
        handle = Handle(table, source_id)
        handles[source_id] = handle
        logger.debug("Registered %s[%s]", table, source_id)
        return handle

    def mark_excluded(self, table: EntityType, source_id: SourceId) -> None:
        """Record that ``source_id`` was seen but produced no entity."""
        self._excluded[table].add(source_id)

    def is_excluded(self, table: EntityType, source_id: SourceId) -> bool:
        return source_id in self._excluded[table]

    def __contains__(self, key: tuple[EntityType, SourceId]) -> bool:
        table, source_id = key
        return source_id in self._handles[table]

    def resolve(self, table: EntityType, source_id: SourceId) -> Handle:
        """Return the handle registered for ``source_id``.

        Raises:
            LinkageError: If no handle was registered

        """
        try:
            return self._handles[table][source_id]
        except KeyError:
            reason = "was excluded" if self.is_excluded(table, source_id) else "is unknown"
            msg = f"No handle for {table} id {source_id}: the record {reason}"
            raise LinkageError(msg, table=table, source_id=source_id) from None

    def ids(self, table: EntityType) -> list[SourceId]:
        """Registered ids of ``table`` in registration order."""
        return list(self._handles[table])
