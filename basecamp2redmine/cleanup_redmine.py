"""Redmine cleanup script generation.

Emits the inverse of an import: one ``destroy`` per project created from
the backup. Deleting a Redmine project cascades to its issues, boards and
messages, so projects are all that has to be addressed.
"""

import logging
from pathlib import Path
from typing import TextIO

from basecamp2redmine.backup_reader import organization_ids, parse_backup_tree, project_ids
from basecamp2redmine.models.operations import Destroy
from basecamp2redmine.script_emitter import render_operation
from config import Settings

logger = logging.getLogger(__name__)

UNDO_HEADER = "# Paste the following Ruby code into the Rails console, or run it with rails runner:"


class UndoGenerator:
    """Builds the deletion script for one backup file."""

    def __init__(self, settings: Settings) -> None:
        """Initialize the undo generator.

        Args:
            settings: Generator settings; the identifier prefix must match the import's

        """
        self.settings = settings

    def operations(self, path: Path) -> list[Destroy]:
        """Return the deletions for every project in ``path``.

        Projects come first, then, when ``undo_organizations`` is set, the
        company projects they were nested under.

        Raises:
            BackupParseError: If the file cannot be parsed
            RecordShapeError: If a project has no valid id

        """
        root = parse_backup_tree(path)
        operations = [Destroy("Project", self.settings.project_identifier(i)) for i in project_ids(root)]
        if self.settings.undo_organizations:
            operations += [
                Destroy("Project", self.settings.organization_identifier(i)) for i in organization_ids(root)
            ]
        logger.info("Prepared %d project deletions from %s", len(operations), path.name)
        return operations

    def lines(self, path: Path) -> list[str]:
        lines = [UNDO_HEADER]
        for operation in self.operations(path):
            lines += render_operation(operation)
        return lines

    def write(self, path: Path, stream: TextIO) -> int:
        """Write the undo script for ``path`` to ``stream``.

        Returns:
            Number of lines written

        """
        lines = self.lines(path)
        for line in lines:
            stream.write(line + "\n")
        return len(lines)
