"""Project migration component.

Maps Basecamp projects to Redmine projects with the Basecamp tracker, the
issue tracking and boards modules and one message board.
"""

from basecamp2redmine.migrations.base_migration import BaseMigration
from basecamp2redmine.models import ComponentResult
from basecamp2redmine.models.operations import (
    TRACKER,
    Announce,
    Append,
    Assign,
    Call,
    Create,
    EnsureBoard,
    Handle,
    Lookup,
    New,
    RecordBlock,
    Report,
    Save,
    Track,
)
from basecamp2redmine.type_definitions import Project
from basecamp2redmine.utils.text import sanitize
from config import Settings


def build_project_block(
    settings: Settings,
    target: Handle,
    *,
    announce: str,
    name: str,
    short_name: str,
    identifier: str,
    board_description: str,
    parent: Handle | int | None,
) -> RecordBlock:
    """Find-or-create block shared by company and project records.

    Args:
        settings: Generator settings
        target: Handle the project is stored in
        announce: Progress message printed before the block
        name: Full sanitized name, used in the description
        short_name: Truncated project name, also the lookup key
        identifier: Unique Redmine identifier slug
        board_description: Description of the project's board
        parent: Parent project handle, configured Redmine id, or ``None``

    Returns:
        The record block

    """
    parent_id = parent.id if isinstance(parent, Handle) else parent
    board = New("Board", {"name": short_name + settings.name_append, "description": board_description})

    create = [
        Create(target, "Project", {"name": short_name, "description": f"{name} (Basecamp)", "identifier": identifier}),
        Assign(target, "enabled_module_names", list(settings.enabled_modules)),
        Append(target, "trackers", TRACKER),
        Append(target, "boards", board),
        Save(target),
        Track(target),
    ]
    if parent_id is not None:
        create.append(Call(target, "set_parent!", (parent_id,)))
    create.append(Report(target, " Saved as New Project ID "))

    return RecordBlock(
        announce=Announce(announce),
        lookup=Lookup(target, "Project", {"name": short_name, "parent_id": parent_id}),
        create=create,
        existing=[Report(target, " Exists as Project ID "), EnsureBoard(target, board)],
    )


class ProjectMigration(BaseMigration):
    """Generates one Redmine project per Basecamp project."""

    TABLE = "projects"

    def _parent(self, project: Project) -> Handle | int | None:
        if self.settings.company_name_as_parent_project and project.organization_id is not None:
            return self.resolve_parent("organizations", project.organization_id)
        return self.settings.parent_project_id

    def build(self, result: ComponentResult) -> None:
        name_length = self.settings.project_name_length - len(self.settings.name_append)

        for project in self.backup.projects:
            result.total_count += 1
            name = sanitize(project.name)
            short_name = self.shorten(name, name_length)

            if not self.filters.projects.included(project.id):
                self.skip(result, project.id, f"Skipping project {project.id} ('{short_name}')")
                continue

            parent = self._parent(project)
            if parent is None and self.settings.company_name_as_parent_project and project.organization_id:
                self.skip(
                    result,
                    project.id,
                    f"Skipping project {project.id} ('{short_name}'): organization {project.organization_id} was not imported",
                )
                continue

            target = self.tables.register("projects", project.id)
            self.items.append(
                build_project_block(
                    self.settings,
                    target,
                    announce=f"About to create project {project.id} ('{short_name}').",
                    name=name,
                    short_name=short_name,
                    identifier=self.settings.project_identifier(project.id),
                    board_description=self.shorten(name, self.settings.board_description_length),
                    parent=parent,
                ),
            )
