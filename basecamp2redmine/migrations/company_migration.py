"""Company migration component.

Handles the firm and its client companies. Each company becomes a
top-level Redmine project that the company's Basecamp projects are nested
under.
"""

from basecamp2redmine.migrations.base_migration import BaseMigration
from basecamp2redmine.migrations.project_migration import build_project_block
from basecamp2redmine.models import ComponentResult
from basecamp2redmine.utils.text import sanitize


class CompanyMigration(BaseMigration):
    """Generates parent projects for the firm and its clients.

    The firm is listed first, then every client, both filtered by the
    client allow/deny lists. Names are prefixed so that company projects
    stand out from regular ones.
    """

    TABLE = "organizations"

    def build(self, result: ComponentResult) -> None:
        settings = self.settings
        name_length = settings.project_name_length - len(settings.name_append)

        for organization in self.backup.organizations:
            result.total_count += 1
            name = sanitize(organization.name)
            short_name = self.shorten(settings.company_project_prefix_short + name, name_length)

            if not self.filters.clients.included(organization.id):
                self.skip(
                    result,
                    organization.id,
                    f"Skipping {organization.kind} as parent project {organization.id} ('{short_name}').",
                )
                continue

            target = self.tables.register("organizations", organization.id)
            self.items.append(
                build_project_block(
                    settings,
                    target,
                    announce=f"About to create {organization.kind} as parent project {organization.id} ('{short_name}').",
                    name=name,
                    short_name=short_name,
                    identifier=settings.organization_identifier(organization.id),
                    board_description=self.shorten(
                        settings.company_project_prefix + name,
                        settings.board_description_length,
                    ),
                    parent=settings.parent_project_id,
                ),
            )
