"""Generation orchestrator.

Runs the migration components in dependency order over one parsed backup
and collects their script items. The run owns a fresh set of id tables
and filters; nothing survives into the next run.
"""

import logging
import time
from collections.abc import Callable

from basecamp2redmine.display import console
from basecamp2redmine.migrations.base_migration import BaseMigration
from basecamp2redmine.migrations.company_migration import CompanyMigration
from basecamp2redmine.migrations.issue_migration import TodoListMigration, TodoMigration
from basecamp2redmine.migrations.message_migration import MessageMigration
from basecamp2redmine.migrations.project_migration import ProjectMigration
from basecamp2redmine.models import ComponentResult, MigrationError, MigrationResult
from basecamp2redmine.models.mapping import IdTables
from basecamp2redmine.models.operations import ScriptItem
from basecamp2redmine.type_definitions import BasecampBackup, ComponentName
from basecamp2redmine.utils.filters import FilterSet
from config import Settings

logger = logging.getLogger(__name__)

# Parents always come before their dependents
COMPONENT_ORDER: tuple[ComponentName, ...] = ("companies", "projects", "todo_lists", "todos", "messages")


def print_component_header(component_name: str) -> None:
    """Print a formatted header for a migration component.

    Args:
        component_name: Name of the component to display

    """
    console.rule(f"RUNNING COMPONENT: {component_name}")


class ScriptMigration:
    """Builds the operations of one import script."""

    def __init__(self, settings: Settings, backup: BasecampBackup) -> None:
        self.settings = settings
        self.backup = backup
        self.tables = IdTables()
        self.filters = FilterSet.from_lists(settings.get_include_only(), settings.get_exclude())
        self.items: list[ScriptItem] = []

    def _build_component_factories(self) -> dict[ComponentName, Callable[[], BaseMigration]]:
        """Return lazy factories for all components sharing this run's state."""
        shared = (self.settings, self.tables, self.filters, self.backup)
        return {
            "companies": lambda: CompanyMigration(*shared),
            "projects": lambda: ProjectMigration(*shared),
            "todo_lists": lambda: TodoListMigration(*shared),
            "todos": lambda: TodoMigration(*shared),
            "messages": lambda: MessageMigration(*shared),
        }

    def components(self) -> list[ComponentName]:
        """Component names to run, in order."""
        if self.settings.company_name_as_parent_project:
            return list(COMPONENT_ORDER)
        return [name for name in COMPONENT_ORDER if name != "companies"]

    def run(self) -> MigrationResult:
        """Run every component and collect its script items.

        A generation error stops the run; the result is then marked failed
        and ``items`` must not be written.

        Returns:
            MigrationResult with per-component results and the project handles

        """
        results = MigrationResult()
        factories = self._build_component_factories()
        components = self.components()
        logger.info("Generation will run the following components in order: %s", components)

        for component_name in components:
            component = factories[component_name]()
            print_component_header(component_name)
            component_start_time = time.time()

            try:
                component_result = component.run()
            except MigrationError as e:
                failed_result = ComponentResult(message=f"{component_name} failed", details={"status": "failed"})
                failed_result.add_error(e.message)
                results.components[component_name] = failed_result
                results.overall["status"] = "failed"
                results.overall["error"] = e.message
                results.overall["failed_component"] = component_name
                logger.error("Component '%s' failed: %s", component_name, e.message)
                break

            component_result["time"] = time.time() - component_start_time
            results.components[component_name] = component_result
            self.items.extend(component.items)

        results.overall["end_time"] = time.strftime("%Y-%m-%dT%H:%M:%S")
        results.project_ids = self.tables.ids("projects")
        results.organization_ids = self.tables.ids("organizations")

        if results.success:
            logger.success("Generated %d script blocks from %s", len(self.items), self.backup.source_name)
        else:
            self.items.clear()
        return results
