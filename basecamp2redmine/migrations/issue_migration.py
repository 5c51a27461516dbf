"""Todo-list and todo migration components.

A todo-list becomes a Redmine issue in its project; every todo becomes a
sub-issue of its list's issue. Completed records get the closed status.
"""

from basecamp2redmine.migrations.base_migration import BaseMigration
from basecamp2redmine.models import ComponentResult
from basecamp2redmine.models.operations import (
    AUTHOR,
    TRACKER,
    Announce,
    Assign,
    Create,
    Lookup,
    RecordBlock,
    Report,
    Save,
    status_for,
)
from basecamp2redmine.utils.text import sanitize


class TodoListMigration(BaseMigration):
    """Generates one Redmine issue per Basecamp todo-list."""

    TABLE = "todo_lists"

    def build(self, result: ComponentResult) -> None:
        for todo_list in self.backup.todo_lists:
            result.total_count += 1
            name = sanitize(todo_list.name)
            short_name = self.shorten(name, self.settings.issue_subject_length)
            trace = f"todo-list {todo_list.id} ('{short_name}') [in project {todo_list.project_id}]"

            if not self.filters.todo_lists.included(todo_list.id):
                self._exclude(result, todo_list.id, f"Skipping {trace}")
                continue

            project = self.resolve_parent("projects", todo_list.project_id)
            if project is None:
                self._exclude(
                    result,
                    todo_list.id,
                    f"Skipping {trace}: project {todo_list.project_id} was not imported",
                )
                continue

            target = self.tables.register("todo_lists", todo_list.id)
            description = sanitize(todo_list.description)
            self.items.append(
                RecordBlock(
                    announce=Announce(
                        f"About to create todo-list {todo_list.id} ('{short_name}') as Redmine issue "
                        f"under project {todo_list.project_id}.",
                    ),
                    lookup=Lookup(target, "Issue", {"subject": short_name, "project_id": project.id}),
                    create=[
                        Create(
                            target,
                            "Issue",
                            {
                                "subject": short_name,
                                "description": f"{description} (Basecamp ToDoList# {todo_list.id})",
                            },
                        ),
                        Assign(target, "status", status_for(todo_list.complete)),
                        Assign(target, "tracker", TRACKER),
                        Assign(target, "author", AUTHOR),
                        Assign(target, "project", project),
                        Save(target),
                        Report(target, " Saved as New Issue ID "),
                    ],
                    existing=[Report(target, " Exists as Issue ID ")],
                ),
            )

    def _exclude(self, result: ComponentResult, source_id: str, message: str) -> None:
        # Todos of this list are excluded along with it
        self.filters.todo_lists.exclude(source_id)
        self.skip(result, source_id, message)


class TodoMigration(BaseMigration):
    """Generates one Redmine sub-issue per Basecamp todo."""

    TABLE = "todos"

    def build(self, result: ComponentResult) -> None:
        for todo in self.backup.todos:
            result.total_count += 1
            content = sanitize(todo.content)
            short_content = self.shorten(content, self.settings.issue_subject_length)
            trace = f"todo {todo.id} ('{short_content}') [in todo-list {todo.todo_list_id}]"

            if not (self.filters.todo_lists.included(todo.todo_list_id) and self.filters.todos.included(todo.id)):
                self.skip(result, todo.id, f"Skipping {trace}")
                continue

            todo_list = self.resolve_parent("todo_lists", todo.todo_list_id)
            if todo_list is None:
                self.skip(result, todo.id, f"Skipping {trace}: todo-list {todo.todo_list_id} was not imported")
                continue

            target = self.tables.register("todos", todo.id)
            attributes = {"subject": short_content, "description": f"{content} (Basecamp ToDo# {todo.id})"}
            if todo.created_at:
                attributes["created_on"] = todo.created_at

            self.items.append(
                RecordBlock(
                    announce=Announce(
                        f"About to create todo {todo.id} as Redmine sub-issue under issue {todo.todo_list_id}.",
                    ),
                    lookup=Lookup(target, "Issue", {"subject": short_content, "parent_id": todo_list.id}),
                    create=[
                        Create(target, "Issue", attributes),
                        Assign(target, "status", status_for(todo.complete)),
                        Assign(target, "tracker", TRACKER),
                        Assign(target, "author", AUTHOR),
                        Assign(target, "project", todo_list.attr("project")),
                        Assign(target, "parent_issue_id", todo_list.id),
                        Save(target),
                        Report(target, " Saved as New Issue ID "),
                    ],
                    existing=[Report(target, " Exists as Issue ID ")],
                ),
            )
