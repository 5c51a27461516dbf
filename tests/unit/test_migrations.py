"""Tests for the migration components and the generation orchestrator."""

import pytest

from basecamp2redmine.migration import ScriptMigration
from basecamp2redmine.migrations.company_migration import CompanyMigration
from basecamp2redmine.migrations.issue_migration import TodoListMigration, TodoMigration
from basecamp2redmine.migrations.message_migration import MessageMigration, message_content
from basecamp2redmine.migrations.project_migration import ProjectMigration
from basecamp2redmine.models import ComponentResult, LinkageError
from basecamp2redmine.models.mapping import IdTables
from basecamp2redmine.models.operations import (
    CLOSED_STATUS,
    DEFAULT_STATUS,
    Assign,
    Call,
    Create,
    Handle,
    RecordBlock,
    Skip,
)
from basecamp2redmine.type_definitions import (
    BasecampBackup,
    Comment,
    Organization,
    Post,
    Project,
    TodoItem,
    TodoList,
)
from basecamp2redmine.utils.filters import FilterSet


def _backup(**records) -> BasecampBackup:
    return BasecampBackup(source_name="backup.xml", **records)


def _component(cls, settings, backup, tables=None, filters=None):
    return cls(
        settings,
        tables or IdTables(),
        filters or FilterSet.from_lists(settings.get_include_only(), settings.get_exclude()),
        backup,
    )


def _create(block: RecordBlock) -> Create:
    return next(op for op in block.create if isinstance(op, Create))


def _assigned(block: RecordBlock, field: str):
    return next(op.value for op in block.create if isinstance(op, Assign) and op.field == field)


@pytest.mark.unit
class TestCompanyMigration:
    def test_firm_then_clients(self, settings) -> None:
        backup = _backup(
            firms=(Organization("1", "Acme Studio", "firm"),),
            clients=(Organization("5", "Globex", "client"),),
        )
        component = _component(CompanyMigration, settings, backup)

        result = component.run()

        assert result.success
        assert result.success_count == 2
        assert [item.target for item in component.items] == [
            Handle("organizations", "1"),
            Handle("organizations", "5"),
        ]
        firm = component.items[0]
        assert firm.announce.message == "About to create firm as parent project 1 ('BC: Acme Studio')."
        assert _create(firm).attributes == {
            "name": "BC: Acme Studio",
            "description": "Acme Studio (Basecamp)",
            "identifier": "basecamp-c-1",
        }

    def test_long_name_is_truncated_to_fit_the_board_suffix(self, settings) -> None:
        backup = _backup(clients=(Organization("5", "Globex International Holding Partners"),))
        component = _component(CompanyMigration, settings, backup)

        component.run()

        name = _create(component.items[0]).attributes["name"]
        assert len(name) == settings.project_name_length - len(settings.name_append)
        assert name.startswith("BC: Globex")

    def test_excluded_client_is_skipped(self, make_settings) -> None:
        settings = make_settings(exclude_client_ids=["5"])
        tables = IdTables()
        component = _component(CompanyMigration, settings, _backup(clients=(Organization("5", "Globex"),)), tables)

        result = component.run()

        assert component.items == [Skip("Skipping client as parent project 5 ('BC: Globex').")]
        assert result.skipped_ids == ["5"]
        assert tables.is_excluded("organizations", "5")

    def test_parent_project_id(self, make_settings) -> None:
        settings = make_settings(parent_project_id=3)
        component = _component(CompanyMigration, settings, _backup(firms=(Organization("1", "Acme", "firm"),)))

        component.run()

        block = component.items[0]
        assert Call(Handle("organizations", "1"), "set_parent!", (3,)) in block.create
        assert block.lookup.conditions == {"name": "BC: Acme", "parent_id": 3}


@pytest.mark.unit
class TestProjectMigration:
    def test_nested_under_organization(self, settings) -> None:
        tables = IdTables()
        tables.register("organizations", "5")
        backup = _backup(projects=(Project("10", "Website Redesign", "5"),))
        component = _component(ProjectMigration, settings, backup, tables)

        component.run()

        block = component.items[0]
        parent = Handle("organizations", "5").id
        assert block.lookup.conditions == {"name": "Website Redesign", "parent_id": parent}
        assert Call(Handle("projects", "10"), "set_parent!", (parent,)) in block.create
        assert _create(block).attributes["identifier"] == "basecamp-p-10"

    def test_unknown_organization_fails(self, settings) -> None:
        backup = _backup(projects=(Project("10", "Website Redesign", "5"),))

        with pytest.raises(LinkageError, match="is unknown"):
            _component(ProjectMigration, settings, backup).run()

    def test_organization_ignored_when_companies_are_off(self, make_settings) -> None:
        settings = make_settings(company_name_as_parent_project=False)
        component = _component(ProjectMigration, settings, _backup(projects=(Project("10", "P", "5"),)))

        component.run()

        assert component.items[0].lookup.conditions == {"name": "P", "parent_id": None}
        assert not any(isinstance(op, Call) for op in component.items[0].create)


@pytest.mark.unit
class TestTodoMigrations:
    def _tables(self) -> IdTables:
        tables = IdTables()
        tables.register("projects", "10")
        return tables

    def test_todo_list_status(self, settings) -> None:
        backup = _backup(
            todo_lists=(TodoList("20", "Launch", "10"), TodoList("21", "Done", "10", complete=True)),
        )
        component = _component(TodoListMigration, settings, backup, self._tables())

        component.run()

        assert _assigned(component.items[0], "status") == DEFAULT_STATUS
        assert _assigned(component.items[1], "status") == CLOSED_STATUS
        assert _create(component.items[0]).attributes["description"] == " (Basecamp ToDoList# 20)"

    def test_todo_inherits_list_project(self, settings) -> None:
        tables = self._tables()
        tables.register("todo_lists", "20")
        backup = _backup(todos=(TodoItem("30", "Write copy", "20", complete=True, created_at="2011-03-01"),))
        component = _component(TodoMigration, settings, backup, tables)

        component.run()

        block = component.items[0]
        todo_list = Handle("todo_lists", "20")
        assert block.lookup.conditions == {"subject": "Write copy", "parent_id": todo_list.id}
        assert _create(block).attributes["created_on"] == "2011-03-01"
        assert _assigned(block, "project") == todo_list.attr("project")
        assert _assigned(block, "parent_issue_id") == todo_list.id
        assert _assigned(block, "status") == CLOSED_STATUS

    def test_excluded_list_propagates_to_todos(self, make_settings) -> None:
        settings = make_settings(exclude_todo_list_ids=["20"])
        tables = self._tables()
        filters = FilterSet.from_lists(settings.get_include_only(), settings.get_exclude())
        backup = _backup(
            todo_lists=(TodoList("20", "Launch", "10"),),
            todos=(TodoItem("30", "Write copy", "20"),),
        )

        lists = _component(TodoListMigration, settings, backup, tables, filters)
        lists.run()
        todos = _component(TodoMigration, settings, backup, tables, filters)
        result = todos.run()

        assert isinstance(todos.items[0], Skip)
        assert result.skipped_ids == ["30"]

    def test_list_in_excluded_project_is_skipped(self, settings) -> None:
        tables = IdTables()
        tables.mark_excluded("projects", "10")
        filters = FilterSet()
        component = _component(TodoListMigration, settings, _backup(todo_lists=(TodoList("20", "L", "10"),)), tables, filters)

        component.run()

        assert component.items == [Skip("Skipping todo-list 20 ('L') [in project 10]: project 10 was not imported")]
        assert not filters.todo_lists.included("20")

    def test_strict_linkage(self, make_settings) -> None:
        tables = IdTables()
        tables.mark_excluded("projects", "10")
        settings = make_settings(strict_linkage=True)

        with pytest.raises(LinkageError, match="was excluded"):
            _component(TodoListMigration, settings, _backup(todo_lists=(TodoList("20", "L", "10"),)), tables).run()


@pytest.mark.unit
class TestMessageMigration:
    def test_post_and_reply(self, settings) -> None:
        tables = IdTables()
        tables.register("projects", "10")
        post = Post(
            "40",
            "Kickoff",
            "10",
            body="<div>Agenda</div>",
            author_name="Ann",
            posted_on="2011-03-02",
            comments=(Comment("50", "Sounds good", "40", author_name="Bob", created_at="2011-03-03"),),
        )
        component = _component(MessageMigration, settings, _backup(posts=(post,)), tables)

        result = component.run()

        message, reply = component.items
        board = Handle("projects", "10").attr("boards", "first")
        assert message.lookup.conditions == {"board_id": board.id, "subject": "Kickoff", "parent_id": None}
        assert _create(message).attributes["content"] == "Agenda\n\n-- \nAnn"
        assert reply.target == Handle("comments", "50")
        assert reply.lookup.conditions["subject"] == "Re: Kickoff"
        assert reply.lookup.conditions["created_on"] == "2011-03-03"
        assert _create(reply).attributes["parent"] == Handle("messages", "40")
        assert result["comments"] == 1

    @staticmethod
    def _post() -> Post:
        return Post(
            "40",
            "Kickoff",
            "10",
            author_name="Ann",
            comments=(Comment("50", "Sounds good", "40", author_name="Bob"),),
        )

    @pytest.mark.parametrize(
        "filter_settings",
        [{"exclude_post_ids": ["40"]}, {"include_only_post_ids": ["41"]}],
    )
    def test_filtered_post_drops_its_comments(self, make_settings, filter_settings: dict) -> None:
        tables = IdTables()
        tables.register("projects", "10")
        component = _component(MessageMigration, make_settings(**filter_settings), _backup(posts=(self._post(),)), tables)

        result = component.run()

        assert component.items == [Skip("Skipping post 40 ('Kickoff') [in project 10]")]
        assert result.skipped_ids == ["40"]
        assert tables.ids("comments") == []
        assert tables.is_excluded("messages", "40")

    def test_post_in_excluded_project_is_skipped(self, settings) -> None:
        tables = IdTables()
        tables.mark_excluded("projects", "10")
        component = _component(MessageMigration, settings, _backup(posts=(self._post(),)), tables)

        result = component.run()

        assert component.items == [
            Skip("Skipping post 40 ('Kickoff') [in project 10]: project 10 was not imported"),
        ]
        assert result.skipped_ids == ["40"]
        assert tables.ids("comments") == []

    def test_message_content(self) -> None:
        assert message_content("Body", "Ann") == "Body\n\n-- \nAnn"


@pytest.mark.unit
class TestScriptMigration:
    def test_component_order(self, settings, make_settings) -> None:
        assert ScriptMigration(settings, _backup()).components() == [
            "companies",
            "projects",
            "todo_lists",
            "todos",
            "messages",
        ]
        no_companies = make_settings(company_name_as_parent_project=False)
        assert "companies" not in ScriptMigration(no_companies, _backup()).components()

    def test_failure_clears_items(self, settings) -> None:
        backup = _backup(projects=(Project("10", "P"),), todo_lists=(TodoList("20", "L", "99"),))
        migration = ScriptMigration(settings, backup)

        result = migration.run()

        assert not result.success
        assert result.overall["failed_component"] == "todo_lists"
        assert result.components["todo_lists"].errors == [result.overall["error"]]
        assert "99" in result.overall["error"]
        assert migration.items == []

    def test_result_lists_handles(self, settings) -> None:
        backup = _backup(firms=(Organization("1", "Acme", "firm"),), projects=(Project("10", "P"),))
        migration = ScriptMigration(settings, backup)

        result = migration.run()

        assert result.success
        assert result.project_ids == ["10"]
        assert result.organization_ids == ["1"]
        assert isinstance(result.components["projects"], ComponentResult)
