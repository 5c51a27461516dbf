"""Tests for the allow/deny filters."""

import pytest

from basecamp2redmine.utils.filters import EntityFilter, FilterSet, included


@pytest.mark.unit
@pytest.mark.parametrize(
    ("allow", "deny", "expected"),
    [
        ([], [], True),
        (["10"], [], True),
        (["11"], [], False),
        ([], ["10"], False),
        (["10"], ["10"], False),
        (["11"], ["10"], False),
    ],
)
def test_included_truth_table(allow: list[str], deny: list[str], expected: bool) -> None:
    assert included("10", allow, deny) is expected


@pytest.mark.unit
def test_exclude_propagates() -> None:
    todo_lists = EntityFilter()
    assert todo_lists.included("20")

    todo_lists.exclude("20")

    assert not todo_lists.included("20")
    assert todo_lists.included("21")


@pytest.mark.unit
def test_from_lists_copies_and_stringifies() -> None:
    exclude = {"todo_lists": [20]}
    filters = FilterSet.from_lists({"projects": ["10"]}, exclude)

    filters.todo_lists.exclude("21")

    assert filters.projects.included("10")
    assert not filters.projects.included("11")
    assert not filters.todo_lists.included("20")
    assert exclude == {"todo_lists": [20]}
    assert filters.for_boundary("todo_lists") is filters.todo_lists
    assert filters.posts.included("40")


@pytest.mark.unit
def test_from_settings(make_settings) -> None:
    settings = make_settings(exclude_project_ids=["10"], include_only_post_ids="40, 41")
    filters = FilterSet.from_lists(settings.get_include_only(), settings.get_exclude())

    assert not filters.projects.included("10")
    assert filters.posts.included("41")
    assert not filters.posts.included("42")
