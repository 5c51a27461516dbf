"""Inclusion and exclusion rules for source records.

Every entity boundary has an allow-list and a deny-list of Basecamp ids.
An empty allow-list admits everything; the deny-list always wins.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from basecamp2redmine.type_definitions import FilterBoundary, SourceId


def included(source_id: SourceId, allow: Iterable[SourceId], deny: Iterable[SourceId]) -> bool:
    """Return whether ``source_id`` passes the allow-list and the deny-list."""
    allow = set(allow)
    return (not allow or source_id in allow) and source_id not in set(deny)


@dataclass(slots=True)
class EntityFilter:
    """Allow/deny lists for one entity boundary.

    The deny-list grows during a run: an excluded parent is added so that
    its dependents are excluded as well. Nothing is ever removed.
    """

    allow: frozenset[SourceId] = frozenset()
    deny: set[SourceId] = field(default_factory=set)

    def included(self, source_id: SourceId) -> bool:
        return included(source_id, self.allow, self.deny)

    def exclude(self, source_id: SourceId) -> None:
        self.deny.add(source_id)


@dataclass(slots=True)
class FilterSet:
    """One ``EntityFilter`` per boundary, scoped to a single run."""

    clients: EntityFilter = field(default_factory=EntityFilter)
    projects: EntityFilter = field(default_factory=EntityFilter)
    todo_lists: EntityFilter = field(default_factory=EntityFilter)
    todos: EntityFilter = field(default_factory=EntityFilter)
    posts: EntityFilter = field(default_factory=EntityFilter)

    def for_boundary(self, boundary: FilterBoundary) -> EntityFilter:
        """Return the filter for ``boundary``."""
        return getattr(self, boundary)

    @classmethod
    def from_lists(
        cls,
        include_only: dict[FilterBoundary, Iterable[SourceId]],
        exclude: dict[FilterBoundary, Iterable[SourceId]],
    ) -> "FilterSet":
        """Build a filter set from per-boundary id lists.

        The deny sets are copied so propagation during a run never leaks
        back into the configuration.
        """
        boundaries: tuple[FilterBoundary, ...] = ("clients", "projects", "todo_lists", "todos", "posts")
        filters = {
            boundary: EntityFilter(
                allow=frozenset(str(i) for i in include_only.get(boundary, ())),
                deny={str(i) for i in exclude.get(boundary, ())},
            )
            for boundary in boundaries
        }
        return cls(**filters)
