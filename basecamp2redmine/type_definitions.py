"""Type definitions for Basecamp to Redmine script generation.

This module contains the source record classes parsed from a Basecamp
backup and the type aliases used throughout the generator.
"""

from dataclasses import dataclass
from typing import Literal

type SourceId = str
type OrganizationKind = Literal["firm", "client"]

type EntityType = Literal[
    "organizations",
    "projects",
    "todo_lists",
    "todos",
    "messages",
    "comments",
]

type FilterBoundary = Literal[
    "clients",
    "projects",
    "todo_lists",
    "todos",
    "posts",
]

type ComponentName = Literal[
    "companies",
    "projects",
    "todo_lists",
    "todos",
    "messages",
]


@dataclass(frozen=True, slots=True)
class Organization:
    """A Basecamp firm or client company."""

    id: SourceId
    name: str
    kind: OrganizationKind = "client"


@dataclass(frozen=True, slots=True)
class Project:
    """A Basecamp project, optionally owned by a company."""

    id: SourceId
    name: str
    organization_id: SourceId | None = None


@dataclass(frozen=True, slots=True)
class TodoList:
    """A Basecamp todo-list."""

    id: SourceId
    name: str
    project_id: SourceId
    description: str = ""
    complete: bool = False


@dataclass(frozen=True, slots=True)
class TodoItem:
    """A single todo inside a todo-list."""

    id: SourceId
    content: str
    todo_list_id: SourceId
    complete: bool = False
    created_at: str | None = None


@dataclass(frozen=True, slots=True)
class Comment:
    """A comment attached to a post."""

    id: SourceId
    body: str
    commentable_id: SourceId
    commentable_type: str = "Post"
    author_name: str = ""
    created_at: str | None = None


@dataclass(frozen=True, slots=True)
class Post:
    """A message board post with its comments."""

    id: SourceId
    title: str
    project_id: SourceId
    body: str = ""
    author_name: str = ""
    posted_on: str | None = None
    comments: tuple[Comment, ...] = ()


@dataclass(frozen=True, slots=True)
class BasecampBackup:
    """All records of one backup file, in document order."""

    source_name: str
    firms: tuple[Organization, ...] = ()
    clients: tuple[Organization, ...] = ()
    projects: tuple[Project, ...] = ()
    todo_lists: tuple[TodoList, ...] = ()
    todos: tuple[TodoItem, ...] = ()
    posts: tuple[Post, ...] = ()

    @property
    def organizations(self) -> tuple[Organization, ...]:
        """Firms first, then clients."""
        return self.firms + self.clients

