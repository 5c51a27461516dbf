"""Reader for Basecamp classic "backup" XML exports.

Parses the whole file with lxml and returns immutable records in document
order. Missing required fields and malformed ids raise ``RecordShapeError``
so that a broken export stops the run before any script is written.
"""

import logging
from pathlib import Path
from typing import cast

from lxml import etree

from basecamp2redmine.models.migration_error import BackupParseError, RecordShapeError
from basecamp2redmine.type_definitions import (
    BasecampBackup,
    Comment,
    Organization,
    OrganizationKind,
    Post,
    Project,
    SourceId,
    TodoItem,
    TodoList,
)
from basecamp2redmine.utils.validators import validate_source_id

logger = logging.getLogger(__name__)

_PARSER_OPTIONS = {"resolve_entities": False, "no_network": True, "huge_tree": True}


def parse_backup_tree(path: Path) -> etree._Element:
    """Parse ``path`` and return the document root.

    Raises:
        BackupParseError: If the file cannot be read or is not well-formed

    """
    parser = etree.XMLParser(**_PARSER_OPTIONS)
    try:
        tree = etree.parse(str(path), parser)
    except OSError as e:
        msg = f"Cannot read backup file {path}: {e}"
        raise BackupParseError(msg) from e
    except etree.XMLSyntaxError as e:
        msg = f"Backup file {path} is not well-formed XML: {e}"
        raise BackupParseError(msg) from e
    return tree.getroot()


def _text(element: etree._Element, tag: str, *, required: bool = True) -> str | None:
    """Return the text content of the direct child ``tag``.

    Nested markup is flattened, like a DOM ``textContent``.
    """
    child = element.find(tag)
    if child is None:
        if required:
            msg = f"<{element.tag}> record is missing required field <{tag}>"
            raise RecordShapeError(msg, element=str(element.tag), field=tag)
        return None
    return "".join(child.itertext())


def _required(element: etree._Element, tag: str) -> str:
    return cast(str, _text(element, tag))


def _optional(element: etree._Element, tag: str) -> str:
    return _text(element, tag, required=False) or ""


def _id(element: etree._Element, tag: str = "id") -> SourceId:
    """Return a validated id read from child ``tag``."""
    value = _required(element, tag).strip()
    try:
        validate_source_id(value)
    except ValueError as e:
        msg = f"<{element.tag}> record has a malformed <{tag}>: {e}"
        raise RecordShapeError(msg, element=str(element.tag), field=tag) from e
    return value


def _flag(element: etree._Element, tag: str) -> bool:
    return _optional(element, tag).strip() == "true"


def _timestamp(element: etree._Element, tag: str) -> str | None:
    value = _optional(element, tag).strip()
    return value or None


def _organization(element: etree._Element, kind: OrganizationKind) -> Organization:
    return Organization(id=_id(element), name=_required(element, "name"), kind=kind)


def _project(element: etree._Element) -> Project:
    company = element.find("company")
    organization_id = _id(company) if company is not None else None
    return Project(id=_id(element), name=_required(element, "name"), organization_id=organization_id)


def _todo_list(element: etree._Element) -> TodoList:
    return TodoList(
        id=_id(element),
        name=_required(element, "name"),
        project_id=_id(element, "project-id"),
        description=_optional(element, "description"),
        complete=_flag(element, "complete"),
    )


def _todo_item(element: etree._Element) -> TodoItem:
    return TodoItem(
        id=_id(element),
        content=_required(element, "content"),
        todo_list_id=_id(element, "todo-list-id"),
        complete=_flag(element, "completed"),
        created_at=_timestamp(element, "created-at"),
    )


def _comment(element: etree._Element) -> Comment:
    return Comment(
        id=_id(element),
        body=_optional(element, "body"),
        commentable_id=_id(element, "commentable-id"),
        commentable_type=_required(element, "commentable-type").strip(),
        author_name=_optional(element, "author-name"),
        created_at=_timestamp(element, "created-at"),
    )


def _post(element: etree._Element) -> Post:
    comments = tuple(_comment(c) for c in element.xpath('.//comment[commentable-type = "Post"]'))
    return Post(
        id=_id(element),
        title=_required(element, "title"),
        project_id=_id(element, "project-id"),
        body=_optional(element, "body"),
        author_name=_optional(element, "author-name"),
        posted_on=_timestamp(element, "posted-on"),
        comments=comments,
    )


def read_backup(path: Path) -> BasecampBackup:
    """Read every record the generator maps from a backup file.

    Args:
        path: Path to the Basecamp backup XML

    Returns:
        The parsed backup

    Raises:
        BackupParseError: If the file cannot be parsed
        RecordShapeError: If a record misses a required field

    """
    root = parse_backup_tree(path)

    backup = BasecampBackup(
        source_name=path.name,
        firms=tuple(_organization(e, "firm") for e in root.xpath("//firm")),
        clients=tuple(_organization(e, "client") for e in root.xpath("//clients/client")),
        projects=tuple(_project(e) for e in root.xpath("//project")),
        todo_lists=tuple(_todo_list(e) for e in root.xpath("//todo-list")),
        todos=tuple(_todo_item(e) for e in root.xpath("//todo-item")),
        posts=tuple(_post(e) for e in root.xpath("//post")),
    )

    logger.info(
        "Read %s: %d firms, %d clients, %d projects, %d todo-lists, %d todos, %d posts",
        backup.source_name,
        len(backup.firms),
        len(backup.clients),
        len(backup.projects),
        len(backup.todo_lists),
        len(backup.todos),
        len(backup.posts),
    )
    return backup


def project_ids(root: etree._Element) -> list[SourceId]:
    """Reduced pass returning only the ids of ``//project`` elements."""
    return [_id(e) for e in root.xpath("//project")]


def organization_ids(root: etree._Element) -> list[SourceId]:
    """Reduced pass returning the ids of the firm and its clients."""
    return [_id(e) for e in root.xpath("//firm | //clients/client")]
