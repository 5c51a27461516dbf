"""Serialize typed operations into a Ruby script for ``rails runner``.

The emitted script targets Redmine's ActiveRecord models. Layout:

1. header comments and declarations of the id table hashes
2. shared lookups (tracker, statuses, author), failing fast when missing
3. every record block, inside ``begin ... rescue`` when the guard is enabled
4. the undo summary, and in ``rescue`` the optional rollback
"""

import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import Any, TextIO

from basecamp2redmine.models.mapping import IdTables
from basecamp2redmine.models.operations import (
    Announce,
    Append,
    Assign,
    Call,
    Constant,
    Create,
    Destroy,
    EnsureBoard,
    Handle,
    Lookup,
    New,
    Operation,
    Report,
    Save,
    ScriptItem,
    Skip,
    Track,
)
from basecamp2redmine.utils.text import ruby_comment, ruby_single_quoted, ruby_string
from config import Settings

logger = logging.getLogger(__name__)

INDENT = "  "


def render_value(value: Any) -> str:
    """Render a Python value as a Ruby expression."""
    match value:
        case None:
            return "nil"
        case bool():
            return "true" if value else "false"
        case int():
            return str(value)
        case str():
            return ruby_string(value)
        case list() | tuple():
            return "[" + ", ".join(render_value(item) for item in value) + "]"
        case Handle():
            return render_handle(value)
        case Constant(name=name):
            return name
        case New(model=model, attributes=attributes):
            return f"{model}.new({render_attributes(attributes)})"
    msg = f"Cannot render {type(value).__name__} as Ruby"
    raise TypeError(msg)


def render_handle(handle: Handle) -> str:
    expression = f"{handle.table}[{ruby_single_quoted(handle.source_id)}]"
    return ".".join((expression, *handle.path))


def render_attributes(attributes: dict[str, Any]) -> str:
    return ", ".join(f"{key}: {render_value(value)}" for key, value in attributes.items())


def render_operation(operation: Operation) -> list[str]:
    """Render one operation as one or more lines without indentation."""
    match operation:
        case Announce(message=message):
            return [f"print {ruby_string(message)}"]
        case Skip(message=message):
            return [ruby_comment(message)]
        case Lookup(target=target, model=model, conditions=conditions):
            return [f"{render_handle(target)} = {model}.where({render_attributes(conditions)}).first"]
        case Create(target=target, model=model, attributes=attributes):
            return [f"{render_handle(target)} = {model}.new({render_attributes(attributes)})"]
        case Assign(target=target, field=field, value=value):
            return [f"{render_handle(target)}.{field} = {render_value(value)}"]
        case Append(target=target, association=association, value=value):
            return [f"{render_handle(target)}.{association} << {render_value(value)}"]
        case Call(target=target, method=method, args=args):
            rendered_args = ", ".join(render_value(arg) for arg in args)
            return [f"{render_handle(target)}.{method}({rendered_args})"]
        case Save(target=target):
            return [f"{render_handle(target)}.save!"]
        case Track(target=target):
            return [f"created_projects << {render_handle(target)}"]
        case Report(target=target, label=label):
            return [f"puts {ruby_string(label)} + {render_handle(target)}.id.to_s"]
        case EnsureBoard(target=target, board=board):
            handle = render_handle(target)
            return [
                f"if {handle}.boards.empty?",
                f"{INDENT}puts {ruby_string(' (re-creating boards) ')}",
                f"{INDENT}{handle}.boards << {render_value(board)}",
                f"{INDENT}{handle}.save!",
                "end",
            ]
        case Destroy(model=model, identifier=identifier):
            return [f"{model}.find_by(identifier: {ruby_string(identifier)})&.destroy"]
    msg = f"Unknown operation {type(operation).__name__}"
    raise TypeError(msg)


def _indented(lines: Iterable[str], depth: int) -> list[str]:
    prefix = INDENT * depth
    return [prefix + line if line else line for line in lines]


def render_item(item: ScriptItem) -> list[str]:
    """Render a record block or a skip trace."""
    if isinstance(item, Skip):
        return render_operation(item)

    lines = render_operation(item.announce)
    lines += render_operation(item.lookup)
    lines.append(f"if {render_handle(item.target)}.nil?")
    for operation in item.create:
        lines += _indented(render_operation(operation), 1)
    if item.existing:
        lines.append("else")
        for operation in item.existing:
            lines += _indented(render_operation(operation), 1)
    lines.append("end")
    return lines


class ScriptEmitter:
    """Writes the import script for one backup file."""

    def __init__(self, settings: Settings, source_name: str) -> None:
        self.settings = settings
        self.source_name = source_name

    def prologue(self) -> list[str]:
        """Header, id table declarations and shared lookups."""
        tracker = ruby_string(self.settings.tracker)
        generated = datetime.now().isoformat(timespec="seconds")
        lines = [
            ruby_comment(f"Redmine import script generated from {self.source_name} on {generated}."),
            "# Run it from the Redmine root directory:",
            "#   bundle exec rails runner -e production basecamp-import.rb",
            "",
        ]
        lines += [f"{table} = {{}}" for table in IdTables.TABLES]
        lines += [
            "created_projects = []",
            "",
            f"BASECAMP_TRACKER = Tracker.find_by(name: {tracker})",
            f"raise {ruby_string('Tracker named ' + repr(self.settings.tracker) + ' must exist')} unless BASECAMP_TRACKER",
            "DEFAULT_STATUS = BASECAMP_TRACKER.default_status || IssueStatus.where(is_closed: false).order(:position).first",
            "CLOSED_STATUS = IssueStatus.where(is_closed: true).order(:position).first",
            f"raise {ruby_string('A closed issue status must exist')} unless CLOSED_STATUS",
        ]
        if self.settings.author_login:
            login = self.settings.author_login
            lines += [
                f"AUTHOR = User.find_by(login: {ruby_string(login)})",
                f"raise {ruby_string('User ' + repr(login) + ' must exist')} unless AUTHOR",
            ]
        else:
            lines.append("AUTHOR = User.anonymous")
        lines.append("")
        return lines

    def undo_summary(self) -> list[str]:
        """Trailing message explaining how to reverse the import."""
        return [
            'puts "\\n\\n-----------\\nUndo Script\\n-----------"',
            "puts " + ruby_string(
                "To undo this import, run `basecamp2redmine undo "
                + self.source_name
                + "` and execute its output with rails runner, or paste the following into the Rails console. "
                + "Deleting a project also deletes its issues and boards.",
            ),
            "puts",
            "(projects.values + organizations.values).compact.each do |p|",
            f"{INDENT}puts \"Project.find_by(identifier: '#{{p.identifier}}')&.destroy\" unless p.new_record?",
            "end",
        ]

    def rescue_clause(self) -> list[str]:
        """Failure report, optional rollback and re-raise."""
        lines = [
            "rescue => e",
            f"{INDENT}file = e.backtrace.to_a.grep(/#{{Regexp.escape(File.basename(__FILE__))}}/).first",
            f'{INDENT}puts "\\n\\nException was raised at #{{file}} while importing " + {ruby_string(self.source_name)}',
        ]
        if self.settings.on_failure_delete:
            lines += [
                f'{INDENT}puts "\\nDeleting the #{{created_projects.size}} project(s) created by this run"',
                f"{INDENT}puts '[' + created_projects.map {{ |p| p.id.to_s }}.join(',') + '].each {{ |i| Project.destroy i }}'",
                f"{INDENT}created_projects.reverse_each {{ |p| p.destroy unless p.new_record? }}",
            ]
        lines += [f"{INDENT}raise e", "end"]
        return lines

    def iter_lines(self, items: Iterable[ScriptItem]) -> Iterator[str]:
        """Yield the complete script line by line."""
        yield from self.prologue()

        if not self.settings.guard_enabled:
            for item in items:
                yield from render_item(item)
            yield from self.undo_summary()
            return

        yield "begin"
        for item in items:
            yield from _indented(render_item(item), 1)
        yield from _indented(self.undo_summary(), 1)
        yield from self.rescue_clause()

    def write(self, items: Iterable[ScriptItem], stream: TextIO) -> int:
        """Stream the script to ``stream`` and return the number of lines written."""
        count = 0
        for line in self.iter_lines(items):
            stream.write(line + "\n")
            count += 1
        logger.debug("Wrote %d script lines for %s", count, self.source_name)
        return count
