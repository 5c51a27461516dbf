"""Typed operations making up a generated Redmine script.

Migration components never build Ruby source text themselves. They describe
what the script has to do with the records below, and
``basecamp2redmine.script_emitter`` turns them into code. Text values are
plain, already sanitized and truncated; quoting is the emitter's job.
"""

from dataclasses import dataclass, field
from typing import Any

from basecamp2redmine.type_definitions import EntityType, SourceId


@dataclass(frozen=True, slots=True)
class Handle:
    """An entry of an id table in the running script, e.g. ``projects['10']``.

    ``path`` chains attribute reads, so ``Handle("projects", "10").attr("boards", "first")``
    stands for ``projects['10'].boards.first``.
    """

    table: EntityType
    source_id: SourceId
    path: tuple[str, ...] = ()

    def attr(self, *names: str) -> "Handle":
        return Handle(self.table, self.source_id, self.path + names)

    @property
    def id(self) -> "Handle":
        return self.attr("id")


@dataclass(frozen=True, slots=True)
class Constant:
    """A name resolved once in the script prologue, e.g. ``CLOSED_STATUS``."""

    name: str


TRACKER = Constant("BASECAMP_TRACKER")
DEFAULT_STATUS = Constant("DEFAULT_STATUS")
CLOSED_STATUS = Constant("CLOSED_STATUS")
AUTHOR = Constant("AUTHOR")


def status_for(complete: bool) -> Constant:
    """Closed status for completed records, the tracker default otherwise."""
    return CLOSED_STATUS if complete else DEFAULT_STATUS


@dataclass(frozen=True, slots=True)
class New:
    """An unsaved model instance, e.g. ``Board.new(name: ...)``."""

    model: str
    attributes: dict[str, Any] = field(default_factory=dict)


# str, int, bool, None, list[str], Handle, Constant or New
type Value = Any


@dataclass(frozen=True, slots=True)
class Announce:
    """Progress line printed before a record is processed."""

    message: str


@dataclass(frozen=True, slots=True)
class Skip:
    """Comment-only trace for a record that produces no operations."""

    message: str


@dataclass(frozen=True, slots=True)
class Lookup:
    """Find an existing entity by its natural key and store it in ``target``."""

    target: Handle
    model: str
    conditions: dict[str, Value]


@dataclass(frozen=True, slots=True)
class Create:
    """Instantiate a new entity into ``target``."""

    target: Handle
    model: str
    attributes: dict[str, Value]


@dataclass(frozen=True, slots=True)
class Assign:
    target: Handle
    field: str
    value: Value


@dataclass(frozen=True, slots=True)
class Append:
    """Push ``value`` onto an association, e.g. ``trackers << TRACKER``."""

    target: Handle
    association: str
    value: Value


@dataclass(frozen=True, slots=True)
class Call:
    target: Handle
    method: str
    args: tuple[Value, ...] = ()


@dataclass(frozen=True, slots=True)
class Save:
    target: Handle


@dataclass(frozen=True, slots=True)
class Track:
    """Remember a newly created project for rollback."""

    target: Handle


@dataclass(frozen=True, slots=True)
class Report:
    """Print ``label`` followed by the database id of ``target``."""

    target: Handle
    label: str


@dataclass(frozen=True, slots=True)
class EnsureBoard:
    """Give an existing project its board back if it has none."""

    target: Handle
    board: New


@dataclass(frozen=True, slots=True)
class Destroy:
    """Delete an entity addressed by its unique identifier."""

    model: str
    identifier: str


type Operation = Announce | Skip | Lookup | Create | Assign | Append | Call | Save | Track | Report | EnsureBoard | Destroy


@dataclass(slots=True)
class RecordBlock:
    """Find-or-create block for one source record.

    ``create`` runs only when ``lookup`` found nothing, ``existing`` only when
    it found a match.
    """

    announce: Announce
    lookup: Lookup
    create: list[Operation] = field(default_factory=list)
    existing: list[Operation] = field(default_factory=list)

    @property
    def target(self) -> Handle:
        return self.lookup.target


type ScriptItem = RecordBlock | Skip
