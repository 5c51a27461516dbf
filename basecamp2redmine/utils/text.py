"""Text helpers for fields written into the generated Ruby script.

Two separate concerns live here. ``sanitize`` and ``clean_html`` turn
Basecamp's user-entered text into plain text that fits a Redmine text column.
``ruby_string`` and ``ruby_comment`` make that plain text safe to embed in
the script. Lengths are measured on the plain text, never on the escaped
literal, so truncation must happen between the two steps.
"""

import math
import re

from basecamp2redmine.models.migration_error import InvalidArgumentError

DEFAULT_ELLIPSIS = "..."

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_DIV_OPEN = re.compile(r"<div[^>]*>")
_DIV_CLOSE = re.compile(r"</div>")
_LINE_BREAK = re.compile(r"<br ?/?>")

# Order matters: backslash first so the escapes added below are not doubled.
_RUBY_ESCAPES = (
    ("\\", "\\\\"),
    ("{", "\\{"),
    ("}", "\\}"),
    ("#", "\\#"),
)


def sanitize(text: str | None) -> str:
    """Normalize raw text to single-newline plain text without control characters.

    Args:
        text: Raw field content, ``None`` is treated as empty

    Returns:
        Stripped text with ``\\n`` line endings

    """
    if not text:
        return ""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return _CONTROL_CHARS.sub("", normalized).strip()


def clean_html(text: str | None) -> str:
    """Convert Basecamp's HTML fragments to plain text.

    Entities are unescaped first (``&amp;`` last so ``&amp;lt;`` stays
    literal), then ``<div>`` is dropped while ``</div>`` and ``<br>``
    become newlines.
    """
    if not text:
        return ""
    unescaped = text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")
    unescaped = _DIV_OPEN.sub("", unescaped)
    unescaped = _DIV_CLOSE.sub("\n", unescaped)
    unescaped = _LINE_BREAK.sub("\n", unescaped)
    return unescaped.strip()


def left(text: str, chars: int) -> str:
    """Return the first ``chars`` codepoints of ``text``."""
    if chars <= 0:
        return ""
    return text[:chars]


def right(text: str, chars: int) -> str:
    """Return the last ``chars`` codepoints of ``text``."""
    if chars <= 0:
        return ""
    return text[-chars:]


def truncate(text: str, max_length: int, ellipsis: str = DEFAULT_ELLIPSIS) -> str:
    """Shorten ``text`` to ``max_length`` codepoints with an ellipsis in the middle.

    Names such as "Project 1, Issue XYZ" differ at both ends, so the prefix
    and the suffix are kept and the middle is dropped. The prefix gets the
    larger half when the remaining budget is odd.

    Args:
        text: Plain text to shorten
        max_length: Maximum length of the result in codepoints
        ellipsis: Marker inserted where text was removed

    Returns:
        ``text`` unchanged if it already fits, otherwise a string of exactly
        ``max_length`` codepoints

    Raises:
        InvalidArgumentError: If ``max_length`` cannot hold the ellipsis

    """
    if max_length < len(ellipsis):
        msg = f"max_length {max_length} is shorter than the ellipsis {ellipsis!r}"
        raise InvalidArgumentError(msg)

    if len(text) <= max_length:
        return text

    budget = max_length - len(ellipsis)
    head = math.ceil(budget / 2)
    tail = budget // 2
    return left(text, head) + ellipsis + right(text, tail)


def ruby_string(text: str) -> str:
    """Render ``text`` as a Ruby ``%{...}`` literal.

    ``%{}`` behaves like a double-quoted string, so backslashes, both braces
    and ``#`` (interpolation) are escaped. Everything else, newlines and
    quotes included, is kept verbatim.
    """
    escaped = text
    for raw, replacement in _RUBY_ESCAPES:
        escaped = escaped.replace(raw, replacement)
    return "%{" + escaped + "}"


def ruby_single_quoted(text: str) -> str:
    """Render ``text`` as a single-quoted Ruby literal, used for hash keys."""
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def ruby_comment(text: str) -> str:
    """Render ``text`` as one Ruby comment line."""
    return "# " + " ".join(text.split())
