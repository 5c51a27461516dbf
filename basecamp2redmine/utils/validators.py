#!/usr/bin/env python3
"""Shared validation utilities for values interpolated into generated code.

Source ids end up as hash keys and identifier slugs in the Ruby script, so
they are checked once when the backup is read instead of being escaped at
every use.
"""

import re

_SOURCE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_MAX_SOURCE_ID_LENGTH = 64


def validate_source_id(source_id: str) -> None:
    """
    Validate a Basecamp record id before it is used in the script.

    Security Rules:
    - Non-empty, at most 64 characters
    - Letters, digits, underscores and hyphens only
    - No whitespace or control characters

    Valid Examples:
    - "2231994"
    - "abc-123"

    Invalid Examples:
    - "12 34" (whitespace)
    - "1'] ; Project.destroy_all #" (script injection)

    Args:
        source_id: The id to validate

    Raises:
        ValueError: If the id is empty, too long or contains other characters

    """
    if not source_id:
        raise ValueError("Source id cannot be empty.")

    if len(source_id) > _MAX_SOURCE_ID_LENGTH:
        raise ValueError(
            f"Source id too long ({len(source_id)} chars). Maximum allowed: {_MAX_SOURCE_ID_LENGTH} characters.",
        )

    if not _SOURCE_ID_PATTERN.fullmatch(source_id):
        raise ValueError(f"Invalid source id: {source_id!r}. Must contain only letters, digits, '_' and '-'.")


def validate_identifier_prefix(prefix: str) -> None:
    """Validate the Redmine identifier prefix.

    Redmine identifiers are lower case letters, digits, dashes and
    underscores and must start with a letter.

    Raises:
        ValueError: If the prefix cannot start a Redmine identifier

    """
    if not re.fullmatch(r"[a-z][a-z0-9_-]*", prefix):
        raise ValueError(
            f"Invalid identifier prefix: {prefix!r}. Must start with a-z and contain only a-z, 0-9, '_' and '-'.",
        )
