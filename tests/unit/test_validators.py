"""Tests for the validation helpers."""

import pytest

from basecamp2redmine.utils.validators import validate_identifier_prefix, validate_source_id


@pytest.mark.unit
@pytest.mark.parametrize("source_id", ["10", "2231994", "abc-123", "a_b"])
def test_valid_source_ids(source_id: str) -> None:
    validate_source_id(source_id)


@pytest.mark.unit
@pytest.mark.parametrize(
    "source_id",
    ["", "12 34", "1'] ; Project.destroy_all #", "x" * 65, "10\n"],
)
def test_invalid_source_ids(source_id: str) -> None:
    with pytest.raises(ValueError):
        validate_source_id(source_id)


@pytest.mark.unit
def test_identifier_prefix() -> None:
    validate_identifier_prefix("basecamp")
    validate_identifier_prefix("bc-2012")
    for prefix in ("", "Basecamp", "1bc", "bc prefix"):
        with pytest.raises(ValueError, match="identifier prefix"):
            validate_identifier_prefix(prefix)
