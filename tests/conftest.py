"""Shared pytest fixtures and configuration for all tests."""

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from _pytest.config import Config

from config import Settings

SAMPLE_BACKUP = """<?xml version="1.0" encoding="UTF-8"?>
<account>
  <firm>
    <id type="integer">1</id>
    <name>Acme Studio</name>
  </firm>
  <clients type="array">
    <client>
      <id type="integer">5</id>
      <name>Globex &amp; Partners</name>
    </client>
  </clients>
  <projects type="array">
    <project>
      <id type="integer">10</id>
      <name>Website Redesign</name>
      <company>
        <id type="integer">5</id>
        <name>Globex &amp; Partners</name>
      </company>
      <todo-lists type="array">
        <todo-list>
          <id type="integer">20</id>
          <name>Launch</name>
          <description>Things to ship</description>
          <project-id type="integer">10</project-id>
          <complete type="boolean">false</complete>
          <todo-items type="array">
            <todo-item>
              <id type="integer">30</id>
              <content>Write copy</content>
              <todo-list-id type="integer">20</todo-list-id>
              <completed type="boolean">true</completed>
              <created-at type="datetime">2011-03-01T10:00:00Z</created-at>
            </todo-item>
          </todo-items>
        </todo-list>
      </todo-lists>
      <posts type="array">
        <post>
          <id type="integer">40</id>
          <title>Kickoff &lt;b&gt;notes&lt;/b&gt;</title>
          <body>&lt;div&gt;Agenda&lt;/div&gt;Budget&lt;br /&gt;Dates</body>
          <author-name>Ann Smith</author-name>
          <posted-on type="datetime">2011-03-02T09:00:00Z</posted-on>
          <project-id type="integer">10</project-id>
          <comments type="array">
            <comment>
              <id type="integer">50</id>
              <body>Sounds good</body>
              <author-name>Bob Jones</author-name>
              <commentable-id type="integer">40</commentable-id>
              <commentable-type>Post</commentable-type>
              <created-at type="datetime">2011-03-02T11:00:00Z</created-at>
            </comment>
          </comments>
        </post>
      </posts>
    </project>
    <project>
      <id type="integer">11</id>
      <name>Internal Tools</name>
    </project>
  </projects>
</account>
"""


def pytest_configure(config: Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line("markers", "functional: mark a test as a functional test")


def _env_flag(name: str, default: bool = False) -> bool:
    """Read boolean environment flag (true/false)."""
    val = os.environ.get(name, "true" if default else "false").strip().lower()
    return val in {"1", "true", "yes", "on"}


def pytest_collection_modifyitems(config: Config, items: list[pytest.Item]) -> None:
    """Skip unmarked tests unless BC2R_RUN_ALL_TESTS is set.

    Mark tests as unit or functional to have them run by default.
    """
    if _env_flag("BC2R_RUN_ALL_TESTS", False):
        return

    skip_unmarked = pytest.mark.skip(
        reason="Unmarked test skipped by default. Mark with unit/functional or set BC2R_RUN_ALL_TESTS=true.",
    )
    for item in items:
        if not any(m in item.keywords for m in ("unit", "functional")):
            item.add_marker(skip_unmarked)


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Flag test mode and keep BC2R_* variables of the calling shell out of the tests."""
    for name in list(os.environ):
        if name.upper().startswith("BC2R_") and name.upper() != "BC2R_RUN_ALL_TESTS":
            monkeypatch.delenv(name)
    monkeypatch.setenv("BC2R_TEST_MODE", "true")


@pytest.fixture
def settings() -> Settings:
    """Settings with every default."""
    return Settings()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Factory for settings with selected overrides."""

    def _make(**overrides: object) -> Settings:
        return Settings(**overrides)

    return _make


@pytest.fixture
def write_backup(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing backup XML into ``tmp_path``."""

    def _write(content: str = SAMPLE_BACKUP, name: str = "backup.xml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_backup(write_backup: Callable[..., Path]) -> Path:
    """Path to the sample backup with one firm, one client, two projects and one of each record."""
    return write_backup(SAMPLE_BACKUP)


@pytest.fixture
def chdir_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path]:
    """Run the test inside ``tmp_path`` so no stray .env file is picked up."""
    monkeypatch.chdir(tmp_path)
    yield tmp_path
