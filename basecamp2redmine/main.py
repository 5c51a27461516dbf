"""Main entry point for the Basecamp to Redmine script generator.

Provides the ``import`` and ``undo`` commands. Both print a Ruby script to
stdout (or ``--output``); logging goes to stderr.
"""

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from pydantic import ValidationError
from pydantic_settings import SettingsError

from basecamp2redmine.display import configure_logging
from basecamp2redmine.models import MigrationError

if TYPE_CHECKING:
    from config import Settings

logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", type=Path, help="Basecamp backup XML file")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the script to this file instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "NOTICE", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default=None,
        help="Logging level (overrides configuration)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level parser with the ``import`` and ``undo`` commands."""
    parser = argparse.ArgumentParser(
        description="Generate Redmine import scripts from Basecamp backups",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    import_parser = subparsers.add_parser(
        "import",
        help="Generate the script that recreates the backup in Redmine",
    )
    _add_common_arguments(import_parser)
    import_parser.add_argument(
        "--no-guard",
        action="store_false",
        dest="guard_enabled",
        default=None,
        help="Do not wrap the script in begin/rescue",
    )
    import_parser.add_argument(
        "--on-failure-delete",
        action="store_true",
        default=None,
        help="Destroy the projects created by a failed script run",
    )
    import_parser.add_argument(
        "--strict-linkage",
        action="store_true",
        default=None,
        help="Fail instead of skipping records whose parent was excluded",
    )

    undo_parser = subparsers.add_parser(
        "undo",
        help="Generate the script that deletes the projects of an import",
    )
    _add_common_arguments(undo_parser)
    undo_parser.add_argument(
        "--include-organizations",
        action="store_true",
        dest="undo_organizations",
        default=None,
        help="Also delete the company projects",
    )
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Settings given on the command line; unset flags keep the configured value."""
    names = ("log_level", "guard_enabled", "on_failure_delete", "strict_linkage", "undo_organizations")
    return {name: getattr(args, name) for name in names if getattr(args, name, None) is not None}


def _write(writer: Callable[[TextIO], int], output: Path | None) -> int:
    if output is None:
        return writer(sys.stdout)
    with output.open("w", encoding="utf-8") as stream:
        return writer(stream)


def run_import(args: argparse.Namespace) -> int:
    """Generate the import script. Returns the process exit status."""
    from basecamp2redmine.backup_reader import read_backup  # noqa: PLC0415
    from basecamp2redmine.migration import ScriptMigration  # noqa: PLC0415
    from basecamp2redmine.script_emitter import ScriptEmitter  # noqa: PLC0415

    settings = _load(args)
    backup = read_backup(args.file)
    migration = ScriptMigration(settings, backup)
    result = migration.run()
    if not result.success:
        logger.error("Generation failed, no script written: %s", result.overall.get("error", "unknown error"))
        return 1

    emitter = ScriptEmitter(settings, backup.source_name)
    count = _write(lambda stream: emitter.write(migration.items, stream), args.output)
    logger.success(
        "Wrote %d lines for %d projects and %d organizations",
        count,
        len(result.project_ids),
        len(result.organization_ids),
    )
    return 0


def run_undo(args: argparse.Namespace) -> int:
    """Generate the undo script. Returns the process exit status."""
    from basecamp2redmine.cleanup_redmine import UndoGenerator  # noqa: PLC0415

    settings = _load(args)
    generator = UndoGenerator(settings)
    lines = generator.lines(args.file)
    count = _write(lambda stream: _write_lines(lines, stream), args.output)
    logger.success("Wrote undo script with %d lines", count)
    return 0


def _write_lines(lines: list[str], stream: TextIO) -> int:
    for line in lines:
        stream.write(line + "\n")
    return len(lines)


def _load(args: argparse.Namespace) -> "Settings":
    from config import load_settings  # noqa: PLC0415

    settings = load_settings(args.config, _overrides(args))
    configure_logging(settings.log_level, settings.log_file)
    return settings


COMMANDS = {"import": run_import, "undo": run_undo}


def run(argv: list[str] | None = None) -> int:
    """Parse ``argv`` and run the command. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    configure_logging(args.log_level or "INFO")
    try:
        return COMMANDS[args.command](args)
    except MigrationError as e:
        logger.error("%s", e.message)
    except (ValidationError, SettingsError) as e:
        logger.error("Invalid configuration: %s", e)
    except (FileNotFoundError, PermissionError) as e:
        logger.error("File system error: %s", e)
    return 1


def main() -> None:
    """Parse arguments and execute the appropriate command."""
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)


def import_main() -> None:
    """Entry point of ``basecamp2redmine-import``."""
    sys.exit(run(["import", *sys.argv[1:]]))


def undo_main() -> None:
    """Entry point of ``basecamp2redmine-undo``."""
    sys.exit(run(["undo", *sys.argv[1:]]))


if __name__ == "__main__":
    main()
