"""Generate Redmine import scripts from Basecamp classic backups."""

# Registers the SUCCESS and NOTICE logging levels
from basecamp2redmine import display  # noqa: F401

__version__ = "0.1.0"
