"""Main settings schema for Basecamp to Redmine script generation.

This module defines the Pydantic settings model with validation and
environment variable handling.
"""

from typing import Annotated, Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from basecamp2redmine.type_definitions import FilterBoundary
from basecamp2redmine.utils.validators import validate_identifier_prefix

# Environment values stay raw strings so coerce_ids can split on commas
IdList = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    """Generator settings with validation and environment variable support."""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",
        env_prefix="BC2R_",
    )

    # ========================================================================
    # FIELD LENGTHS (from Redmine's validates_length_of)
    # ========================================================================

    project_name_length: int = Field(default=30, ge=1, description="Redmine project name length")
    board_description_length: int = Field(default=255, ge=1, description="Redmine board description length")
    message_subject_length: int = Field(default=255, ge=1, description="Redmine message subject length")
    issue_subject_length: int = Field(default=255, ge=1, description="Redmine issue subject length")
    ellipsis: str = Field(default="...", description="Marker inserted by center truncation")

    # ========================================================================
    # REDMINE TARGET
    # ========================================================================

    tracker: str = Field(default="Basecamp Todo", min_length=1, description="Tracker that must exist in Redmine")
    name_append: str = Field(default=" (BC)", description="Suffix of board names")
    identifier_prefix: str = Field(default="basecamp", description="Prefix of project identifier slugs")
    parent_project_id: int | None = Field(
        default=None, ge=1, description="Redmine project id to nest top-level projects under",
    )
    enabled_modules: list[str] = Field(
        default_factory=lambda: ["issue_tracking", "boards"], description="Modules enabled on new projects",
    )
    author_login: str | None = Field(
        default=None, description="Login of the acting author (anonymous user when empty)",
    )
    message_reply_prefix: str = Field(default="Re: ", description="Subject prefix of replies")

    # ========================================================================
    # ORGANIZATIONS
    # ========================================================================

    company_name_as_parent_project: bool = Field(
        default=True, description="Create firm and clients as parent projects",
    )
    company_project_prefix: str = Field(default="Basecamp: ", description="Board description prefix for companies")
    company_project_prefix_short: str = Field(default="BC: ", description="Project name prefix for companies")

    # ========================================================================
    # FAILURE HANDLING
    # ========================================================================

    guard_enabled: bool = Field(default=True, description="Wrap record operations in begin/rescue")
    on_failure_delete: bool = Field(default=False, description="Destroy projects created by a failed run")
    strict_linkage: bool = Field(
        default=False, description="Fail instead of skipping records whose parent was excluded",
    )
    undo_organizations: bool = Field(default=False, description="Also delete company projects in undo mode")

    # ========================================================================
    # FILTERS
    # ========================================================================

    include_only_client_ids: IdList = Field(default_factory=list)
    include_only_project_ids: IdList = Field(default_factory=list)
    include_only_todo_list_ids: IdList = Field(default_factory=list)
    include_only_todo_ids: IdList = Field(default_factory=list)
    include_only_post_ids: IdList = Field(default_factory=list)
    exclude_client_ids: IdList = Field(default_factory=list)
    exclude_project_ids: IdList = Field(default_factory=list)
    exclude_todo_list_ids: IdList = Field(default_factory=list)
    exclude_todo_ids: IdList = Field(default_factory=list)
    exclude_post_ids: IdList = Field(default_factory=list)

    # ========================================================================
    # LOGGING
    # ========================================================================

    log_level: Literal["DEBUG", "INFO", "NOTICE", "WARNING", "ERROR", "CRITICAL", "SUCCESS"] = Field(
        default="INFO", description="Logging level",
    )
    log_file: str | None = Field(default=None, description="Optional log file path")

    @field_validator(
        "include_only_client_ids",
        "include_only_project_ids",
        "include_only_todo_list_ids",
        "include_only_todo_ids",
        "include_only_post_ids",
        "exclude_client_ids",
        "exclude_project_ids",
        "exclude_todo_list_ids",
        "exclude_todo_ids",
        "exclude_post_ids",
        mode="before",
    )
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        """Accept ids written as YAML integers or a comma-separated string."""
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        if isinstance(v, list | tuple | set):
            return [str(item) for item in v]
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("identifier_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        validate_identifier_prefix(v)
        return v

    @model_validator(mode="after")
    def validate_length_budgets(self) -> "Settings":
        """Every truncated field must still have room for the ellipsis."""
        budgets = {
            "project_name_length": self.project_name_length - len(self.name_append),
            "board_description_length": self.board_description_length,
            "message_subject_length": self.message_subject_length - len(self.message_reply_prefix),
            "issue_subject_length": self.issue_subject_length,
        }
        for name, budget in budgets.items():
            if budget < len(self.ellipsis):
                msg = f"{name} leaves {budget} characters, fewer than the ellipsis {self.ellipsis!r} needs"
                raise ValueError(msg)
        return self

    def get_include_only(self) -> dict[FilterBoundary, list[str]]:
        """Allow-lists keyed by filter boundary."""
        return {
            "clients": self.include_only_client_ids,
            "projects": self.include_only_project_ids,
            "todo_lists": self.include_only_todo_list_ids,
            "todos": self.include_only_todo_ids,
            "posts": self.include_only_post_ids,
        }

    def get_exclude(self) -> dict[FilterBoundary, list[str]]:
        """Deny-lists keyed by filter boundary."""
        return {
            "clients": self.exclude_client_ids,
            "projects": self.exclude_project_ids,
            "todo_lists": self.exclude_todo_list_ids,
            "todos": self.exclude_todo_ids,
            "posts": self.exclude_post_ids,
        }

    def project_identifier(self, source_id: str) -> str:
        """Identifier slug of the Redmine project created for a Basecamp project."""
        return f"{self.identifier_prefix}-p-{source_id}"

    def organization_identifier(self, source_id: str) -> str:
        """Identifier slug of the Redmine project created for a Basecamp company."""
        return f"{self.identifier_prefix}-c-{source_id}"
