"""Component result models for tracking generation steps."""

from typing import Any

from pydantic import BaseModel, Field


class ComponentResult(BaseModel):
    """Represents the result of a migration component."""

    success: bool = False
    message: str = ""
    details: dict[str, Any] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
    total_count: int = 0
    success_count: int = 0
    skipped_count: int = 0
    skipped_ids: list[str] = Field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error message to the errors list."""
        self.errors.append(error)

    def __setitem__(self, key: str, value: Any) -> None:
        """Support dictionary-style item assignment."""
        self.details[key] = value

    def __getitem__(self, key: str) -> Any:
        """Support dictionary-style item access."""
        return self.details[key]

    def __contains__(self, key: str) -> bool:
        """Support 'in' operator."""
        return key in self.details
