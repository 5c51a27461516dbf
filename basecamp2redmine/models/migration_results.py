"""
Migration result models for tracking a whole generation run.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from basecamp2redmine.models.component_results import ComponentResult


class MigrationResult(BaseModel):
    """Represents the overall result of a generation run.

    ``project_ids`` accumulates every project and organization handle the run
    registered, in creation order. It is what a rollback has to undo.
    """

    components: dict[str, ComponentResult] = Field(default_factory=dict)
    overall: dict[str, Any] = Field(default_factory=dict)
    project_ids: list[str] = Field(default_factory=list)
    organization_ids: list[str] = Field(default_factory=list)

    def __init__(self, **data: Any) -> None:
        super().__init__(**data)

        self.overall.setdefault("status", "success")
        self.overall.setdefault("start_time", datetime.now().isoformat())

    @property
    def success(self) -> bool:
        """Whether every component finished without errors."""
        return self.overall.get("status") == "success" and all(
            component.success for component in self.components.values()
        )

    def __getitem__(self, key: str) -> Any:
        """Support dictionary-style item access for top-level attributes."""
        if key == "components":
            return self.components
        if key == "overall":
            return self.overall
        if key not in self.overall:
            raise KeyError(key)
        return self.overall[key]

    def __contains__(self, key: str) -> bool:
        """Support 'in' operator for top-level attributes."""
        return key in ["components", "overall"] or key in self.overall
