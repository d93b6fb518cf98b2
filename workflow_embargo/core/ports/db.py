"""
Database adapter interfaces.

Protocol-based interfaces for repository operations.
Implementations: in-memory (tests), SQLite.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from workflow_embargo.core.entities import ContentItem, WorkflowDefinition


class RecordValidationError(ValueError):
    """
    A content record failed validation or could not be stored.

    Raised from write paths and propagated unmodified to the workflow step,
    which must treat the step as failed.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class ContentRepoPort(Protocol):
    """Repository for content items."""

    def get_by_id(self, item_id: UUID) -> ContentItem | None:
        """Get item by ID, or None if it does not exist."""
        ...

    def save(self, item: ContentItem) -> ContentItem:
        """
        Insert or update an item.

        Raises:
            RecordValidationError: if the store rejects the row
        """
        ...

    def delete(self, item_id: UUID) -> None:
        """Delete item (no-op if missing)."""
        ...


class WorkflowDefinitionRepoPort(Protocol):
    """Repository for workflow definitions."""

    def get_by_id(self, definition_id: UUID) -> WorkflowDefinition | None:
        ...

    def save(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        ...

    def list_all(self) -> list[WorkflowDefinition]:
        ...
