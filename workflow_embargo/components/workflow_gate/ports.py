"""Workflow gate port definitions - protocols for dependencies."""

from typing import Protocol

from workflow_embargo.core.entities import ContentItem, WorkflowDefinition


class GovernedRecordPort(Protocol):
    """A content record that may be subject to an approval workflow."""

    @property
    def item(self) -> ContentItem:
        ...

    @property
    def workflow_applicable(self) -> bool:
        """Whether workflows can be applied to this kind of record at all."""
        ...


class WorkflowServicePort(Protocol):
    def get_definitions_for(self, item: ContentItem) -> list[WorkflowDefinition]:
        """Definitions governing the item, nearest first. Empty if none."""
        ...
