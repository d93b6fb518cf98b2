"""
Workflow service - resolves governing definitions and runs their actions.

Only the parts the embargo & expiry integration relies on live here: finding
the definition bound to a record (directly or through its parents) and
running a definition's actions in order once a change is approved.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID

from workflow_embargo.adapters.clock import SystemClock
from workflow_embargo.components.workflow_actions import build_action
from workflow_embargo.core.entities import ContentItem, WorkflowDefinition, WorkflowInstance
from workflow_embargo.core.ports.db import ContentRepoPort, WorkflowDefinitionRepoPort
from workflow_embargo.ports.clock import ClockPort
from workflow_embargo.services.records import ContentRecord

logger = logging.getLogger(__name__)

RecordLoader = Callable[[UUID], ContentRecord | None]


class WorkflowNotFoundError(LookupError):
    def __init__(self, content_id: UUID) -> None:
        self.content_id = content_id
        super().__init__(f"No workflow definition applies to content {content_id}")


class WorkflowRun:
    """A workflow instance as seen by its actions."""

    def __init__(self, instance: WorkflowInstance, loader: RecordLoader) -> None:
        self.instance = instance
        self._loader = loader

    def get_target(self) -> ContentRecord | None:
        # Reloaded per action so each action sees what the previous one stored.
        return self._loader(self.instance.target_id)


class WorkflowService:
    def __init__(
        self,
        definitions: WorkflowDefinitionRepoPort,
        content_repo: ContentRepoPort,
        clock: ClockPort | None = None,
        loader: RecordLoader | None = None,
    ) -> None:
        self._definitions = definitions
        self._content = content_repo
        self._clock = clock or SystemClock()
        self._loader = loader

    def set_record_loader(self, loader: RecordLoader) -> None:
        self._loader = loader

    def get_definition_for(self, item: ContentItem) -> WorkflowDefinition | None:
        """The item's own definition, else the nearest parent's."""
        seen: set[UUID] = set()
        current: ContentItem | None = item

        while current is not None and current.id not in seen:
            seen.add(current.id)
            if current.workflow_definition_id:
                definition = self._definitions.get_by_id(current.workflow_definition_id)
                if definition is not None:
                    return definition
            current = self._content.get_by_id(current.parent_id) if current.parent_id else None

        return None

    def get_definitions_for(self, item: ContentItem) -> list[WorkflowDefinition]:
        definition = self.get_definition_for(item)
        return [definition] if definition else []

    def start_workflow(
        self, record: ContentRecord, definition_id: UUID | None = None
    ) -> WorkflowInstance:
        """
        Start a workflow for a stored record and run its actions in order.

        Raises:
            WorkflowNotFoundError: if no definition applies
            RecordValidationError, JobCreationError: from a failing action;
                the instance is left active
        """
        if self._loader is None:
            raise RuntimeError("WorkflowService has no record loader")

        if definition_id is not None:
            definition = self._definitions.get_by_id(definition_id)
        else:
            definition = self.get_definition_for(record.item)
        if definition is None:
            raise WorkflowNotFoundError(record.item.id)

        instance = WorkflowInstance(
            definition_id=definition.id,
            target_id=record.item.id,
            started_at=self._clock.now_utc(),
        )
        run = WorkflowRun(instance, self._loader)
        logger.info("Starting workflow %s for content %s", definition.id, record.item.id)

        for config in definition.actions:
            action = build_action(config, self._clock)
            if not action.execute(run):
                logger.info("Workflow %s halted at action %s", instance.id, config.id)
                return instance

        return instance.model_copy(
            update={"status": "complete", "finished_at": self._clock.now_utc()}
        )
