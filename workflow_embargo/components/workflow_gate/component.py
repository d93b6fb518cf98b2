"""
Workflow gate component - defers embargo & expiry job queueing to workflows.

While a workflow governs a record, embargo and expiry changes go through the
review process like any other change. Saving the record must therefore not
queue publish/unpublish jobs; the publish or unpublish workflow action queues
them once the change is approved.
"""

from __future__ import annotations

import logging

from workflow_embargo.components.workflow_gate.ports import (
    GovernedRecordPort,
    WorkflowServicePort,
)

logger = logging.getLogger(__name__)


class WorkflowEmbargoExpiryGate:
    """Queue gate consulted by EmbargoExpiry on every save."""

    def __init__(self, workflow_service: WorkflowServicePort) -> None:
        self._workflow_service = workflow_service

    def publish_job_can_be_queued(self, record: GovernedRecordPort) -> bool:
        return self.can_allow_embargo_expiry_to_queue_jobs(record)

    def unpublish_job_can_be_queued(self, record: GovernedRecordPort) -> bool:
        return self.can_allow_embargo_expiry_to_queue_jobs(record)

    def can_allow_embargo_expiry_to_queue_jobs(self, record: GovernedRecordPort) -> bool:
        # Workflows never apply to this record type, so saving may queue jobs.
        if not record.workflow_applicable:
            return True

        definitions = self._workflow_service.get_definitions_for(record.item)

        # Nothing governs this record.
        if not definitions:
            return True

        logger.debug(
            "Deferring embargo/expiry jobs for content %s to workflow %s",
            record.item.id,
            definitions[0].id,
        )
        return False
