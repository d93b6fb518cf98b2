"""
Content records - a ContentItem bound to its storage and capabilities.

A record is timing-capable when composed with EmbargoExpiry and
workflow-applicable when its content type is listed in the workflow rules.
"""

from __future__ import annotations

import logging
from uuid import UUID

from workflow_embargo.components.embargo import EmbargoExpiry, QueueGatePort
from workflow_embargo.core.entities import ContentItem, ScheduledJob
from workflow_embargo.core.ports.db import ContentRepoPort
from workflow_embargo.core.ports.jobs import ScheduledJobRepoPort
from workflow_embargo.domain.state import transition
from workflow_embargo.ports.clock import ClockPort
from workflow_embargo.rules.models import Rules

logger = logging.getLogger(__name__)


class TimingNotSupportedError(TypeError):
    def __init__(self, content_id: UUID) -> None:
        self.content_id = content_id
        super().__init__(f"Content {content_id} does not support embargo & expiry")


class ContentRecord:
    def __init__(
        self,
        item: ContentItem,
        repo: ContentRepoPort,
        clock: ClockPort,
        embargo: EmbargoExpiry | None = None,
        workflow_applicable: bool = False,
    ) -> None:
        self._item = item
        self._repo = repo
        self._clock = clock
        self._embargo = embargo
        self._workflow_applicable = workflow_applicable

    @property
    def item(self) -> ContentItem:
        return self._item

    @property
    def workflow_applicable(self) -> bool:
        return self._workflow_applicable

    def supports_timing(self) -> bool:
        return self._embargo is not None

    def _require_embargo(self) -> EmbargoExpiry:
        if self._embargo is None:
            raise TimingNotSupportedError(self._item.id)
        return self._embargo

    def update(self, **fields: object) -> None:
        """Stage validated field changes; nothing is stored until write()."""
        self._item = ContentItem.model_validate({**self._item.model_dump(), **fields})

    # --- Timing ---

    def get_desired_publish_timestamp(self) -> int:
        if self._embargo is None:
            return 0
        return self._embargo.get_desired_publish_timestamp(self._item)

    def get_desired_unpublish_timestamp(self) -> int:
        if self._embargo is None:
            return 0
        return self._embargo.get_desired_unpublish_timestamp(self._item)

    def create_or_update_publish_job(self, timestamp: int) -> ScheduledJob:
        self._item, job = self._require_embargo().create_or_update_publish_job(
            self._item, timestamp
        )
        return job

    def create_or_update_unpublish_job(self, timestamp: int) -> ScheduledJob:
        self._item, job = self._require_embargo().create_or_update_unpublish_job(
            self._item, timestamp
        )
        return job

    def clear_publish_job(self) -> None:
        self._item = self._require_embargo().clear_publish_job(self._item)

    def clear_unpublish_job(self) -> None:
        self._item = self._require_embargo().clear_unpublish_job(self._item)

    # --- Versioning ---

    def is_published(self) -> bool:
        return self._item.status == "published"

    def publish_now(self) -> None:
        self._item = self._repo.save(transition(self._item, "published", self._clock.now_utc()))
        logger.info("Published content %s", self._item.id)

    def unpublish_now(self) -> None:
        self._item = self._repo.save(transition(self._item, "draft", self._clock.now_utc()))
        logger.info("Unpublished content %s", self._item.id)

    # --- Persistence ---

    def write(self) -> None:
        """
        Persist the record.

        Raises:
            RecordValidationError: if embargo/expiry validation or storage fails
            JobCreationError: if a job queued on save could not be stored
        """
        item = self._item
        if self._embargo is not None:
            item = self._embargo.on_before_write(item, self)
            self._embargo.validate(item)

        item = item.model_copy(update={"updated_at": self._clock.now_utc()})
        self._item = self._repo.save(item)


class RecordFactory:
    """Builds ContentRecords with the capabilities the rules switch on."""

    def __init__(
        self,
        repo: ContentRepoPort,
        jobs: ScheduledJobRepoPort,
        clock: ClockPort,
        rules: Rules,
        gate: QueueGatePort | None = None,
    ) -> None:
        self._repo = repo
        self._jobs = jobs
        self._clock = clock
        self._rules = rules
        self._gate = gate

    def wrap(self, item: ContentItem) -> ContentRecord:
        embargo = None
        if self._rules.embargo_expiry.enabled:
            embargo = EmbargoExpiry(
                self._jobs, self._clock, gate=self._gate, rules=self._rules.embargo_expiry
            )
        return ContentRecord(
            item,
            self._repo,
            self._clock,
            embargo=embargo,
            workflow_applicable=item.type in self._rules.workflow.applicable_types,
        )

    def load(self, item_id: UUID) -> ContentRecord | None:
        item = self._repo.get_by_id(item_id)
        if item is None:
            return None
        return self.wrap(item)
