"""
Embargo & expiry component - timing fields and job queueing for content records.

A record composed with EmbargoExpiry can carry a desired publish date
(embargo) and a desired unpublish date (expiry). On an ordinary save those
dates are turned into queued jobs, unless the queue gate defers them.

Invariants:
- I1: At most one queued job per direction per record; rescheduling updates
  the existing job in place
- I2: A desired date is cleared once converted into a job; the on-date holds
  the committed time
- I3: A committed expiry must fall after a committed embargo
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from workflow_embargo.components.embargo.ports import QueueGatePort
from workflow_embargo.core.entities import ContentItem, JobKind, ScheduledJob
from workflow_embargo.core.ports.db import RecordValidationError
from workflow_embargo.core.ports.jobs import ScheduledJobRepoPort
from workflow_embargo.ports.clock import ClockPort
from workflow_embargo.rules.models import EmbargoExpiryRules

logger = logging.getLogger(__name__)

EXPIRY_CLAMP_OFFSET = timedelta(seconds=1)


def to_timestamp(dt: datetime | None) -> int:
    """Epoch seconds for a datetime; 0 when unset."""
    if dt is None:
        return 0
    return int(dt.timestamp())


def from_timestamp(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, UTC)


class AllowAllGate:
    """Gate used when no workflow integration is wired."""

    def publish_job_can_be_queued(self, record: Any) -> bool:
        return True

    def unpublish_job_can_be_queued(self, record: Any) -> bool:
        return True


class EmbargoExpiry:
    """Embargo & expiry behaviour composed into a content record."""

    def __init__(
        self,
        jobs: ScheduledJobRepoPort,
        clock: ClockPort,
        gate: QueueGatePort | None = None,
        rules: EmbargoExpiryRules | None = None,
    ) -> None:
        self._jobs = jobs
        self._clock = clock
        self._gate = gate or AllowAllGate()
        self._rules = rules or EmbargoExpiryRules()

    # --- Accessors ---

    def get_desired_publish_timestamp(self, item: ContentItem) -> int:
        return to_timestamp(item.desired_publish_at)

    def get_desired_unpublish_timestamp(self, item: ContentItem) -> int:
        return to_timestamp(item.desired_unpublish_at)

    # --- Job queueing ---

    def create_or_update_publish_job(
        self, item: ContentItem, timestamp: int
    ) -> tuple[ContentItem, ScheduledJob]:
        """Queue (or move) the publish job and commit the embargo on-date."""
        job = self._queue(item, "publish", item.publish_job_id, timestamp)
        updated = item.model_copy(
            update={
                "publish_job_id": job.id,
                "publish_on_at": job.run_at_utc,
                "desired_publish_at": None,
            }
        )
        return updated, job

    def create_or_update_unpublish_job(
        self, item: ContentItem, timestamp: int
    ) -> tuple[ContentItem, ScheduledJob]:
        """Queue (or move) the unpublish job and commit the expiry on-date."""
        job = self._queue(item, "unpublish", item.unpublish_job_id, timestamp)
        updated = item.model_copy(
            update={
                "unpublish_job_id": job.id,
                "unpublish_on_at": job.run_at_utc,
                "desired_unpublish_at": None,
            }
        )
        return updated, job

    def clear_publish_job(self, item: ContentItem) -> ContentItem:
        self._cancel(item.publish_job_id)
        return item.model_copy(update={"publish_job_id": None, "publish_on_at": None})

    def clear_unpublish_job(self, item: ContentItem) -> ContentItem:
        self._cancel(item.unpublish_job_id)
        return item.model_copy(update={"unpublish_job_id": None, "unpublish_on_at": None})

    def _resolve_run_at(self, kind: JobKind, timestamp: int) -> datetime:
        run_at = from_timestamp(timestamp)
        now = self._clock.now_utc()
        if not self._rules.clamp_past_to_now:
            return run_at
        if kind == "unpublish":
            # A passed expiry still has to follow an embargo clamped to now.
            return max(run_at, now + EXPIRY_CLAMP_OFFSET)
        return max(run_at, now)

    def _queue(
        self,
        item: ContentItem,
        kind: JobKind,
        job_id: Any,
        timestamp: int,
    ) -> ScheduledJob:
        run_at = self._resolve_run_at(kind, timestamp)
        now = self._clock.now_utc()

        job = self._jobs.get_by_id(job_id) if job_id else None
        if job is None or job.status != "queued":
            # Pick up a queued job whose reference was never recorded on the item.
            job = self._jobs.get_queued_for_content(item.id, kind)

        if job is None:
            job = ScheduledJob(
                content_id=item.id,
                kind=kind,
                run_at_utc=run_at,
                created_at=now,
                updated_at=now,
            )
            logger.info("Queueing %s job %s for content %s at %s", kind, job.id, item.id, run_at)
        else:
            job.run_at_utc = run_at
            job.updated_at = now
            logger.info("Rescheduling %s job %s for content %s to %s", kind, job.id, item.id, run_at)

        return self._jobs.save(job)

    def _cancel(self, job_id: Any) -> None:
        if not job_id:
            return
        job = self._jobs.get_by_id(job_id)
        if job is None or job.status != "queued":
            return
        job.status = "cancelled"
        job.updated_at = self._clock.now_utc()
        self._jobs.save(job)
        logger.info("Cancelled %s job %s for content %s", job.kind, job.id, job.content_id)

    # --- Write hooks ---

    def on_before_write(self, item: ContentItem, record: Any) -> ContentItem:
        """
        Queue jobs from desired dates on an ordinary save.

        The gate is asked once per direction; a governed record keeps its
        desired dates until its workflow completes.
        """
        if item.desired_publish_at is not None and self._gate.publish_job_can_be_queued(record):
            item, _ = self.create_or_update_publish_job(
                item, self.get_desired_publish_timestamp(item)
            )

        if item.desired_unpublish_at is not None and self._gate.unpublish_job_can_be_queued(
            record
        ):
            item, _ = self.create_or_update_unpublish_job(
                item, self.get_desired_unpublish_timestamp(item)
            )

        return item

    def validate(self, item: ContentItem) -> None:
        """
        Raises:
            RecordValidationError: if expiry does not fall after embargo
        """
        pairs = (
            (item.desired_publish_at, item.desired_unpublish_at, "desired_unpublish_at"),
            (item.publish_on_at, item.unpublish_on_at, "unpublish_on_at"),
        )
        for publish_at, unpublish_at, field in pairs:
            if publish_at is not None and unpublish_at is not None and unpublish_at <= publish_at:
                raise RecordValidationError(
                    "Unpublish date must be after the publish date", field=field
                )
