"""
Job queue interface.

Stores time-triggered publish/unpublish jobs. Execution of due jobs belongs
to the queue runner and is not part of this package.

Key requirements:
- At most one queued job per (content_id, kind)
- Storage failures surface as JobCreationError, never swallowed
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from workflow_embargo.core.entities import JobKind, ScheduledJob


class ScheduledJobRepoPort(Protocol):
    """Repository interface for scheduled jobs."""

    def get_by_id(self, job_id: UUID) -> ScheduledJob | None:
        """Get job by ID."""
        ...

    def get_queued_for_content(self, content_id: UUID, kind: JobKind) -> ScheduledJob | None:
        """Get the queued job of the given kind for a content item, if any."""
        ...

    def list_for_content(self, content_id: UUID) -> list[ScheduledJob]:
        """List all jobs for a content item, oldest first."""
        ...

    def save(self, job: ScheduledJob) -> ScheduledJob:
        """
        Save or update job.

        Raises:
            JobCreationError: if the job could not be stored
        """
        ...

    def delete(self, job_id: UUID) -> None:
        """Delete job."""
        ...


# Error types


class JobError(Exception):
    """Base exception for job-related errors."""

    pass


class JobCreationError(JobError):
    """The queue failed to create or update a job."""

    def __init__(self, content_id: UUID, kind: JobKind, error: str) -> None:
        self.content_id = content_id
        self.kind = kind
        self.error = error
        super().__init__(f"Could not queue {kind} job for {content_id}: {error}")
