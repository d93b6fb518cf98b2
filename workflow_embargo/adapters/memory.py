"""
In-memory repositories.

Used by tests and by ServiceContext.create_in_memory(); same contracts as
the SQLite adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from workflow_embargo.core.entities import (
    ContentItem,
    JobKind,
    ScheduledJob,
    WorkflowDefinition,
)


@dataclass
class InMemoryContentRepo:
    items: dict[UUID, ContentItem] = field(default_factory=dict)

    def get_by_id(self, item_id: UUID) -> ContentItem | None:
        item = self.items.get(item_id)
        return item.model_copy() if item else None

    def save(self, item: ContentItem) -> ContentItem:
        self.items[item.id] = item.model_copy()
        return item

    def delete(self, item_id: UUID) -> None:
        self.items.pop(item_id, None)


@dataclass
class InMemoryScheduledJobRepo:
    jobs: dict[UUID, ScheduledJob] = field(default_factory=dict)

    def get_by_id(self, job_id: UUID) -> ScheduledJob | None:
        return self.jobs.get(job_id)

    def get_queued_for_content(self, content_id: UUID, kind: JobKind) -> ScheduledJob | None:
        for job in self.jobs.values():
            if job.content_id == content_id and job.kind == kind and job.status == "queued":
                return job
        return None

    def list_for_content(self, content_id: UUID) -> list[ScheduledJob]:
        jobs = [job for job in self.jobs.values() if job.content_id == content_id]
        return sorted(jobs, key=lambda job: job.created_at)

    def save(self, job: ScheduledJob) -> ScheduledJob:
        self.jobs[job.id] = job
        return job

    def delete(self, job_id: UUID) -> None:
        self.jobs.pop(job_id, None)


@dataclass
class InMemoryWorkflowDefinitionRepo:
    definitions: dict[UUID, WorkflowDefinition] = field(default_factory=dict)

    def get_by_id(self, definition_id: UUID) -> WorkflowDefinition | None:
        return self.definitions.get(definition_id)

    def save(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        self.definitions[definition.id] = definition
        return definition

    def list_all(self) -> list[WorkflowDefinition]:
        return list(self.definitions.values())
