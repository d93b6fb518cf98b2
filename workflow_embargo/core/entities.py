"""
Core entities for workflow-embargo.

ScheduledJob is the queued publish/unpublish job referenced from a
ContentItem's publish_job_id / unpublish_job_id.

Domain entities (ContentItem, workflow models) are re-exported from
workflow_embargo.domain.entities for convenience.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal
from uuid import UUID, uuid4

from workflow_embargo.domain.entities import (
    ContentItem,
    WorkflowActionConfig,
    WorkflowDefinition,
    WorkflowInstance,
    utc_now,
)

__all__ = [
    "ContentItem",
    "WorkflowActionConfig",
    "WorkflowDefinition",
    "WorkflowInstance",
    "JobKind",
    "ScheduledJob",
    "ScheduledJobStatus",
]


JobKind = Literal["publish", "unpublish"]
ScheduledJobStatus = Literal["queued", "cancelled"]


@dataclass(frozen=False)
class ScheduledJob:
    """
    Time-triggered publish or unpublish job for one content item.

    Invariants:
    - at most one queued job per (content_id, kind); rescheduling updates
      run_at_utc in place
    """

    content_id: UUID
    kind: JobKind
    run_at_utc: datetime
    # Fields with defaults must follow non-default fields
    id: UUID = field(default_factory=uuid4)
    status: ScheduledJobStatus = "queued"
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
