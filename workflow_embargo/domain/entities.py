from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- Enums / Literals ---
ContentType = Literal["post", "page"]
ContentStatus = Literal["draft", "published"]
ActionType = Literal["publish", "unpublish"]
WorkflowStatus = Literal["active", "complete"]

# Upper bound on a fallback delay; keeps now + delay within datetime range.
MAX_DELAY_DAYS = 36500

# --- Content ---

class ContentItem(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    type: ContentType = "page"
    slug: str
    title: str
    status: ContentStatus = "draft"
    published_at: datetime | None = None

    parent_id: UUID | None = None
    workflow_definition_id: UUID | None = None

    # Embargo & expiry. Desired dates are editor intent; on-dates are what a
    # queued job has been committed to. A resolved desired date is cleared.
    desired_publish_at: datetime | None = None
    desired_unpublish_at: datetime | None = None
    publish_on_at: datetime | None = None
    unpublish_on_at: datetime | None = None
    publish_job_id: UUID | None = None
    unpublish_job_id: UUID | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("desired_publish_at", "desired_unpublish_at")
    @classmethod
    def truncate_to_seconds(cls, v: datetime | None) -> datetime | None:
        """Jobs run on whole epoch seconds, so desired dates are kept to the second."""
        return v.replace(microsecond=0) if v else v

# --- Workflow ---

class WorkflowActionConfig(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str = ""
    action_type: ActionType
    # 0 means no fallback delay configured.
    delay_days: int = Field(default=0, ge=0, le=MAX_DELAY_DAYS)

class WorkflowDefinition(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    actions: list[WorkflowActionConfig] = Field(default_factory=list)

class WorkflowInstance(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    definition_id: UUID
    target_id: UUID
    status: WorkflowStatus = "active"
    started_at: datetime = Field(default_factory=utc_now)
    finished_at: datetime | None = None
