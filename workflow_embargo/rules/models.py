from pydantic import BaseModel, Field

from workflow_embargo.domain.entities import MAX_DELAY_DAYS


class EmbargoExpiryRules(BaseModel):
    # Whether the embargo/expiry extension is installed on content records.
    enabled: bool = True
    clamp_past_to_now: bool = True


class WorkflowRules(BaseModel):
    applicable_types: list[str] = Field(default_factory=lambda: ["page", "post"])
    max_delay_days: int = Field(default=365, ge=0, le=MAX_DELAY_DAYS)


class Rules(BaseModel):
    embargo_expiry: EmbargoExpiryRules = Field(default_factory=EmbargoExpiryRules)
    workflow: WorkflowRules = Field(default_factory=WorkflowRules)
