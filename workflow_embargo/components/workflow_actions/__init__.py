"""Workflow action component - publish/unpublish with embargo & expiry scheduling."""

from workflow_embargo.components.workflow_actions._intent import (
    has_delay_for_target,
    target_has_timing_capability,
)
from workflow_embargo.components.workflow_actions.component import (
    PublishItemAction,
    UnpublishItemAction,
    WorkflowItemAction,
    build_action,
)
from workflow_embargo.components.workflow_actions.models import (
    CmsField,
    DecisionOutcome,
    OutcomeKind,
)
from workflow_embargo.components.workflow_actions.ports import TimingTargetPort, WorkflowRunPort

__all__ = [
    # Entry point
    "build_action",
    # Actions
    "WorkflowItemAction",
    "PublishItemAction",
    "UnpublishItemAction",
    # Helpers
    "has_delay_for_target",
    "target_has_timing_capability",
    # Models
    "CmsField",
    "DecisionOutcome",
    "OutcomeKind",
    # Ports
    "TimingTargetPort",
    "WorkflowRunPort",
]
