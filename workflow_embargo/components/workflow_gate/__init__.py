"""Workflow gate component - suppresses job queueing for governed records."""

from workflow_embargo.components.workflow_gate.component import WorkflowEmbargoExpiryGate
from workflow_embargo.components.workflow_gate.ports import (
    GovernedRecordPort,
    WorkflowServicePort,
)

__all__ = [
    "WorkflowEmbargoExpiryGate",
    "GovernedRecordPort",
    "WorkflowServicePort",
]
