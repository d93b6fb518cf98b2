# workflow-embargo: Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from workflow_embargo.core.ports.db import (
    ContentRepoPort,
    RecordValidationError,
    WorkflowDefinitionRepoPort,
)
from workflow_embargo.core.ports.jobs import (
    JobCreationError,
    JobError,
    ScheduledJobRepoPort,
)

__all__ = [
    "ContentRepoPort",
    "JobCreationError",
    "JobError",
    "RecordValidationError",
    "ScheduledJobRepoPort",
    "WorkflowDefinitionRepoPort",
]
