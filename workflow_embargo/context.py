from __future__ import annotations

from dataclasses import dataclass

from workflow_embargo.adapters.clock import SystemClock
from workflow_embargo.adapters.memory import (
    InMemoryContentRepo,
    InMemoryScheduledJobRepo,
    InMemoryWorkflowDefinitionRepo,
)
from workflow_embargo.adapters.sqlite.repos import (
    SQLiteContentRepo,
    SQLiteScheduledJobRepo,
    SQLiteWorkflowDefinitionRepo,
)
from workflow_embargo.components.workflow_gate import WorkflowEmbargoExpiryGate
from workflow_embargo.core.ports.db import ContentRepoPort, WorkflowDefinitionRepoPort
from workflow_embargo.core.ports.jobs import ScheduledJobRepoPort
from workflow_embargo.ports.clock import ClockPort
from workflow_embargo.rules.models import Rules
from workflow_embargo.services.records import RecordFactory
from workflow_embargo.services.workflow import WorkflowService


@dataclass
class ServiceContext:
    content_repo: ContentRepoPort
    job_repo: ScheduledJobRepoPort
    definition_repo: WorkflowDefinitionRepoPort
    records: RecordFactory
    workflow_service: WorkflowService
    gate: WorkflowEmbargoExpiryGate
    rules: Rules
    clock: ClockPort

    @classmethod
    def create(cls, db_path: str, rules: Rules, clock: ClockPort | None = None) -> ServiceContext:
        return cls.wire(
            SQLiteContentRepo(db_path),
            SQLiteScheduledJobRepo(db_path),
            SQLiteWorkflowDefinitionRepo(db_path),
            rules,
            clock,
        )

    @classmethod
    def create_in_memory(cls, rules: Rules, clock: ClockPort | None = None) -> ServiceContext:
        return cls.wire(
            InMemoryContentRepo(),
            InMemoryScheduledJobRepo(),
            InMemoryWorkflowDefinitionRepo(),
            rules,
            clock,
        )

    @classmethod
    def wire(
        cls,
        content_repo: ContentRepoPort,
        job_repo: ScheduledJobRepoPort,
        definition_repo: WorkflowDefinitionRepoPort,
        rules: Rules,
        clock: ClockPort | None = None,
    ) -> ServiceContext:
        clock = clock or SystemClock()

        # The gate needs the workflow service, and workflows need records
        # built with the gate, so the loop is closed with setters.
        workflow_service = WorkflowService(definition_repo, content_repo, clock)
        gate = WorkflowEmbargoExpiryGate(workflow_service)
        records = RecordFactory(content_repo, job_repo, clock, rules, gate=gate)
        workflow_service.set_record_loader(records.load)

        return cls(
            content_repo=content_repo,
            job_repo=job_repo,
            definition_repo=definition_repo,
            records=records,
            workflow_service=workflow_service,
            gate=gate,
            rules=rules,
            clock=clock,
        )
