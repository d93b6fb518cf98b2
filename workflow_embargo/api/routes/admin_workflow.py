"""
Admin Workflow API Routes.

Workflow action configuration (publish/unpublish delay) and embargo & expiry
state of content items going through workflows.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from workflow_embargo.api.deps import get_context
from workflow_embargo.components.workflow_actions import build_action
from workflow_embargo.context import ServiceContext
from workflow_embargo.core.entities import WorkflowActionConfig, WorkflowDefinition
from workflow_embargo.core.ports.db import RecordValidationError
from workflow_embargo.core.ports.jobs import JobCreationError
from workflow_embargo.services.records import ContentRecord
from workflow_embargo.services.workflow import WorkflowNotFoundError

router = APIRouter()


# --- Request/Response Models ---


class FieldResponse(BaseModel):
    name: str
    title: str
    field_type: str
    description: str = ""


class ActionResponse(BaseModel):
    id: UUID
    definition_id: UUID
    title: str
    action_type: str
    delay_days: int


class UpdateActionRequest(BaseModel):
    delay_days: int = Field(..., ge=0, description="Fallback delay in days, 0 for none")


class TimingResponse(BaseModel):
    content_id: UUID
    status: str
    desired_publish_at: datetime | None = None
    desired_unpublish_at: datetime | None = None
    publish_on_at: datetime | None = None
    unpublish_on_at: datetime | None = None
    publish_job_id: UUID | None = None
    unpublish_job_id: UUID | None = None


class WorkflowRunResponse(BaseModel):
    instance_id: UUID
    definition_id: UUID
    status: str
    timing: TimingResponse


# --- Helpers ---


def _find_action(
    ctx: ServiceContext, action_id: UUID
) -> tuple[WorkflowDefinition, WorkflowActionConfig]:
    for definition in ctx.definition_repo.list_all():
        for action in definition.actions:
            if action.id == action_id:
                return definition, action
    raise HTTPException(status_code=404, detail="Action not found")


def _load_record(ctx: ServiceContext, content_id: UUID) -> ContentRecord:
    record = ctx.records.load(content_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return record


def _timing_response(record: ContentRecord) -> TimingResponse:
    item = record.item
    return TimingResponse(
        content_id=item.id,
        status=item.status,
        desired_publish_at=item.desired_publish_at,
        desired_unpublish_at=item.desired_unpublish_at,
        publish_on_at=item.publish_on_at,
        unpublish_on_at=item.unpublish_on_at,
        publish_job_id=item.publish_job_id,
        unpublish_job_id=item.unpublish_job_id,
    )


def _validation_detail(e: RecordValidationError) -> dict[str, Any]:
    return {"errors": [{"code": "validation", "message": e.message, "field": e.field}]}


def _action_response(definition: WorkflowDefinition, action: WorkflowActionConfig) -> ActionResponse:
    return ActionResponse(
        id=action.id,
        definition_id=definition.id,
        title=action.title,
        action_type=action.action_type,
        delay_days=action.delay_days,
    )


# --- Action configuration ---


@router.get("/actions/{action_id}/fields", response_model=list[FieldResponse])
def get_action_fields(
    action_id: UUID, ctx: ServiceContext = Depends(get_context)
) -> list[FieldResponse]:
    """Form fields for an action; the delay field only exists with embargo & expiry."""
    _, config = _find_action(ctx, action_id)
    action = build_action(config, ctx.clock)
    return [
        FieldResponse(
            name=f.name, title=f.title, field_type=f.field_type, description=f.description
        )
        for f in action.get_cms_fields(ctx.rules)
    ]


@router.put("/actions/{action_id}", response_model=ActionResponse)
def update_action(
    action_id: UUID,
    request: UpdateActionRequest,
    ctx: ServiceContext = Depends(get_context),
) -> ActionResponse:
    definition, action = _find_action(ctx, action_id)

    max_delay = ctx.rules.workflow.max_delay_days
    if request.delay_days > max_delay:
        raise HTTPException(
            status_code=400,
            detail={
                "errors": [
                    {
                        "code": "delay_too_long",
                        "message": f"Delay must be at most {max_delay} days",
                        "field": "delay_days",
                    }
                ]
            },
        )

    updated = action.model_copy(update={"delay_days": request.delay_days})
    actions = [updated if a.id == action_id else a for a in definition.actions]
    definition = ctx.definition_repo.save(definition.model_copy(update={"actions": actions}))
    return _action_response(definition, updated)


# --- Content timing ---


@router.get("/content/{content_id}/timing", response_model=TimingResponse)
def get_timing(content_id: UUID, ctx: ServiceContext = Depends(get_context)) -> TimingResponse:
    return _timing_response(_load_record(ctx, content_id))


@router.post("/content/{content_id}/workflow", response_model=WorkflowRunResponse)
def start_workflow(
    content_id: UUID, ctx: ServiceContext = Depends(get_context)
) -> WorkflowRunResponse:
    """Run the content's workflow; publish/unpublish actions apply embargo & expiry."""
    record = _load_record(ctx, content_id)

    try:
        instance = ctx.workflow_service.start_workflow(record)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except RecordValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_detail(e)) from e
    except JobCreationError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return WorkflowRunResponse(
        instance_id=instance.id,
        definition_id=instance.definition_id,
        status=instance.status,
        timing=_timing_response(_load_record(ctx, content_id)),
    )


@router.delete("/content/{content_id}/jobs/{kind}", response_model=TimingResponse)
def clear_job(
    content_id: UUID,
    kind: Literal["publish", "unpublish"],
    ctx: ServiceContext = Depends(get_context),
) -> TimingResponse:
    """Cancel a queued publish or unpublish job and clear its on-date."""
    record = _load_record(ctx, content_id)
    if not record.supports_timing():
        raise HTTPException(status_code=409, detail="Embargo & expiry is not enabled")

    try:
        if kind == "publish":
            record.clear_publish_job()
        else:
            record.clear_unpublish_job()
        record.write()
    except RecordValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_detail(e)) from e
    except JobCreationError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return _timing_response(record)
