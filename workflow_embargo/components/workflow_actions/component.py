"""
Workflow action component - publish/unpublish actions with embargo & expiry.

When a workflow reaches a publish or unpublish action, the target is either
published/unpublished immediately or, if it carries timing intent, given
queued publish/unpublish jobs.

Invariants:
- I1: Per execution exactly one of immediate action, job queueing or no-op
- I2: At most one job create/update call per direction per execution
- I3: An explicit desired date always wins over the action's delay
- I4: The target is written exactly once when jobs are queued
"""

from __future__ import annotations

import logging
from datetime import timedelta

from workflow_embargo.adapters.clock import SystemClock
from workflow_embargo.components.workflow_actions._intent import (
    has_delay_for_target,
    target_has_timing_capability,
)
from workflow_embargo.components.workflow_actions.models import CmsField, DecisionOutcome
from workflow_embargo.components.workflow_actions.ports import TimingTargetPort, WorkflowRunPort
from workflow_embargo.core.entities import WorkflowActionConfig
from workflow_embargo.ports.clock import ClockPort
from workflow_embargo.rules.models import Rules

logger = logging.getLogger(__name__)


class WorkflowItemAction:
    """Base for actions that publish or unpublish the workflow target."""

    def __init__(self, config: WorkflowActionConfig, clock: ClockPort | None = None) -> None:
        self.config = config
        self._clock = clock or SystemClock()

    @property
    def delay_days(self) -> int:
        return self.config.delay_days

    def execute(self, workflow: WorkflowRunPort) -> bool:
        """
        Run the action against the workflow's target.

        Always returns True; storage and queue failures propagate.
        """
        target = workflow.get_target()
        if target is None:
            logger.info("Action %s has no target, skipping", self.config.id)
            return True

        if self.target_has_embargo_expiry_or_delay(target):
            outcome = self.queue_embargo_expiry_jobs(target)
            target.write()
        else:
            self.act_now(target)
            outcome = DecisionOutcome("immediate")

        logger.info(
            "%s action %s: %s (publish_at=%s, unpublish_at=%s)",
            self.config.action_type,
            self.config.id,
            outcome.kind,
            outcome.publish_at,
            outcome.unpublish_at,
        )
        return True

    def action_has_delay_for_target(self, target: TimingTargetPort) -> bool:
        return has_delay_for_target(target, self.delay_days)

    def delayed_timestamp(self) -> int:
        """Now plus the configured delay, in epoch seconds."""
        return int((self._clock.now_utc() + timedelta(days=self.delay_days)).timestamp())

    def target_has_embargo_expiry_or_delay(self, target: TimingTargetPort) -> bool:
        raise NotImplementedError

    def queue_embargo_expiry_jobs(self, target: TimingTargetPort) -> DecisionOutcome:
        raise NotImplementedError

    def act_now(self, target: TimingTargetPort) -> None:
        raise NotImplementedError

    def get_cms_fields(self, rules: Rules) -> list[CmsField]:
        raise NotImplementedError


class PublishItemAction(WorkflowItemAction):
    """Publishes the target, or approves it for publishing through queued jobs."""

    def target_has_embargo_expiry_or_delay(self, target: TimingTargetPort) -> bool:
        if not target_has_timing_capability(target):
            return False

        if (
            target.get_desired_publish_timestamp() > 0
            or target.get_desired_unpublish_timestamp() > 0
        ):
            return True

        return self.action_has_delay_for_target(target)

    def queue_embargo_expiry_jobs(self, target: TimingTargetPort) -> DecisionOutcome:
        publish_at = 0
        unpublish_at = 0

        desired_unpublish = target.get_desired_unpublish_timestamp()
        if desired_unpublish != 0:
            target.create_or_update_unpublish_job(desired_unpublish)
            unpublish_at = desired_unpublish

        # An explicit publish date wins; the delay is not applied on top of it.
        desired_publish = target.get_desired_publish_timestamp()
        if desired_publish != 0:
            target.create_or_update_publish_job(desired_publish)
            return DecisionOutcome.scheduled(desired_publish, unpublish_at)

        if self.action_has_delay_for_target(target):
            publish_at = self.delayed_timestamp()
            target.create_or_update_publish_job(publish_at)

        return DecisionOutcome.scheduled(publish_at, unpublish_at)

    def act_now(self, target: TimingTargetPort) -> None:
        target.publish_now()

    def get_cms_fields(self, rules: Rules) -> list[CmsField]:
        if not rules.embargo_expiry.enabled:
            return []
        return [
            CmsField(
                name="delay_days",
                title="Publication Delay",
                field_type="numeric",
                description="Delay publication by the specified number of days",
            )
        ]


class UnpublishItemAction(WorkflowItemAction):
    """Unpublishes the target, or approves it for publishing/unpublishing through queued jobs."""

    def target_has_embargo_expiry_or_delay(self, target: TimingTargetPort) -> bool:
        if not target_has_timing_capability(target):
            return False

        # A missing expiry counts as intent here, unlike the publish side.
        if (
            target.get_desired_publish_timestamp() > 0
            or target.get_desired_unpublish_timestamp() == 0
        ):
            return True

        return self.action_has_delay_for_target(target)

    def queue_embargo_expiry_jobs(self, target: TimingTargetPort) -> DecisionOutcome:
        publish_at = 0
        unpublish_at = 0

        desired_publish = target.get_desired_publish_timestamp()
        if desired_publish != 0:
            target.create_or_update_publish_job(desired_publish)
            publish_at = desired_publish

        # An explicit unpublish date wins; the delay is not applied on top of it.
        desired_unpublish = target.get_desired_unpublish_timestamp()
        if desired_unpublish != 0:
            target.create_or_update_unpublish_job(desired_unpublish)
            return DecisionOutcome.scheduled(publish_at, desired_unpublish)

        if self.action_has_delay_for_target(target):
            unpublish_at = self.delayed_timestamp()
            target.create_or_update_unpublish_job(unpublish_at)

        return DecisionOutcome.scheduled(publish_at, unpublish_at)

    def act_now(self, target: TimingTargetPort) -> None:
        target.unpublish_now()

    def get_cms_fields(self, rules: Rules) -> list[CmsField]:
        if not rules.embargo_expiry.enabled:
            return []
        return [
            CmsField(
                name="delay_days",
                title="Delay Un-publishing",
                field_type="numeric",
                description="Delay unpublishing by the specified number of days",
            )
        ]


def build_action(
    config: WorkflowActionConfig, clock: ClockPort | None = None
) -> WorkflowItemAction:
    """Instantiate the action class for a stored action configuration."""
    if config.action_type == "publish":
        return PublishItemAction(config, clock)
    elif config.action_type == "unpublish":
        return UnpublishItemAction(config, clock)
    else:
        raise ValueError(f"Unknown action type: {config.action_type}")
