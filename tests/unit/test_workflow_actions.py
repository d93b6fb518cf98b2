"""
Tests for the publish/unpublish workflow actions.

Covers the immediate-vs-queued decision, the order jobs are queued in, the
precedence of explicit dates over the configured delay, and error
propagation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from workflow_embargo.adapters.clock import FixedClock
from workflow_embargo.components.workflow_actions import (
    DecisionOutcome,
    PublishItemAction,
    UnpublishItemAction,
    build_action,
)
from workflow_embargo.core.entities import WorkflowActionConfig
from workflow_embargo.core.ports.db import RecordValidationError
from workflow_embargo.core.ports.jobs import JobCreationError
from workflow_embargo.domain.entities import MAX_DELAY_DAYS
from workflow_embargo.rules.models import EmbargoExpiryRules, Rules

NOW = datetime(2014, 1, 5, 12, 0, 0, tzinfo=UTC)
NOW_TS = int(NOW.timestamp())
T1 = int(datetime(2014, 1, 6, 12, 0, 0, tzinfo=UTC).timestamp())
T2 = int(datetime(2014, 1, 8, 12, 0, 0, tzinfo=UTC).timestamp())
DAY = 86400

# --- Mock Implementations ---


@dataclass
class MockTarget:
    """Records every call the action makes against its target."""

    timing: bool = True
    desired_publish: int = 0
    desired_unpublish: int = 0
    calls: list[tuple[str, int | None]] = field(default_factory=list)
    fail_write: bool = False
    fail_jobs: bool = False

    def supports_timing(self) -> bool:
        return self.timing

    def get_desired_publish_timestamp(self) -> int:
        return self.desired_publish

    def get_desired_unpublish_timestamp(self) -> int:
        return self.desired_unpublish

    def create_or_update_publish_job(self, timestamp: int) -> object:
        if self.fail_jobs:
            raise JobCreationError(uuid4(), "publish", "queue offline")
        self.calls.append(("publish_job", timestamp))
        self.desired_publish = 0
        return object()

    def create_or_update_unpublish_job(self, timestamp: int) -> object:
        if self.fail_jobs:
            raise JobCreationError(uuid4(), "unpublish", "queue offline")
        self.calls.append(("unpublish_job", timestamp))
        self.desired_unpublish = 0
        return object()

    def publish_now(self) -> None:
        self.calls.append(("publish_now", None))

    def unpublish_now(self) -> None:
        self.calls.append(("unpublish_now", None))

    def write(self) -> None:
        if self.fail_write:
            raise RecordValidationError("Unpublish date must be after the publish date")
        self.calls.append(("write", None))


@dataclass
class MockRun:
    target: MockTarget | None = None

    def get_target(self) -> MockTarget | None:
        return self.target


# --- Fixtures ---


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


def publish_action(clock: FixedClock, delay_days: int = 0) -> PublishItemAction:
    return PublishItemAction(
        WorkflowActionConfig(action_type="publish", delay_days=delay_days), clock
    )


def unpublish_action(clock: FixedClock, delay_days: int = 0) -> UnpublishItemAction:
    return UnpublishItemAction(
        WorkflowActionConfig(action_type="unpublish", delay_days=delay_days), clock
    )


# --- Publish action ---


class TestPublishItemAction:
    def test_no_intent_publishes_immediately(self, clock: FixedClock) -> None:
        target = MockTarget()

        assert publish_action(clock).execute(MockRun(target)) is True

        assert target.calls == [("publish_now", None)]

    def test_plain_target_ignores_dates(self, clock: FixedClock) -> None:
        target = MockTarget(timing=False, desired_publish=T1, desired_unpublish=T2)

        publish_action(clock, delay_days=3).execute(MockRun(target))

        assert target.calls == [("publish_now", None)]

    def test_both_dates_queue_both_jobs(self, clock: FixedClock) -> None:
        target = MockTarget(desired_publish=T1, desired_unpublish=T2)

        publish_action(clock).execute(MockRun(target))

        assert target.calls == [
            ("unpublish_job", T2),
            ("publish_job", T1),
            ("write", None),
        ]

    def test_embargo_only_queues_publish_job(self, clock: FixedClock) -> None:
        target = MockTarget(desired_publish=T1)

        publish_action(clock).execute(MockRun(target))

        assert target.calls == [("publish_job", T1), ("write", None)]

    def test_expiry_only_queues_unpublish_job(self, clock: FixedClock) -> None:
        target = MockTarget(desired_unpublish=T2)

        publish_action(clock).execute(MockRun(target))

        assert target.calls == [("unpublish_job", T2), ("write", None)]

    def test_delay_used_without_dates(self, clock: FixedClock) -> None:
        target = MockTarget()

        publish_action(clock, delay_days=3).execute(MockRun(target))

        assert target.calls == [("publish_job", NOW_TS + 3 * DAY), ("write", None)]

    def test_explicit_embargo_wins_over_delay(self, clock: FixedClock) -> None:
        target = MockTarget(desired_publish=T1)

        publish_action(clock, delay_days=3).execute(MockRun(target))

        assert target.calls == [("publish_job", T1), ("write", None)]

    def test_expiry_with_delay_queues_delayed_publish(self, clock: FixedClock) -> None:
        target = MockTarget(desired_unpublish=T2)

        publish_action(clock, delay_days=1).execute(MockRun(target))

        assert target.calls == [
            ("unpublish_job", T2),
            ("publish_job", NOW_TS + DAY),
            ("write", None),
        ]

    def test_delay_computed_at_execution_time(self, clock: FixedClock) -> None:
        action = publish_action(clock, delay_days=2)
        clock.set(NOW + timedelta(hours=5))
        target = MockTarget()

        action.execute(MockRun(target))

        assert target.calls[0] == ("publish_job", NOW_TS + 5 * 3600 + 2 * DAY)

    def test_longest_delay_is_schedulable(self, clock: FixedClock) -> None:
        target = MockTarget()

        publish_action(clock, delay_days=MAX_DELAY_DAYS).execute(MockRun(target))

        assert target.calls[0] == ("publish_job", NOW_TS + MAX_DELAY_DAYS * DAY)

    def test_outcomes(self, clock: FixedClock) -> None:
        action = publish_action(clock)

        assert action.queue_embargo_expiry_jobs(
            MockTarget(desired_publish=T1, desired_unpublish=T2)
        ) == DecisionOutcome("scheduled_both", T1, T2)
        assert action.queue_embargo_expiry_jobs(
            MockTarget(desired_publish=T1)
        ) == DecisionOutcome("scheduled_publish", publish_at=T1)
        assert action.queue_embargo_expiry_jobs(
            MockTarget(desired_unpublish=T2)
        ) == DecisionOutcome("scheduled_unpublish", unpublish_at=T2)


# --- Unpublish action ---


class TestUnpublishItemAction:
    def test_plain_target_unpublishes_immediately(self, clock: FixedClock) -> None:
        target = MockTarget(timing=False)

        unpublish_action(clock).execute(MockRun(target))

        assert target.calls == [("unpublish_now", None)]

    def test_missing_expiry_counts_as_intent(self, clock: FixedClock) -> None:
        target = MockTarget()
        action = unpublish_action(clock)

        assert action.target_has_embargo_expiry_or_delay(target) is True
        assert action.queue_embargo_expiry_jobs(target) == DecisionOutcome("noop")

    def test_no_dates_writes_without_unpublishing(self, clock: FixedClock) -> None:
        target = MockTarget()

        unpublish_action(clock).execute(MockRun(target))

        assert target.calls == [("write", None)]

    def test_expiry_without_delay_unpublishes_immediately(self, clock: FixedClock) -> None:
        target = MockTarget(desired_unpublish=T2)

        unpublish_action(clock).execute(MockRun(target))

        assert target.calls == [("unpublish_now", None)]

    def test_expiry_with_delay_uses_expiry(self, clock: FixedClock) -> None:
        target = MockTarget(desired_unpublish=T2)

        unpublish_action(clock, delay_days=2).execute(MockRun(target))

        assert target.calls == [("unpublish_job", T2), ("write", None)]

    def test_both_dates_queue_publish_first(self, clock: FixedClock) -> None:
        target = MockTarget(desired_publish=T1, desired_unpublish=T2)

        unpublish_action(clock).execute(MockRun(target))

        assert target.calls == [
            ("publish_job", T1),
            ("unpublish_job", T2),
            ("write", None),
        ]

    def test_embargo_with_delay_queues_delayed_unpublish(self, clock: FixedClock) -> None:
        target = MockTarget(desired_publish=T1)

        unpublish_action(clock, delay_days=7).execute(MockRun(target))

        assert target.calls == [
            ("publish_job", T1),
            ("unpublish_job", NOW_TS + 7 * DAY),
            ("write", None),
        ]


# --- Shared behaviour ---


class TestExecute:
    @pytest.mark.parametrize("factory", [publish_action, unpublish_action])
    def test_missing_target_is_a_noop(self, clock: FixedClock, factory) -> None:
        assert factory(clock).execute(MockRun(None)) is True

    def test_write_failure_propagates(self, clock: FixedClock) -> None:
        target = MockTarget(desired_publish=T1, fail_write=True)

        with pytest.raises(RecordValidationError):
            publish_action(clock).execute(MockRun(target))

        assert target.calls == [("publish_job", T1)]

    def test_job_failure_propagates_before_write(self, clock: FixedClock) -> None:
        target = MockTarget(desired_publish=T1, fail_jobs=True)

        with pytest.raises(JobCreationError):
            publish_action(clock).execute(MockRun(target))

        assert target.calls == []

    def test_delay_needs_timing_capability(self, clock: FixedClock) -> None:
        action = publish_action(clock, delay_days=3)

        assert action.action_has_delay_for_target(MockTarget()) is True
        assert action.action_has_delay_for_target(MockTarget(timing=False)) is False


class TestBuildAction:
    def test_builds_by_action_type(self, clock: FixedClock) -> None:
        publish = build_action(WorkflowActionConfig(action_type="publish"), clock)
        unpublish = build_action(WorkflowActionConfig(action_type="unpublish"), clock)

        assert isinstance(publish, PublishItemAction)
        assert isinstance(unpublish, UnpublishItemAction)

    def test_delay_field_shown_with_embargo(self, clock: FixedClock) -> None:
        fields = publish_action(clock).get_cms_fields(Rules())

        assert [f.name for f in fields] == ["delay_days"]
        assert fields[0].title == "Publication Delay"

    def test_delay_field_hidden_without_embargo(self, clock: FixedClock) -> None:
        rules = Rules(embargo_expiry=EmbargoExpiryRules(enabled=False))

        assert unpublish_action(clock).get_cms_fields(rules) == []
