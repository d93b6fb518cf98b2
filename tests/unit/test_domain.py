from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from workflow_embargo.domain.entities import MAX_DELAY_DAYS, ContentItem, WorkflowActionConfig
from workflow_embargo.domain.state import can_transition, transition

NOW = datetime(2014, 1, 5, 12, 0, 0, tzinfo=UTC)


def test_publish_sets_published_at() -> None:
    item = ContentItem(slug="a", title="A")

    published = transition(item, "published", NOW)

    assert published.status == "published"
    assert published.published_at == NOW
    assert item.status == "draft"


def test_unpublish_resets_published_at() -> None:
    item = ContentItem(slug="a", title="A", status="published", published_at=NOW)

    draft = transition(item, "draft", NOW)

    assert draft.status == "draft"
    assert draft.published_at is None


def test_same_status_is_copy() -> None:
    item = ContentItem(slug="a", title="A")

    assert transition(item, "draft", NOW) == item
    assert can_transition("published", "published")


def test_negative_delay_rejected() -> None:
    with pytest.raises(ValidationError):
        WorkflowActionConfig(action_type="publish", delay_days=-1)


def test_unknown_status_rejected() -> None:
    item = ContentItem(slug="a", title="A")

    assert not can_transition("draft", "archived")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="Invalid transition"):
        transition(item, "archived", NOW)  # type: ignore[arg-type]


def test_delay_beyond_limit_rejected() -> None:
    with pytest.raises(ValidationError):
        WorkflowActionConfig(action_type="publish", delay_days=3_000_000)


def test_delay_at_limit_accepted() -> None:
    config = WorkflowActionConfig(action_type="publish", delay_days=MAX_DELAY_DAYS)

    assert config.delay_days == MAX_DELAY_DAYS


def test_desired_dates_kept_to_the_second() -> None:
    item = ContentItem(
        slug="a",
        title="A",
        desired_publish_at=NOW.replace(microsecond=500000),
        published_at=NOW.replace(microsecond=500000),
    )

    assert item.desired_publish_at == NOW
    assert item.published_at == NOW.replace(microsecond=500000)
