from datetime import UTC, datetime
from pathlib import Path

import pytest

from workflow_embargo.adapters.clock import FixedClock
from workflow_embargo.context import ServiceContext
from workflow_embargo.core.entities import (
    ContentItem,
    WorkflowActionConfig,
    WorkflowDefinition,
)
from workflow_embargo.rules.models import Rules

NOW = datetime(2014, 1, 5, 12, 0, 0, tzinfo=UTC)
EMBARGO = datetime(2014, 1, 6, 12, 0, 0, tzinfo=UTC)
EXPIRY = datetime(2014, 1, 8, 12, 0, 0, tzinfo=UTC)

MIGRATIONS_DIR = str(Path(__file__).resolve().parents[1] / "migrations")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def rules() -> Rules:
    return Rules()


@pytest.fixture
def ctx(rules: Rules, clock: FixedClock) -> ServiceContext:
    """ServiceContext backed by in-memory repositories and a fixed clock."""
    return ServiceContext.create_in_memory(rules, clock)


@pytest.fixture
def approve_publication(ctx: ServiceContext) -> WorkflowDefinition:
    """A definition whose only step publishes the item."""
    return ctx.definition_repo.save(
        WorkflowDefinition(
            title="Approve publication",
            actions=[WorkflowActionConfig(title="Publish", action_type="publish")],
        )
    )


@pytest.fixture
def governed_page(ctx: ServiceContext, approve_publication: WorkflowDefinition) -> ContentItem:
    return ctx.content_repo.save(
        ContentItem(
            slug="governed",
            title="Governed page",
            workflow_definition_id=approve_publication.id,
        )
    )
