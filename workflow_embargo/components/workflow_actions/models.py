"""Workflow action component models - frozen dataclass outputs."""

from dataclasses import dataclass
from typing import Literal

OutcomeKind = Literal[
    "immediate", "scheduled_publish", "scheduled_unpublish", "scheduled_both", "noop"
]


@dataclass(frozen=True)
class DecisionOutcome:
    """What one action execution did to its target. Never persisted."""

    kind: OutcomeKind
    publish_at: int = 0
    unpublish_at: int = 0

    @classmethod
    def scheduled(cls, publish_at: int, unpublish_at: int) -> "DecisionOutcome":
        if publish_at and unpublish_at:
            return cls("scheduled_both", publish_at, unpublish_at)
        if publish_at:
            return cls("scheduled_publish", publish_at=publish_at)
        if unpublish_at:
            return cls("scheduled_unpublish", unpublish_at=unpublish_at)
        return cls("noop")


@dataclass(frozen=True)
class CmsField:
    """Admin form field descriptor for an action's configuration."""

    name: str
    title: str
    field_type: str
    description: str = ""
