from datetime import datetime
from typing import Any

from workflow_embargo.domain.entities import ContentItem, ContentStatus

# Allowed (current, new) publication transitions.
TRANSITIONS: set[tuple[str, str]] = {
    ("draft", "published"),
    ("published", "draft"),
}


def can_transition(current: ContentStatus, new: ContentStatus) -> bool:
    """
    Determine if a publication state transition is allowed.
    """
    return current == new or (current, new) in TRANSITIONS


def transition(item: ContentItem, new_status: ContentStatus, now: datetime) -> ContentItem:
    """
    Return a NEW ContentItem with the updated status and timestamps.
    Raises ValueError if transition is invalid.
    """
    if not can_transition(item.status, new_status):
        raise ValueError(f"Invalid transition from {item.status} to {new_status}")

    if item.status == new_status:
        return item.model_copy()

    updates: dict[str, Any] = {"status": new_status, "updated_at": now}

    if new_status == "published":
        updates["published_at"] = now
    else:
        updates["published_at"] = None

    return item.model_copy(update=updates)
