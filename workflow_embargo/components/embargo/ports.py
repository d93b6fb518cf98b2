"""Embargo component port definitions - protocols for dependencies."""

from typing import Any, Protocol


class QueueGatePort(Protocol):
    """
    Decides whether saving a record may queue jobs from its desired dates.

    Consulted separately for each direction.
    """

    def publish_job_can_be_queued(self, record: Any) -> bool:
        ...

    def unpublish_job_can_be_queued(self, record: Any) -> bool:
        ...
