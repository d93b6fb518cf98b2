"""Workflow action port definitions - protocols for dependencies."""

from typing import Protocol


class TimingTargetPort(Protocol):
    """The content record a workflow action operates on."""

    def supports_timing(self) -> bool:
        """Whether the record carries embargo & expiry fields."""
        ...

    def get_desired_publish_timestamp(self) -> int:
        """Desired publish time in epoch seconds, 0 if unset."""
        ...

    def get_desired_unpublish_timestamp(self) -> int:
        """Desired unpublish time in epoch seconds, 0 if unset."""
        ...

    def create_or_update_publish_job(self, timestamp: int) -> object:
        ...

    def create_or_update_unpublish_job(self, timestamp: int) -> object:
        ...

    def publish_now(self) -> None:
        ...

    def unpublish_now(self) -> None:
        ...

    def write(self) -> None:
        ...


class WorkflowRunPort(Protocol):
    """The running workflow instance handed to an action."""

    def get_target(self) -> TimingTargetPort | None:
        """The governed record, or None if it no longer exists."""
        ...
