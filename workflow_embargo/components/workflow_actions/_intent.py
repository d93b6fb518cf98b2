"""Shared timing-intent helpers for publish and unpublish actions."""

from __future__ import annotations

from workflow_embargo.components.workflow_actions.ports import TimingTargetPort


def target_has_timing_capability(target: TimingTargetPort) -> bool:
    return target.supports_timing()


def has_delay_for_target(target: TimingTargetPort, delay_days: int) -> bool:
    if not target_has_timing_capability(target):
        return False
    return delay_days > 0
