"""Embargo component - embargo & expiry timing for content records."""

from workflow_embargo.components.embargo.component import (
    AllowAllGate,
    EmbargoExpiry,
    from_timestamp,
    to_timestamp,
)
from workflow_embargo.components.embargo.ports import QueueGatePort

__all__ = [
    # Component
    "EmbargoExpiry",
    "AllowAllGate",
    # Helpers
    "from_timestamp",
    "to_timestamp",
    # Ports
    "QueueGatePort",
]
