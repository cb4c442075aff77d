"""Cloud events suite orchestration."""

from .cloud_events import CloudEventSuite

__all__ = ["CloudEventSuite"]
