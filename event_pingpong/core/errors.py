"""Exceptions raised by the ping-pong runner and its collaborators."""

from typing import Optional


class PingPongError(Exception):
    """Base class for every error that aborts a ping-pong run."""

    def __init__(self, message: str, sequence_number: Optional[int] = None):
        super().__init__(message)
        self.sequence_number = sequence_number


class EventTimeoutError(PingPongError):
    """No echo arrived on the inbound channel within the event timeout."""


class EventFormatError(PingPongError):
    """A received payload has the wrong length or a malformed header."""


class PublishError(PingPongError):
    """The collaborator could not deliver an outbound event."""


class DeviceRegistryError(PingPongError):
    """No usable device could be obtained from the device registry."""


class SubscriptionError(PingPongError):
    """An inbound channel could not be subscribed, or was never subscribed."""


class RunTimeoutError(PingPongError):
    """The whole run did not finish within its time budget."""
