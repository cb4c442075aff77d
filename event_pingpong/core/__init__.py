"""Core ping-pong components."""

from .models import PingPongConfig, Exchange, RunResult
from .channel import ChannelClient, RunnerContext, resolve_device_id
from .errors import (
    PingPongError,
    EventTimeoutError,
    EventFormatError,
    PublishError,
    DeviceRegistryError,
    SubscriptionError,
    RunTimeoutError,
)
from .runner import PingPongRunner, RunnerState

__all__ = [
    "PingPongConfig",
    "Exchange",
    "RunResult",
    "ChannelClient",
    "RunnerContext",
    "resolve_device_id",
    "PingPongError",
    "EventTimeoutError",
    "EventFormatError",
    "PublishError",
    "DeviceRegistryError",
    "SubscriptionError",
    "RunTimeoutError",
    "PingPongRunner",
    "RunnerState",
]
