"""Collaborator contract consumed by the ping-pong runner."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Union

from .errors import DeviceRegistryError

EventData = Union[str, bytes]


class ChannelClient(ABC):
    """
    Publish/receive access to a device's event channels plus its device registry.

    Implementations own transport, subscriptions and publish retries; the
    runner only sequences calls into them.
    """

    @abstractmethod
    async def publish_event(self, name: str, data: str, retries: int = 3) -> None:
        """
        Submit an event named ``"<device_id>/<channel>"``.

        Raises:
            PublishError: If the event could not be delivered within ``retries``
                attempts
        """

    @abstractmethod
    async def receive_event(self, channel: str, timeout_ms: int) -> Optional[EventData]:
        """
        Wait up to ``timeout_ms`` for the next undelivered event on ``channel``.

        Returns:
            The event data, or None if nothing arrived in time
        """

    @abstractmethod
    async def list_devices(self) -> List[str]:
        """Return the ids of the provisioned devices, in registry order."""

    async def subscribe(self, channel: str) -> None:
        """Start receiving events on ``channel``; a no-op for clients that need no setup."""

    async def open(self) -> None:
        """Acquire transport resources."""

    async def close(self) -> None:
        """Release transport resources."""

    async def __aenter__(self) -> "ChannelClient":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


@dataclass
class RunnerContext:
    """Everything a runner needs from the enclosing harness."""

    channel_client: ChannelClient
    device_id: str

    def event_name(self, channel: str) -> str:
        return f"{self.device_id}/{channel}"


async def resolve_device_id(client: ChannelClient) -> str:
    """Return the first device id exposed by the registry."""
    devices = await client.list_devices()
    if not devices:
        raise DeviceRegistryError("No devices are provisioned for this account")
    return devices[0]
