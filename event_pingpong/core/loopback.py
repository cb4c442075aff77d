"""In-process device that echoes published events back to the harness."""

import asyncio
import logging
from typing import Dict, List, Optional

from .channel import ChannelClient, EventData
from .errors import PublishError


class LoopbackChannelClient(ChannelClient):
    """
    Channel client backed by a simulated echo device.

    An event published as ``"<device_id>/<channel>"`` is delivered back on
    ``routes[channel]`` after ``echo_delay_ms``. With ``duplicate_echoes`` the
    previous echo on that route is delivered a second time ahead of the new
    one, the way a cloud pipeline may replay late events.
    """

    def __init__(
        self,
        routes: Dict[str, str],
        device_id: str = "loopback0",
        echo_delay_ms: int = 0,
        duplicate_echoes: bool = False,
    ):
        self.routes = dict(routes)
        self.device_id = device_id
        self.echo_delay_ms = echo_delay_ms
        self.duplicate_echoes = duplicate_echoes

        self.published: List[str] = []
        self._queues: Dict[str, asyncio.Queue] = {}
        self._last_echo: Dict[str, str] = {}
        self._pending: List[asyncio.Task] = []
        self.logger = logging.getLogger(__name__)

    def _queue(self, channel: str) -> asyncio.Queue:
        if channel not in self._queues:
            self._queues[channel] = asyncio.Queue()
        return self._queues[channel]

    async def list_devices(self) -> List[str]:
        return [self.device_id]

    async def publish_event(self, name: str, data: str, retries: int = 3) -> None:
        device_id, _, channel = name.partition("/")
        if device_id != self.device_id or not channel:
            raise PublishError(f"Unknown event target: {name}")

        self.published.append(data)
        echo_channel = self.routes.get(channel)
        if echo_channel is None:
            self.logger.debug(f"Device is not subscribed to {channel}, dropping event")
            return

        task = asyncio.create_task(self._echo(echo_channel, data))
        self._pending.append(task)
        self._pending = [t for t in self._pending if not t.done()]

    async def _echo(self, channel: str, data: str) -> None:
        if self.echo_delay_ms > 0:
            await asyncio.sleep(self.echo_delay_ms / 1000)
        queue = self._queue(channel)
        previous = self._last_echo.get(channel)
        if self.duplicate_echoes and previous is not None:
            queue.put_nowait(previous)
        queue.put_nowait(data)
        self._last_echo[channel] = data

    async def receive_event(self, channel: str, timeout_ms: int) -> Optional[EventData]:
        try:
            return await asyncio.wait_for(self._queue(channel).get(), timeout_ms / 1000)
        except asyncio.TimeoutError:
            return None

    async def close(self) -> None:
        """Cancel echoes that are still in flight."""
        for task in self._pending:
            task.cancel()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self._pending = []
