"""Shared fixtures for ping-pong tests."""

import asyncio
import time
from typing import Callable, List, Optional, Tuple

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from event_pingpong.core.channel import ChannelClient, EventData  # noqa: E402
from event_pingpong.core.models import PingPongConfig  # noqa: E402


class ScriptedChannelClient(ChannelClient):
    """
    Fake collaborator whose echoes are produced by a script.

    ``echo(n, payload)`` returns the list of events delivered on the inbound
    channel after event n is published.
    """

    def __init__(
        self,
        echo: Callable[[int, str], List[EventData]],
        devices: Optional[List[str]] = None,
    ):
        self.echo = echo
        self.devices = ["dev0"] if devices is None else devices
        self.published: List[Tuple[str, str, int]] = []
        self.publish_times: List[float] = []
        self.log: List[Tuple[str, int]] = []
        self._inbound: Optional[asyncio.Queue] = None

    def _queue(self) -> asyncio.Queue:
        if self._inbound is None:
            self._inbound = asyncio.Queue()
        return self._inbound

    async def list_devices(self) -> List[str]:
        return list(self.devices)

    async def publish_event(self, name: str, data: str, retries: int = 3) -> None:
        sequence_number = int(data.split(" ", 1)[0])
        self.published.append((name, data, retries))
        self.publish_times.append(time.monotonic())
        self.log.append(("publish", sequence_number))
        for event in self.echo(sequence_number, data):
            self._queue().put_nowait(event)

    async def receive_event(self, channel: str, timeout_ms: int) -> Optional[EventData]:
        try:
            data = await asyncio.wait_for(self._queue().get(), timeout_ms / 1000)
        except asyncio.TimeoutError:
            return None
        header = data.split(b" " if isinstance(data, bytes) else " ", 1)[0]
        if header.isdigit():
            self.log.append(("receive", int(header)))
        return data


class FakeClock:
    """Manually advanced clock whose sleep only moves time forward."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def fast_config():
    """Small, quick run parameters."""
    return PingPongConfig(
        event_count=5,
        event_interval_ms=0,
        event_timeout_ms=500,
        event_size=64,
        run_timeout_ms=10000,
    )


@pytest.fixture
def fake_clock():
    return FakeClock()
