"""Cloud API channel client: device registry, event publishing and event streams."""

import aiohttp
import asyncio
import json
import logging
import ssl
from typing import Dict, List, Optional, Tuple, Union

from .channel import ChannelClient, EventData
from .errors import DeviceRegistryError, PublishError, SubscriptionError


class ServerSentEventParser:
    """Incremental decoder for a ``text/event-stream`` body, one line at a time."""

    def __init__(self):
        self._event: Optional[str] = None
        self._data: List[str] = []

    def feed_line(self, line: str) -> Optional[Tuple[str, str]]:
        """
        Consume one line of the stream.

        Returns:
            (event name, data) when the line completes an event, else None
        """
        line = line.rstrip("\r\n")
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return None

        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            self._event = value
        elif field == "data":
            self._data.append(value)
        return None

    def _dispatch(self) -> Optional[Tuple[str, str]]:
        event, data = self._event, self._data
        self._event, self._data = None, []
        if not data:
            return None
        return (event or "message", "\n".join(data))


class CloudChannelClient(ChannelClient):
    """
    Channel client for a Particle-style Cloud REST API.

    Events are published with ``POST /v1/devices/events`` and received from the
    ``GET /v1/devices/events/<name>`` server-sent event stream. Inbound channels
    must be subscribed with ``subscribe()`` before a run reads from them.
    """

    def __init__(
        self,
        access_token: str,
        api_url: str = "https://api.particle.io",
        event_ttl_seconds: int = 60,
        connect_timeout_seconds: int = 30,
        insecure_ssl: bool = False,
    ):
        """
        Initialize the cloud client.

        Args:
            access_token: API bearer token
            api_url: Base URL of the cloud API
            event_ttl_seconds: TTL attached to published events
            connect_timeout_seconds: Socket connect timeout
            insecure_ssl: Disable TLS certificate verification
        """
        self.access_token = access_token
        self.api_url = api_url.rstrip("/")
        self.event_ttl_seconds = event_ttl_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self.insecure_ssl = insecure_ssl

        self._session: Optional[aiohttp.ClientSession] = None
        self._ssl_ctx = self._create_ssl_context()
        self._queues: Dict[str, asyncio.Queue] = {}
        self._streams: Dict[str, asyncio.Task] = {}

        logging.basicConfig(
            level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
        )
        self.logger = logging.getLogger(__name__)

    def _create_ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """Create SSL context if insecure mode is enabled."""
        if self.insecure_ssl:
            ctx = ssl.create_default_context()
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
            return ctx
        return True

    def _url(self, path: str) -> str:
        return f"{self.api_url}{path}"

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Client is not open. Use 'async with' or call open() first.")
        return self._session

    async def open(self) -> None:
        """Create the HTTP session."""
        if self._session is not None:
            return
        timeout = aiohttp.ClientTimeout(
            total=None, sock_connect=self.connect_timeout_seconds
        )
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            headers={"Authorization": f"Bearer {self.access_token}"},
        )

    async def close(self) -> None:
        """Stop all event streams and close the HTTP session."""
        for task in self._streams.values():
            task.cancel()
        if self._streams:
            await asyncio.gather(*self._streams.values(), return_exceptions=True)
        self._streams = {}

        if self._session is not None:
            await self._session.close()
            self._session = None

    async def list_devices(self) -> List[str]:
        async with self.session.get(self._url("/v1/devices"), ssl=self._ssl_ctx) as response:
            text = await response.text()
            if response.status != 200:
                raise DeviceRegistryError(
                    f"Listing devices failed: HTTP {response.status}: {text[:200]}"
                )

        try:
            devices = json.loads(text)
        except ValueError as e:
            raise DeviceRegistryError(f"Invalid device list response: {e}") from e

        if not isinstance(devices, list):
            raise DeviceRegistryError("Invalid device list response: expected a list")
        return [d["id"] for d in devices if isinstance(d, dict) and d.get("id")]

    async def publish_event(self, name: str, data: str, retries: int = 3) -> None:
        attempts = max(retries, 1)
        form = {
            "name": name,
            "data": data,
            "private": "true",
            "ttl": str(self.event_ttl_seconds),
        }
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                async with self.session.post(
                    self._url("/v1/devices/events"), data=form, ssl=self._ssl_ctx
                ) as response:
                    text = await response.text()
                    if response.status == 200:
                        return
                    last_error = f"HTTP {response.status}: {text[:200]}"
            except aiohttp.ClientError as e:
                last_error = str(e) or type(e).__name__

            self.logger.warning(
                f"Publishing {name} failed (attempt {attempt}/{attempts}): {last_error}"
            )

        raise PublishError(f"Failed to publish {name} after {attempts} attempts: {last_error}")

    async def subscribe(self, channel: str) -> None:
        """Open the event stream for ``channel`` and start queueing its events.

        A stream that has ended is reopened.
        """
        stream = self._streams.get(channel)
        if stream is not None and not stream.done():
            return

        response = await self.session.get(
            self._url(f"/v1/devices/events/{channel}"),
            ssl=self._ssl_ctx,
            headers={"Accept": "text/event-stream"},
        )
        if response.status != 200:
            text = await response.text()
            response.release()
            raise SubscriptionError(
                f"Subscribing to {channel} failed: HTTP {response.status}: {text[:200]}"
            )

        self._queues.setdefault(channel, asyncio.Queue())
        self._streams[channel] = asyncio.create_task(self._read_stream(channel, response))
        self.logger.info(f"Subscribed to {channel}")

    async def _read_stream(self, channel: str, response: aiohttp.ClientResponse) -> None:
        parser = ServerSentEventParser()
        queue = self._queues[channel]
        try:
            async for raw_line in response.content:
                event = parser.feed_line(raw_line.decode("utf-8", errors="replace"))
                if event is None:
                    continue
                name, data = event
                # Subscriptions match by prefix; keep exact names only
                if name != channel:
                    continue
                try:
                    body = json.loads(data)
                except ValueError:
                    self.logger.warning(f"Ignoring undecodable event on {channel}: {data[:100]}")
                    continue
                if not isinstance(body, dict):
                    self.logger.warning(f"Ignoring non-object event on {channel}: {data[:100]}")
                    continue
                queue.put_nowait(body.get("data") or "")
            self.logger.warning(f"Event stream for {channel} closed by server")
        except aiohttp.ClientError as e:
            self.logger.warning(f"Event stream for {channel} failed: {e}")
        finally:
            response.release()

    def _stream_closed(self, channel: str, stream: asyncio.Task) -> SubscriptionError:
        reason = "closed"
        if not stream.cancelled() and stream.exception() is not None:
            reason = f"failed: {stream.exception()}"
        return SubscriptionError(f"Event stream for {channel} {reason}; resubscribe to continue")

    async def receive_event(self, channel: str, timeout_ms: int) -> Optional[EventData]:
        queue = self._queues.get(channel)
        stream = self._streams.get(channel)
        if queue is None or stream is None:
            raise SubscriptionError(f"Channel {channel} is not subscribed")

        # Events queued before the stream ended are still delivered
        if not queue.empty():
            return queue.get_nowait()
        if stream.done():
            raise self._stream_closed(channel, stream)

        getter = asyncio.ensure_future(queue.get())
        try:
            done, _ = await asyncio.wait(
                {getter, stream}, timeout=timeout_ms / 1000, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            if not getter.done():
                getter.cancel()
        if getter in done:
            return getter.result()

        if not queue.empty():
            return queue.get_nowait()
        if stream in done:
            raise self._stream_closed(channel, stream)
        return None
