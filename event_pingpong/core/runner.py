"""Ping-pong runner: paced publish, echo verification and round-trip timing."""

import asyncio
import logging
import time
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from .channel import EventData, RunnerContext
from .errors import EventTimeoutError, PingPongError
from .framing import encode_payload, parse_header
from .models import Exchange, PingPongConfig, RunResult
from .pacing import RateLimiter


class RunnerState(Enum):
    """Where the runner is within the current exchange."""

    IDLE = "idle"
    PACING = "pacing"
    PUBLISHING = "publishing"
    AWAITING_ECHO = "awaiting_echo"
    MATCHED = "matched"
    COMPLETE = "complete"
    ABORTED = "aborted"


class PingPongRunner:
    """
    Runs a fixed number of strictly ordered publish/echo exchanges.

    For each sequence number n the runner waits out the publish interval,
    publishes the framed payload for n on the outbound channel and then reads
    the inbound channel until an echo encoding n arrives. Echoes carrying any
    other number are discarded as stale. A missing echo or a malformed one
    aborts the whole run.
    """

    def __init__(
        self,
        context: RunnerContext,
        config: Optional[PingPongConfig] = None,
        test_name: str = "ping_pong",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        progress_every: int = 50,
    ):
        """
        Initialize the runner.

        Args:
            context: Channel client and device id supplied by the harness
            config: Run parameters (presets if omitted)
            test_name: Label attached to the result
            clock: Monotonic clock in seconds
            sleep: Coroutine used to suspend during pacing
            progress_every: Log progress every N completed exchanges
        """
        self.context = context
        self.config = config or PingPongConfig()
        self.test_name = test_name
        self._clock = clock
        self._sleep = sleep
        self.progress_every = progress_every

        self.state = RunnerState.IDLE
        self.exchanges: List[Exchange] = []
        self.publish_count = 0

        logging.basicConfig(
            level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
        )
        self.logger = logging.getLogger(__name__)

    def _transition(self, state: RunnerState) -> None:
        self.logger.debug(f"{self.test_name}: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, out_channel: str, in_channel: str) -> RunResult:
        """
        Execute the run and return its timing results.

        Args:
            out_channel: Channel the device listens on
            in_channel: Channel the device echoes back on

        Returns:
            RunResult for the completed run

        Raises:
            EventTimeoutError: If an echo does not arrive in time
            EventFormatError: If an echo is malformed
        """
        if out_channel == in_channel:
            raise ValueError("Outbound and inbound channels must be distinct")

        config = self.config
        self.exchanges = []
        self.publish_count = 0
        limiter = RateLimiter(config.event_interval_ms, self._clock, self._sleep)

        self.logger.info(f"Starting ping-pong run {self.test_name}:")
        self.logger.info(f"  Device: {self.context.device_id}")
        self.logger.info(f"  Channels: {out_channel} -> {in_channel}")
        self.logger.info(
            f"  Events: {config.event_count} x {config.event_size} bytes, "
            f"{config.event_interval_ms}ms interval"
        )

        start_datetime = datetime.now()
        start = self._clock()

        try:
            for sequence_number in range(1, config.event_count + 1):
                exchange = await self._run_exchange(
                    sequence_number, out_channel, in_channel, limiter
                )
                self.exchanges.append(exchange)

                if sequence_number % self.progress_every == 0:
                    self.logger.info(
                        f"Completed {sequence_number}/{config.event_count} exchanges "
                        f"({self._clock() - start:.1f}s elapsed)"
                    )
        except PingPongError as e:
            self._transition(RunnerState.ABORTED)
            self.logger.error(f"Run {self.test_name} aborted: {e}")
            raise
        except asyncio.CancelledError:
            self._transition(RunnerState.ABORTED)
            self.logger.error(f"Run {self.test_name} cancelled")
            raise

        elapsed = self._clock() - start
        self._transition(RunnerState.COMPLETE)

        return RunResult.from_exchanges(
            test_name=self.test_name,
            device_id=self.context.device_id,
            out_channel=out_channel,
            in_channel=in_channel,
            config=config,
            exchanges=self.exchanges,
            elapsed_seconds=elapsed,
            start_timestamp=start_datetime,
            end_timestamp=datetime.now(),
        )

    async def _run_exchange(
        self,
        sequence_number: int,
        out_channel: str,
        in_channel: str,
        limiter: RateLimiter,
    ) -> Exchange:
        """Pace, publish and wait for the matching echo of one exchange."""
        config = self.config

        self._transition(RunnerState.PACING)
        await limiter.wait()

        self._transition(RunnerState.PUBLISHING)
        payload = encode_payload(
            sequence_number, config.event_size, config.separator, config.filler
        )
        await self.context.channel_client.publish_event(
            name=self.context.event_name(out_channel),
            data=payload,
            retries=config.publish_retries,
        )
        self.publish_count += 1
        exchange = Exchange(
            sequence_number=sequence_number,
            payload=payload,
            publish_timestamp=limiter.mark(),
        )

        self._transition(RunnerState.AWAITING_ECHO)
        while True:
            data = await self._receive(in_channel, sequence_number)
            received = parse_header(
                data, config.event_size, config.separator, expected=sequence_number
            )
            if received == sequence_number:
                exchange.echo_timestamp = self._clock()
                self._transition(RunnerState.MATCHED)
                return exchange

            exchange.stale_echoes += 1
            self.logger.debug(
                f"Discarding stale echo {received} while waiting for {sequence_number}"
            )

    async def _receive(self, in_channel: str, sequence_number: int) -> EventData:
        timeout_ms = self.config.event_timeout_ms
        try:
            data = await self.context.channel_client.receive_event(in_channel, timeout_ms)
        except asyncio.TimeoutError:
            data = None

        if data is None:
            raise EventTimeoutError(
                f"No echo for event {sequence_number} on '{in_channel}' "
                f"within {timeout_ms}ms",
                sequence_number,
            )
        return data
