"""Long-running cloud events suite orchestration."""

import asyncio
import logging
from typing import List, Optional, Tuple

from ..core.channel import ChannelClient, RunnerContext, resolve_device_id
from ..core.errors import RunTimeoutError
from ..core.models import PingPongConfig, RunResult
from ..core.runner import PingPongRunner
from ..presets import PING_PONG_TESTS
from ..results.aggregator import ResultAggregator


class CloudEventSuite:
    """
    Runs the cloud events ping-pong tests against the first provisioned device.

    The suite plays the part of the test harness around each runner:
    - Resolving the device and subscribing to every inbound channel up front
    - Bounding each ping-pong run by the configured run timeout
    - Aggregating results into a single summary table
    """

    def __init__(
        self,
        channel_client: ChannelClient,
        config: Optional[PingPongConfig] = None,
        tests: Optional[List[Tuple[str, str, str]]] = None,
    ):
        """
        Initialize the suite.

        Args:
            channel_client: Client used for the registry, publishing and receiving
            config: Run parameters shared by every test
            tests: (test name, outbound channel, inbound channel) in run order
        """
        self.channel_client = channel_client
        self.config = config or PingPongConfig()
        self.tests = tests or PING_PONG_TESTS
        self.device_id: Optional[str] = None
        self.aggregator = ResultAggregator()

        logging.basicConfig(
            level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
        )
        self.logger = logging.getLogger(__name__)

    async def connect_and_subscribe(self) -> str:
        """Resolve the device under test and subscribe to all inbound channels."""
        self.device_id = await resolve_device_id(self.channel_client)
        self.logger.info(f"Device under test: {self.device_id}")

        for _, _, in_channel in self.tests:
            await self.channel_client.subscribe(in_channel)
        return self.device_id

    async def run_test(self, test_name: str, out_channel: str, in_channel: str) -> RunResult:
        """Run one ping-pong test within the run timeout."""
        if self.device_id is None:
            await self.connect_and_subscribe()

        runner = PingPongRunner(
            RunnerContext(self.channel_client, self.device_id),
            self.config,
            test_name=test_name,
        )
        try:
            return await asyncio.wait_for(
                runner.run(out_channel, in_channel), self.config.run_timeout_seconds
            )
        except asyncio.TimeoutError:
            raise RunTimeoutError(
                f"{test_name} did not finish within {self.config.run_timeout_ms}ms "
                f"({len(runner.exchanges)}/{self.config.event_count} exchanges done)"
            ) from None

    async def run(self) -> List[RunResult]:
        """
        Run every test of the suite in order, stopping at the first failure.

        Returns:
            List of run results
        """
        self.logger.info("=" * 60)
        self.logger.info("Starting Cloud Events Suite (long running)")
        self.logger.info("=" * 60)
        self.logger.info(f"  Tests: {[name for name, _, _ in self.tests]}")
        self.logger.info(
            f"  Events per test: {self.config.event_count} x {self.config.event_size} bytes"
        )
        self.logger.info(f"  Event interval: {self.config.event_interval_ms}ms")
        self.logger.info("=" * 60)

        self.aggregator.clear()
        results = []

        await self.connect_and_subscribe()

        for test_name, out_channel, in_channel in self.tests:
            self.logger.info("")
            self.logger.info("=" * 50)
            self.logger.info(f" {test_name}: {out_channel} -> {in_channel}")
            self.logger.info("=" * 50)

            result = await self.run_test(test_name, out_channel, in_channel)
            results.append(result)
            self.aggregator.add_result(result)
            self.aggregator.print_single_result(result)

        self.aggregator.print_summary_table(
            title="CLOUD EVENTS SUITE RESULTS",
            description=(
                f"Device: {self.device_id} | {self.config.event_count} events x "
                f"{self.config.event_size} bytes | {self.config.event_interval_ms}ms interval"
            ),
        )

        return results

    def get_aggregator(self) -> ResultAggregator:
        """Get the result aggregator for additional processing."""
        return self.aggregator
