"""Tests for the cloud events suite against the loopback device."""

from dataclasses import replace

import pytest

from event_pingpong.core.errors import DeviceRegistryError, RunTimeoutError
from event_pingpong.core.loopback import LoopbackChannelClient
from event_pingpong.presets import LOOPBACK_DEFAULTS, PING_PONG_TESTS
from event_pingpong.suites.cloud_events import CloudEventSuite


def make_loopback(**kwargs):
    return LoopbackChannelClient(
        LOOPBACK_DEFAULTS["routes"], device_id=LOOPBACK_DEFAULTS["device_id"], **kwargs
    )


class TestCloudEventSuite:
    @pytest.mark.asyncio
    async def test_runs_old_and_new_api_tests(self, fast_config, capsys):
        async with make_loopback() as client:
            suite = CloudEventSuite(client, fast_config)
            results = await suite.run()

        assert [r.test_name for r in results] == [name for name, _, _ in PING_PONG_TESTS]
        assert [(r.out_channel, r.in_channel) for r in results] == [
            ("devin1", "devout1"),
            ("devin2", "devout2"),
        ]
        assert all(r.device_id == "loopback0" for r in results)
        assert len(suite.get_aggregator().results) == 2

        output = capsys.readouterr().out
        assert output.count("Events sent/received: 5") == 2
        assert "CLOUD EVENTS SUITE RESULTS" in output

    @pytest.mark.asyncio
    async def test_run_timeout_aborts_the_test(self, fast_config):
        config = replace(fast_config, event_count=50, event_interval_ms=20, run_timeout_ms=100)

        async with make_loopback() as client:
            suite = CloudEventSuite(client, config)
            with pytest.raises(RunTimeoutError) as exc_info:
                await suite.run()

        assert "02_ping_pong_old_api" in str(exc_info.value)
        assert suite.get_aggregator().results == []

    @pytest.mark.asyncio
    async def test_no_devices(self, fast_config):
        class EmptyRegistry(LoopbackChannelClient):
            async def list_devices(self):
                return []

        client = EmptyRegistry(LOOPBACK_DEFAULTS["routes"])
        suite = CloudEventSuite(client, fast_config)

        with pytest.raises(DeviceRegistryError):
            await suite.run()

    @pytest.mark.asyncio
    async def test_run_single_test_connects_first(self, fast_config):
        async with make_loopback(echo_delay_ms=1) as client:
            suite = CloudEventSuite(client, fast_config)
            result = await suite.run_test("adhoc", "devin2", "devout2")

        assert suite.device_id == "loopback0"
        assert result.test_name == "adhoc"
        assert result.event_count == 5
