"""Tests for the command line entry points."""

import argparse
import sys

import pytest

from event_pingpong import __main__ as entry
from event_pingpong.cli import run as run_cli
from event_pingpong.cli import suite as suite_cli
from event_pingpong.cli.options import create_channel_client
from event_pingpong.core.cloud_client import CloudChannelClient
from event_pingpong.core.loopback import LoopbackChannelClient

FAST_ARGS = ["--loopback", "--count", "3", "--interval", "0", "--echo-delay", "0", "--quiet"]


def test_run_against_loopback(monkeypatch, capsys, tmp_path):
    output = tmp_path / "run.tsv"
    monkeypatch.setattr(
        sys, "argv", ["event-pingpong", *FAST_ARGS, "--output", str(output)]
    )

    run_cli.main()

    printed = capsys.readouterr().out
    assert "Events sent/received: 3" in printed
    assert "Time elapsed:" in printed
    assert output.exists()


def test_run_rejects_identical_channels(monkeypatch):
    monkeypatch.setattr(
        sys,
        "argv",
        ["event-pingpong", *FAST_ARGS, "--out-channel", "a", "--in-channel", "a"],
    )

    with pytest.raises(SystemExit) as exc_info:
        run_cli.main()

    assert exc_info.value.code == 1


def test_run_rejects_undersized_events(monkeypatch, capsys):
    monkeypatch.setattr(
        sys, "argv", ["event-pingpong", "--loopback", "--count", "200", "--size", "2"]
    )

    with pytest.raises(SystemExit) as exc_info:
        run_cli.main()

    assert exc_info.value.code == 1
    assert "Error:" in capsys.readouterr().out


def test_run_fails_when_device_never_echoes(monkeypatch, capsys):
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "event-pingpong",
            *FAST_ARGS,
            "--out-channel",
            "unrouted",
            "--in-channel",
            "silent",
            "--timeout",
            "50",
        ],
    )
    # Leave the out -> in pair unrouted so the loopback device never answers
    original = run_cli.create_channel_client
    monkeypatch.setattr(
        run_cli,
        "create_channel_client",
        lambda args, routes=None: original(args),
    )

    with pytest.raises(SystemExit) as exc_info:
        run_cli.main()

    assert exc_info.value.code == 1
    assert "No echo for event 1" in capsys.readouterr().out


def test_suite_against_loopback(monkeypatch, capsys, tmp_path):
    output = tmp_path / "suite.tsv"
    monkeypatch.setattr(
        sys, "argv", ["event-pingpong", *FAST_ARGS, "--output", str(output)]
    )

    suite_cli.main()

    assert "CLOUD EVENTS SUITE RESULTS" in capsys.readouterr().out
    assert len(output.read_text().splitlines()) == 3


def test_dispatch_unknown_command(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["event-pingpong", "bogus"])

    with pytest.raises(SystemExit) as exc_info:
        entry.main()

    assert exc_info.value.code == 1


def test_dispatch_help(monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["event-pingpong", "--help"])

    with pytest.raises(SystemExit) as exc_info:
        entry.main()

    assert exc_info.value.code == 0
    assert "suite" in capsys.readouterr().out


class TestCreateChannelClient:
    def make_args(self, **overrides):
        values = {
            "loopback": False,
            "token": None,
            "api_url": "https://example.invalid",
            "insecure_ssl": False,
            "echo_delay": 0,
            "duplicate_echoes": False,
        }
        values.update(overrides)
        return argparse.Namespace(**values)

    def test_cloud_client_requires_token(self):
        with pytest.raises(ValueError):
            create_channel_client(self.make_args())

    def test_cloud_client(self):
        client = create_channel_client(self.make_args(token="t", insecure_ssl=True))

        assert isinstance(client, CloudChannelClient)
        assert client.api_url == "https://example.invalid"
        assert client.insecure_ssl

    def test_loopback_client_with_extra_route(self):
        client = create_channel_client(
            self.make_args(loopback=True), routes={"ping": "pong"}
        )

        assert isinstance(client, LoopbackChannelClient)
        assert client.routes["ping"] == "pong"
        assert client.routes["devin1"] == "devout1"
