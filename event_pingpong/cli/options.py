"""Command line options shared by the run and suite commands."""

import argparse
import logging
import os

from ..core.channel import ChannelClient
from ..core.cloud_client import CloudChannelClient
from ..core.loopback import LoopbackChannelClient
from ..core.models import PingPongConfig
from ..presets import (
    CLOUD_DEFAULTS,
    EVENT_COUNT,
    EVENT_INTERVAL_MS,
    EVENT_SIZE,
    EVENT_TIMEOUT_MS,
    LOOPBACK_DEFAULTS,
    PUBLISH_RETRIES,
    RUN_TIMEOUT_MS,
)


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments selecting and configuring the channel client."""
    parser.add_argument(
        "--api-url",
        type=str,
        default=os.environ.get(CLOUD_DEFAULTS["api_url_env_var"], CLOUD_DEFAULTS["api_url"]),
        help=f"Cloud API URL (default: ${CLOUD_DEFAULTS['api_url_env_var']} or {CLOUD_DEFAULTS['api_url']})",
    )
    parser.add_argument(
        "--token",
        type=str,
        default=os.environ.get(CLOUD_DEFAULTS["token_env_var"]),
        help=f"API access token (default: ${CLOUD_DEFAULTS['token_env_var']})",
    )
    parser.add_argument(
        "--insecure-ssl",
        action="store_true",
        help="Disable TLS certificate verification (for self-signed certs)",
    )
    parser.add_argument(
        "--loopback",
        action="store_true",
        help="Run against an in-process echo device instead of the cloud",
    )
    parser.add_argument(
        "--echo-delay",
        type=int,
        default=LOOPBACK_DEFAULTS["echo_delay_ms"],
        help=f"Loopback echo delay in ms (default: {LOOPBACK_DEFAULTS['echo_delay_ms']})",
    )
    parser.add_argument(
        "--duplicate-echoes",
        action="store_true",
        help="Loopback device replays its previous echo before each new one",
    )


def add_run_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments overriding the ping-pong presets."""
    parser.add_argument(
        "--count",
        type=int,
        default=EVENT_COUNT,
        help=f"Number of events to exchange (default: {EVENT_COUNT})",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=EVENT_INTERVAL_MS,
        help=f"Minimum interval between publishes in ms (default: {EVENT_INTERVAL_MS})",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=EVENT_TIMEOUT_MS,
        help=f"Echo timeout in ms (default: {EVENT_TIMEOUT_MS})",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=EVENT_SIZE,
        help=f"Event size in bytes (default: {EVENT_SIZE})",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=PUBLISH_RETRIES,
        help=f"Publish attempts per event (default: {PUBLISH_RETRIES})",
    )
    parser.add_argument(
        "--run-timeout",
        type=int,
        default=RUN_TIMEOUT_MS,
        help=f"Budget for a whole run in ms (default: {RUN_TIMEOUT_MS})",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output (only show final results)",
    )


def configure_logging(quiet: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def create_config(args: argparse.Namespace) -> PingPongConfig:
    """Build the run configuration from parsed arguments."""
    return PingPongConfig(
        event_count=args.count,
        event_interval_ms=args.interval,
        event_timeout_ms=args.timeout,
        event_size=args.size,
        publish_retries=args.retries,
        run_timeout_ms=args.run_timeout,
    )


def create_channel_client(args: argparse.Namespace, routes=None) -> ChannelClient:
    """
    Build the channel client selected on the command line.

    Args:
        args: Parsed arguments
        routes: Extra loopback routes (outbound channel -> echo channel)

    Returns:
        A loopback client, or a cloud client that still needs to be opened
    """
    if args.loopback:
        loopback_routes = dict(LOOPBACK_DEFAULTS["routes"])
        loopback_routes.update(routes or {})
        return LoopbackChannelClient(
            routes=loopback_routes,
            device_id=LOOPBACK_DEFAULTS["device_id"],
            echo_delay_ms=args.echo_delay,
            duplicate_echoes=args.duplicate_echoes,
        )

    if not args.token:
        raise ValueError(
            f"An access token is required: pass --token or set ${CLOUD_DEFAULTS['token_env_var']}"
        )
    return CloudChannelClient(
        access_token=args.token,
        api_url=args.api_url,
        event_ttl_seconds=CLOUD_DEFAULTS["event_ttl_seconds"],
        connect_timeout_seconds=CLOUD_DEFAULTS["connect_timeout_seconds"],
        insecure_ssl=args.insecure_ssl,
    )
