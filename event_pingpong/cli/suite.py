"""CLI for the long-running cloud events suite."""

import argparse
import asyncio
import sys
from typing import List

from ..core.models import PingPongConfig, RunResult
from ..presets import PING_PONG_TESTS
from ..suites.cloud_events import CloudEventSuite
from .options import (
    add_connection_arguments,
    add_run_arguments,
    configure_logging,
    create_channel_client,
    create_config,
)


async def run_suite(
    args: argparse.Namespace, config: PingPongConfig, suite_holder: List[CloudEventSuite]
) -> List[RunResult]:
    """Open the client and run every suite test."""
    async with create_channel_client(args) as client:
        suite = CloudEventSuite(client, config, tests=PING_PONG_TESTS)
        suite_holder.append(suite)
        return await suite.run()


def main():
    """Main entry point for the suite CLI."""
    parser = argparse.ArgumentParser(
        description="Cloud events (long running): old and new API ping-pong tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full suite against the first device of the account
  python -m event_pingpong suite --token $PARTICLE_ACCESS_TOKEN --output suite.tsv

  # Exercise the suite against the in-process echo device
  python -m event_pingpong suite --loopback --duplicate-echoes --count 50 --interval 20
        """,
    )
    add_connection_arguments(parser)
    add_run_arguments(parser)
    parser.add_argument(
        "--output",
        type=str,
        help="Output TSV file path for results",
    )

    args = parser.parse_args()
    configure_logging(args.quiet)

    try:
        config = create_config(args)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    suite_holder: List[CloudEventSuite] = []

    try:
        asyncio.run(run_suite(args, config, suite_holder))

        if args.output:
            suite_holder[0].get_aggregator().to_tsv(args.output)
            print(f"\nResults saved to: {args.output}")

    except KeyboardInterrupt:
        print("\nSuite interrupted by user")
        if suite_holder and suite_holder[0].aggregator.results:
            suite_holder[0].aggregator.print_summary_table(
                title="PARTIAL SUITE RESULTS (interrupted)"
            )
        sys.exit(130)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
