"""CLI for a single ping-pong run."""

import argparse
import asyncio
import sys

from ..core.channel import RunnerContext, resolve_device_id
from ..core.errors import RunTimeoutError
from ..core.models import PingPongConfig, RunResult
from ..core.runner import PingPongRunner
from ..results.aggregator import ResultAggregator
from ..results.charts import generate_round_trip_chart
from .options import (
    add_connection_arguments,
    add_run_arguments,
    configure_logging,
    create_channel_client,
    create_config,
)


async def run_ping_pong(
    args: argparse.Namespace, config: PingPongConfig
) -> RunResult:
    """Open the client, subscribe, and run one ping-pong test within the run timeout."""
    routes = {args.out_channel: args.in_channel}
    async with create_channel_client(args, routes=routes) as client:
        device_id = args.device_id or await resolve_device_id(client)
        await client.subscribe(args.in_channel)

        runner = PingPongRunner(
            RunnerContext(client, device_id), config, test_name=args.name
        )
        try:
            return await asyncio.wait_for(
                runner.run(args.out_channel, args.in_channel), config.run_timeout_seconds
            )
        except asyncio.TimeoutError:
            raise RunTimeoutError(
                f"Run did not finish within {config.run_timeout_ms}ms"
            ) from None


def main():
    """Main entry point for the run CLI."""
    parser = argparse.ArgumentParser(
        description="Ping-pong events with a device and measure round-trip throughput",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 200 events against the first device of the account
  python -m event_pingpong run --token $PARTICLE_ACCESS_TOKEN \\
      --out-channel devin1 --in-channel devout1

  # Quick self-check against the in-process echo device
  python -m event_pingpong run --loopback --count 20 --interval 10
        """,
    )

    parser.add_argument(
        "--out-channel",
        type=str,
        default="devin1",
        help="Channel the device listens on (default: devin1)",
    )
    parser.add_argument(
        "--in-channel",
        type=str,
        default="devout1",
        help="Channel the device echoes back on (default: devout1)",
    )
    parser.add_argument(
        "--device-id",
        type=str,
        help="Device to test (default: first device in the registry)",
    )
    parser.add_argument(
        "--name",
        type=str,
        default="ping_pong",
        help="Test name used in reports (default: ping_pong)",
    )
    add_connection_arguments(parser)
    add_run_arguments(parser)

    # Output options
    parser.add_argument(
        "--output",
        type=str,
        help="Output TSV file path for results",
    )
    parser.add_argument(
        "--chart",
        type=str,
        help="Output chart PNG path (no chart unless given)",
    )

    args = parser.parse_args()
    configure_logging(args.quiet)

    if args.out_channel == args.in_channel:
        print("Error: --out-channel and --in-channel must be different")
        sys.exit(1)

    try:
        config = create_config(args)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"\nPing-pong: {args.out_channel} -> {args.in_channel}")
    print("=" * 60)

    try:
        result = asyncio.run(run_ping_pong(args, config))

        aggregator = ResultAggregator()
        aggregator.print_single_result(result)
        aggregator.print_detailed_result(result)

        if args.output:
            aggregator.add_result(result)
            aggregator.to_tsv(args.output)
            print(f"\nResults saved to: {args.output}")

        if args.chart:
            generate_round_trip_chart(result, output_path=args.chart)

    except KeyboardInterrupt:
        print("\nRun interrupted by user")
        sys.exit(130)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
