"""Main entry point for the event_pingpong package.

Usage:
    python -m event_pingpong run --out-channel devin1 --in-channel devout1
    python -m event_pingpong run --loopback --count 20 --interval 10
    python -m event_pingpong suite --output suite.tsv
"""

import sys


def main():
    """Main entry point that dispatches to subcommands."""
    if len(sys.argv) < 2:
        print_help()
        sys.exit(1)

    command = sys.argv[1]

    if command in ["-h", "--help", "help"]:
        print_help()
        sys.exit(0)

    # Remove the command from argv so subcommand parsers see correct args
    sys.argv = [sys.argv[0]] + sys.argv[2:]

    if command == "run":
        from .cli.run import main as run_main

        run_main()
    elif command == "suite":
        from .cli.suite import main as suite_main

        suite_main()
    else:
        print(f"Unknown command: {command}")
        print_help()
        sys.exit(1)


def print_help():
    """Print help message."""
    print(
        """Cloud Event Ping-Pong Benchmark

Usage: python -m event_pingpong <command> [options]

Commands:
    run      Run one ping-pong test over an outbound/inbound channel pair
    suite    Run the long-running cloud events suite (old and new API)

Examples:
    # 200 events of 1024 bytes, 250ms apart, against the first device
    export PARTICLE_ACCESS_TOKEN=...
    python -m event_pingpong run --out-channel devin1 --in-channel devout1

    # Self-check against the in-process echo device
    python -m event_pingpong run --loopback --count 20 --interval 10

    # Full suite with TSV export
    python -m event_pingpong suite --output suite.tsv

For command-specific help:
    python -m event_pingpong <command> --help
"""
    )


if __name__ == "__main__":
    main()
