"""Chart generation for ping-pong results."""

import matplotlib.pyplot as plt
from datetime import datetime
from typing import Optional

from ..core.models import RunResult


def generate_round_trip_chart(
    result: RunResult,
    output_path: Optional[str] = None,
) -> Optional[str]:
    """
    Generate round-trip charts for a single run.

    Args:
        result: Completed run with its raw exchanges
        output_path: Path to save the chart (auto-generated if None)

    Returns:
        Path to saved chart file, or None if there was nothing to chart
    """
    exchanges = [e for e in result.exchanges or [] if e.round_trip_ms is not None]
    if not exchanges:
        print("No exchanges to chart.")
        return None

    sequence_numbers = [e.sequence_number for e in exchanges]
    round_trips = [e.round_trip_ms for e in exchanges]
    stale = [e.stale_echoes for e in exchanges]

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))
    fig.suptitle(
        f"{result.test_name} - {result.event_count} x {result.event_size} bytes",
        fontsize=14,
        fontweight="bold",
    )

    # Round trip per exchange; exchanges that saw stale echoes in red
    colors = ["red" if s else "green" for s in stale]
    ax1.scatter(sequence_numbers, round_trips, c=colors, s=12)
    ax1.axhline(result.round_trip_avg_ms, color="b", linestyle="--", label="Average")
    ax1.axhline(result.round_trip_p95_ms, color="r", linestyle=":", label="P95")
    ax1.set_xlabel("Sequence Number")
    ax1.set_ylabel("Round Trip (ms)")
    ax1.set_title("Round Trip per Exchange")
    ax1.legend(loc="upper left")
    ax1.grid(True, alpha=0.3)
    ax1.set_ylim(bottom=0)

    ax2.hist(round_trips, bins=min(30, len(round_trips)), color="b", alpha=0.7)
    ax2.set_xlabel("Round Trip (ms)")
    ax2.set_ylabel("Exchanges")
    ax2.set_title("Round Trip Distribution")
    ax2.grid(True, alpha=0.3, axis="y")

    plt.tight_layout()
    plt.subplots_adjust(top=0.88)

    if output_path:
        saved_path = output_path
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        saved_path = f"{result.test_name}_{timestamp}.png"

    plt.savefig(saved_path, dpi=150, bbox_inches="tight")
    print(f"\nChart saved as: {saved_path}")

    plt.close(fig)
    return saved_path
