"""Result aggregation and reporting."""

import pandas as pd
from typing import List, Optional

from ..core.models import RunResult, format_elapsed


class ResultAggregator:
    """Aggregates and formats ping-pong results for export."""

    def __init__(self):
        self.results: List[RunResult] = []

    def add_result(self, result: RunResult) -> None:
        """Add a single run result."""
        self.results.append(result)

    def add_results(self, results: List[RunResult]) -> None:
        """Add multiple run results."""
        self.results.extend(results)

    def clear(self) -> None:
        """Clear all results."""
        self.results = []

    def to_dataframe(self) -> pd.DataFrame:
        """Convert results to pandas DataFrame."""
        data = []
        for result in self.results:
            data.append({
                "Test": result.test_name,
                "Device": result.device_id,
                "Out": result.out_channel,
                "In": result.in_channel,
                "Events": result.event_count,
                "Size": result.event_size,
                "Interval_ms": result.event_interval_ms,
                "Elapsed_s": f"{result.elapsed_seconds:.1f}",
                "Events/s": f"{result.events_per_second:.2f}",
                "RTT_avg_ms": f"{result.round_trip_avg_ms:.2f}",
                "RTT_p95_ms": f"{result.round_trip_p95_ms:.2f}",
                "RTT_max_ms": f"{result.round_trip_max_ms:.2f}",
                "Stale": result.stale_echoes,
            })
        return pd.DataFrame(data)

    def exchanges_dataframe(self, result: RunResult) -> pd.DataFrame:
        """Per-exchange timings of a single run."""
        return pd.DataFrame([e.to_dict() for e in result.exchanges or []])

    def to_csv(self, path: str) -> None:
        """Export to CSV file."""
        df = self.to_dataframe()
        df.to_csv(path, index=False)

    def to_tsv(self, path: str) -> None:
        """Export to TSV file."""
        df = self.to_dataframe()
        df.to_csv(path, sep="\t", index=False)

    def get_tsv_string(self) -> str:
        """Get results as TSV string for easy copy/paste to spreadsheet."""
        df = self.to_dataframe()
        return df.to_csv(sep="\t", index=False)

    def print_summary_table(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        """Print formatted summary table to console."""
        if not self.results:
            print("No results to display.")
            return

        print()
        print("=" * 100)
        if title:
            print(title.center(100))
        else:
            print("PING-PONG RESULTS SUMMARY".center(100))
        print("=" * 100)

        if description:
            print(description)
            print("-" * 100)

        df = self.to_dataframe()
        print(df.to_string(index=False))

        print()
        print("=" * 100)
        print("TSV OUTPUT (copy to spreadsheet):")
        print("=" * 100)
        print(self.get_tsv_string())
        print("=" * 100)

    def print_single_result(self, result: RunResult) -> None:
        """Print the short summary of a finished run."""
        print(f"Events sent/received: {result.event_count}")
        print(f"Time elapsed: {format_elapsed(result.elapsed_seconds)}")

    def print_detailed_result(self, result: RunResult) -> None:
        """Print detailed single run result."""
        print()
        print("=" * 60)
        print("PING-PONG RESULTS")
        print("=" * 60)

        print("\nRUN CONFIGURATION")
        print("-" * 30)
        print(f"Test:                {result.test_name}")
        print(f"Device:              {result.device_id}")
        print(f"Channels:            {result.out_channel} -> {result.in_channel}")
        print(f"Event Size:          {result.event_size} bytes")
        print(f"Event Interval:      {result.event_interval_ms} ms")

        print("\nEXCHANGES")
        print("-" * 30)
        print(f"Events Sent/Recv:    {result.event_count}")
        print(f"Stale Echoes:        {result.stale_echoes}")

        print("\nROUND TRIP (ms)")
        print("-" * 30)
        print(f"Average:             {result.round_trip_avg_ms:.2f}")
        print(f"Minimum:             {result.round_trip_min_ms:.2f}")
        print(f"Maximum:             {result.round_trip_max_ms:.2f}")
        print(f"95th Percentile:     {result.round_trip_p95_ms:.2f}")
        print(f"99th Percentile:     {result.round_trip_p99_ms:.2f}")

        print("\nTHROUGHPUT")
        print("-" * 30)
        print(f"Events/Second:       {result.events_per_second:.2f}")
        print(f"Time Elapsed:        {format_elapsed(result.elapsed_seconds)}")

        print("=" * 60)
