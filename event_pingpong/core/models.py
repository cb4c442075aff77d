"""Data models for ping-pong benchmarking."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from .framing import check_framing_chars
from ..presets import (
    EVENT_COUNT,
    EVENT_FILLER,
    EVENT_INTERVAL_MS,
    EVENT_SEPARATOR,
    EVENT_SIZE,
    EVENT_TIMEOUT_MS,
    PUBLISH_RETRIES,
    RUN_TIMEOUT_MS,
)


def _calculate_percentile(values: List[float], percentile: float) -> float:
    """Calculate percentile value from a list."""
    if not values:
        return 0.0
    sorted_values = sorted(values)
    index = int(len(sorted_values) * percentile / 100)
    index = min(index, len(sorted_values) - 1)
    return sorted_values[index]


def format_elapsed(seconds: float) -> str:
    """Format elapsed run time rounded to a tenth of a second."""
    # Halves round up
    return f"{math.floor(seconds * 10 + 0.5) / 10:.1f}s"


@dataclass
class PingPongConfig:
    """Configuration for a single ping-pong run."""

    event_count: int = EVENT_COUNT
    event_interval_ms: int = EVENT_INTERVAL_MS
    event_timeout_ms: int = EVENT_TIMEOUT_MS
    event_size: int = EVENT_SIZE
    publish_retries: int = PUBLISH_RETRIES

    separator: str = EVENT_SEPARATOR
    filler: str = EVENT_FILLER

    # Whole-run budget, enforced by the harness around the runner
    run_timeout_ms: int = RUN_TIMEOUT_MS

    def __post_init__(self):
        if self.event_count < 1:
            raise ValueError("event_count must be positive")
        if self.event_interval_ms < 0:
            raise ValueError("event_interval_ms must not be negative")
        if self.event_timeout_ms <= 0:
            raise ValueError("event_timeout_ms must be positive")
        if self.run_timeout_ms <= 0:
            raise ValueError("run_timeout_ms must be positive")
        if self.publish_retries < 1:
            raise ValueError("publish_retries must be at least 1")
        check_framing_chars(self.separator, self.filler)
        # Largest header is "<event_count><separator>"
        if len(str(self.event_count)) + 1 > self.event_size:
            raise ValueError(
                f"event_size {self.event_size} cannot hold sequence numbers "
                f"up to {self.event_count}"
            )

    @property
    def event_timeout_seconds(self) -> float:
        return self.event_timeout_ms / 1000

    @property
    def run_timeout_seconds(self) -> float:
        return self.run_timeout_ms / 1000


@dataclass
class Exchange:
    """One publish and the echo that matched it."""

    sequence_number: int
    payload: str
    publish_timestamp: float
    echo_timestamp: Optional[float] = None
    stale_echoes: int = 0

    @property
    def round_trip_ms(self) -> Optional[float]:
        if self.echo_timestamp is None:
            return None
        return (self.echo_timestamp - self.publish_timestamp) * 1000

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "sequence_number": self.sequence_number,
            "publish_timestamp": self.publish_timestamp,
            "echo_timestamp": self.echo_timestamp,
            "round_trip_ms": self.round_trip_ms,
            "stale_echoes": self.stale_echoes,
        }


@dataclass
class RunResult:
    """Results from a completed ping-pong run."""

    # Test identification
    test_name: str
    device_id: str
    out_channel: str
    in_channel: str

    # Run parameters
    event_count: int
    event_size: int
    event_interval_ms: int

    # Timing
    elapsed_seconds: float
    events_per_second: float

    # Round-trip metrics (milliseconds)
    round_trip_avg_ms: float
    round_trip_min_ms: float
    round_trip_max_ms: float
    round_trip_p95_ms: float
    round_trip_p99_ms: float

    # Echoes discarded because they did not match the awaited number
    stale_echoes: int

    start_timestamp: Optional[datetime] = None
    end_timestamp: Optional[datetime] = None

    # Raw data for debugging
    exchanges: Optional[List[Exchange]] = field(default=None, repr=False)

    @classmethod
    def from_exchanges(
        cls,
        test_name: str,
        device_id: str,
        out_channel: str,
        in_channel: str,
        config: PingPongConfig,
        exchanges: List[Exchange],
        elapsed_seconds: float,
        start_timestamp: Optional[datetime] = None,
        end_timestamp: Optional[datetime] = None,
    ) -> "RunResult":
        """Calculate aggregate metrics from the completed exchanges."""
        round_trips = [e.round_trip_ms for e in exchanges if e.round_trip_ms is not None]
        if round_trips:
            rtt_avg = sum(round_trips) / len(round_trips)
            rtt_min = min(round_trips)
            rtt_max = max(round_trips)
            rtt_p95 = _calculate_percentile(round_trips, 95)
            rtt_p99 = _calculate_percentile(round_trips, 99)
        else:
            rtt_avg = rtt_min = rtt_max = rtt_p95 = rtt_p99 = 0.0

        events_per_second = len(exchanges) / elapsed_seconds if elapsed_seconds > 0 else 0.0

        return cls(
            test_name=test_name,
            device_id=device_id,
            out_channel=out_channel,
            in_channel=in_channel,
            event_count=len(exchanges),
            event_size=config.event_size,
            event_interval_ms=config.event_interval_ms,
            elapsed_seconds=elapsed_seconds,
            events_per_second=events_per_second,
            round_trip_avg_ms=rtt_avg,
            round_trip_min_ms=rtt_min,
            round_trip_max_ms=rtt_max,
            round_trip_p95_ms=rtt_p95,
            round_trip_p99_ms=rtt_p99,
            stale_echoes=sum(e.stale_echoes for e in exchanges),
            start_timestamp=start_timestamp,
            end_timestamp=end_timestamp,
            exchanges=exchanges,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "test_name": self.test_name,
            "device_id": self.device_id,
            "out_channel": self.out_channel,
            "in_channel": self.in_channel,
            "event_count": self.event_count,
            "event_size": self.event_size,
            "event_interval_ms": self.event_interval_ms,
            "elapsed_seconds": self.elapsed_seconds,
            "events_per_second": self.events_per_second,
            "round_trip_avg_ms": self.round_trip_avg_ms,
            "round_trip_min_ms": self.round_trip_min_ms,
            "round_trip_max_ms": self.round_trip_max_ms,
            "round_trip_p95_ms": self.round_trip_p95_ms,
            "round_trip_p99_ms": self.round_trip_p99_ms,
            "stale_echoes": self.stale_echoes,
        }
