"""
Network measurement statistics.

Pure functions and lightweight dataclasses -- no I/O, no side effects.
Everything here is deterministic and easy to unit-test.
"""
from __future__ import annotations

import statistics
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .latency import Sample


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AggregateResult:
    """Latency statistics for one complete probe round.

    Built once from the full sample sequence; never mutated afterwards.
    """

    samples: Tuple[Sample, ...] = field(default_factory=tuple)
    packet_loss: float = 1.0
    jitter: float = 0.0
    avg: float = 0.0

    @property
    def latencies(self) -> List[float]:
        """Successful latencies in arrival order."""
        return [s.latency_ms for s in self.samples if s.ok]

    @property
    def succeeded(self) -> int:
        return sum(1 for s in self.samples if s.ok)

    @property
    def all_failed(self) -> bool:
        return self.succeeded == 0

    def to_dict(self) -> dict:
        return {
            "samples": [round(v, 3) for v in self.latencies],
            "attempted": len(self.samples),
            "packet_loss": round(self.packet_loss, 4),
            "jitter_ms": round(self.jitter, 3),
            "avg_ms": round(self.avg, 3),
        }


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate(
    samples: Sequence[Sample],
    total_attempted: Optional[int] = None,
) -> AggregateResult:
    """
    Reduce an ordered sequence of samples to average, jitter and loss.

    Failed samples only count towards packet loss.  Jitter is taken over
    consecutive *successful* samples in the order given.  When nothing
    succeeded the result is ``avg=0, jitter=0, packet_loss=1``.
    """
    ordered = tuple(samples)
    if total_attempted is None:
        total_attempted = len(ordered)

    latencies = [s.latency_ms for s in ordered if s.ok]
    if total_attempted < len(latencies):
        raise ValueError(
            f"total_attempted ({total_attempted}) is smaller than the "
            f"number of successful samples ({len(latencies)})"
        )

    if not latencies:
        return AggregateResult(samples=ordered, packet_loss=1.0, jitter=0.0, avg=0.0)

    failed = total_attempted - len(latencies)
    return AggregateResult(
        samples=ordered,
        packet_loss=failed / total_attempted,
        jitter=calculate_jitter(latencies),
        avg=statistics.mean(latencies),
    )


# ---------------------------------------------------------------------------
# Pure helper functions
# ---------------------------------------------------------------------------

def calculate_jitter(samples: Sequence[float]) -> float:
    """Mean absolute difference between consecutive samples."""
    if len(samples) < 2:
        return 0.0
    diffs = [abs(samples[i] - samples[i - 1]) for i in range(1, len(samples))]
    return statistics.mean(diffs)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_speed(speed_mbps: float) -> str:
    """Human-readable speed string."""
    if speed_mbps >= 1000:
        return f"{speed_mbps / 1000:.2f} Gbps"
    return f"{speed_mbps:.2f} Mbps"


def format_latency(latency_ms: float) -> str:
    """Human-readable latency string."""
    if latency_ms >= 1000:
        return f"{latency_ms / 1000:.2f} s"
    return f"{latency_ms:.1f} ms"


def format_loss(packet_loss: float) -> str:
    """Loss fraction as a percentage, without noise for whole numbers."""
    pct = packet_loss * 100
    if pct == int(pct):
        return f"{int(pct)}%"
    return f"{pct:.1f}%"
