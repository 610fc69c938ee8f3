"""
Latency classification helpers.

Turns a probe round into the short verdict shown next to each target.
"""
from __future__ import annotations

from typing import Tuple

from .stats import AggregateResult, format_loss


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

_THRESHOLDS = [
    (50.0, False, "Excellent", "green"),
    (100.0, True, "Good", "green"),
    (200.0, True, "Fair", "yellow"),
]


def classify_ping(avg_ms: float) -> Tuple[str, str]:
    """
    Return (label, color) for an average latency.

    < 50 ms is Excellent, up to 100 ms Good, up to 200 ms Fair, else Bad.
    """
    for limit, inclusive, label, color in _THRESHOLDS:
        if avg_ms < limit or (inclusive and avg_ms == limit):
            return (label, color)
    return ("Bad", "red")


def describe_target_result(result: AggregateResult) -> Tuple[str, str, str]:
    """
    Return (headline, details, color) for one target's probe round.

    A round where nothing came back reads as 100% loss, not as an error.
    """
    if result.avg <= 0:
        return ("Failed", "100% packet loss", "red")

    label, color = classify_ping(result.avg)
    details = (
        f"{label} • Jitter: {result.jitter:.1f}ms "
        f"• Loss: {format_loss(result.packet_loss)}"
    )
    return (f"{result.avg:.0f} ms", details, color)
