"""
Output formatting -- JSON export and plain text.
"""
from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from netquality.orchestrator import PhaseEvent
from netquality.runner import SpeedTestResult


def create_result_json(
    client_info: Optional[Dict[str, Any]] = None,
    ping_events: Optional[List[PhaseEvent]] = None,
    speed_test: Optional[SpeedTestResult] = None,
) -> Dict[str, Any]:
    """Build a JSON-serialisable dict from whatever phases were run."""
    result: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "client": client_info or {},
    }

    if ping_events is not None:
        result["targets"] = [
            {
                **event.target.to_dict(),
                **(event.aggregate.to_dict() if event.aggregate else {}),
            }
            for event in ping_events
        ]

    if speed_test is not None:
        result["ping"] = speed_test.ping_ms
        result["jitter"] = speed_test.jitter_ms
        result["download"] = {"speed_mbps": speed_test.download_mbps}
        result["upload"] = {"speed_mbps": speed_test.upload_mbps}

    return result


def save_json(result: Dict[str, Any], filepath: str) -> None:
    """Write *result* to *filepath* atomically (write-tmp then rename)."""
    dir_path = os.path.dirname(filepath) or "."
    tmp = os.path.join(dir_path, f".tmp_{os.path.basename(filepath)}")

    try:
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2, ensure_ascii=False)
        os.replace(tmp, filepath)
    except (IOError, OSError) as exc:
        # Clean up partial temp file
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise IOError(f"Failed to save JSON to {filepath}: {exc}") from exc


# ---------------------------------------------------------------------------
# Plain-text helpers
# ---------------------------------------------------------------------------

def format_target_line(event: PhaseEvent) -> str:
    agg = event.aggregate
    if agg is None or agg.all_failed:
        return f"{event.target.name}: Failed (100% packet loss)"
    return (
        f"{event.target.name}: {agg.avg:.1f} ms "
        f"(jitter: {agg.jitter:.1f} ms, loss: {agg.packet_loss * 100:.0f}%)"
    )


def format_text_result(result: SpeedTestResult, ip: str = "") -> str:
    sep = "=" * 50
    mid = "-" * 50
    return (
        f"{sep}\n"
        f"Speed Test Results\n"
        f"{sep}\n"
        f"IP: {ip or 'Unavailable'}\n"
        f"{mid}\n"
        f"Ping: {result.ping_ms} ms (jitter: {result.jitter_ms} ms)\n"
        f"Download: {result.download_mbps:.2f} Mbps\n"
        f"Upload: {result.upload_mbps:.2f} Mbps\n"
        f"{sep}"
    )
