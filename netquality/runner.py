"""
Top-level speed test sequence.

States run strictly in order with no branches or re-entry::

    PING -> JITTER -> DOWNLOAD -> UPLOAD -> DONE

The pauses between phases are pacing only; setting every ``RunnerTimings``
field to zero does not change the result.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .constants import JITTER_PAUSE, PHASE_PAUSE, RAMP_DURATION, WARMUP_SECONDS
from .errors import check_cancelled
from .synthetic import SyntheticSource
from .throughput import Direction, SimulatedThroughput, ThroughputStrategy

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, Optional[float]], None]


class Phase(str, Enum):
    IDLE = "idle"
    PING = "ping"
    JITTER = "jitter"
    DOWNLOAD = "download"
    UPLOAD = "upload"
    DONE = "done"


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PingSummary:
    ping_ms: int
    jitter_ms: int

    def to_dict(self) -> dict:
        return {"ping_ms": self.ping_ms, "jitter_ms": self.jitter_ms}


@dataclass(frozen=True)
class SpeedTestResult:
    """Terminal output of one speed test run."""

    ping_ms: int
    jitter_ms: int
    download_mbps: float
    upload_mbps: float

    def to_dict(self) -> dict:
        return {
            "ping_ms": self.ping_ms,
            "jitter_ms": self.jitter_ms,
            "download_mbps": self.download_mbps,
            "upload_mbps": self.upload_mbps,
        }


PingCallback = Callable[[PingSummary], None]


@dataclass
class RunnerTimings:
    warmup: float = WARMUP_SECONDS
    jitter_pause: float = JITTER_PAUSE
    phase_pause: float = PHASE_PAUSE
    ramp_duration: float = RAMP_DURATION

    @classmethod
    def instant(cls) -> RunnerTimings:
        return cls(warmup=0.0, jitter_pause=0.0, phase_pause=0.0, ramp_duration=0.0)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def _noop_progress(label: str, value: Optional[float]) -> None:
    pass


@dataclass
class SpeedTestRunner:
    """
    Sequences ping/jitter synthesis and the two throughput phases.

    ``on_progress(label, None)`` marks the start of a phase; subsequent
    calls carry the current value.
    """

    source: SyntheticSource = field(default_factory=SyntheticSource)
    timings: RunnerTimings = field(default_factory=RunnerTimings)
    strategy: Optional[ThroughputStrategy] = None
    phase: Phase = Phase.IDLE

    def __post_init__(self) -> None:
        if self.strategy is None:
            self.strategy = SimulatedThroughput(
                source=self.source, duration=self.timings.ramp_duration
            )

    def _enter(self, phase: Phase) -> None:
        logger.debug("Phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    async def _pause(self, seconds: float, cancel: Optional[asyncio.Event]) -> None:
        check_cancelled(cancel)
        if seconds > 0:
            await asyncio.sleep(seconds)
        check_cancelled(cancel)

    async def _throughput(
        self,
        direction: Direction,
        on_progress: ProgressCallback,
        cancel: Optional[asyncio.Event],
    ) -> float:
        label = direction.value
        on_progress(label, None)
        await self._pause(self.timings.phase_pause, cancel)
        value = await self.strategy.measure(
            direction, lambda v: on_progress(label, v), cancel
        )
        return round(max(value, 0.0), 2)

    async def run(
        self,
        on_progress: Optional[ProgressCallback] = None,
        on_ping_complete: Optional[PingCallback] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SpeedTestResult:
        if self.phase not in (Phase.IDLE, Phase.DONE):
            raise RuntimeError(f"Speed test already running (phase={self.phase.value})")
        self.phase = Phase.IDLE
        try:
            return await self._run(on_progress or _noop_progress, on_ping_complete, cancel)
        except BaseException:
            self.phase = Phase.IDLE
            raise

    async def _run(
        self,
        progress: ProgressCallback,
        on_ping_complete: Optional[PingCallback],
        cancel: Optional[asyncio.Event],
    ) -> SpeedTestResult:
        # -- Ping -----------------------------------------------------------
        self._enter(Phase.PING)
        progress("ping", None)
        await self._pause(self.timings.warmup, cancel)
        ping = self.source.ping_ms()
        jitter = self.source.jitter_ms()

        # -- Jitter ---------------------------------------------------------
        self._enter(Phase.JITTER)
        progress("jitter", None)
        await self._pause(self.timings.jitter_pause, cancel)

        summary = PingSummary(ping_ms=ping, jitter_ms=jitter)
        logger.info("Ping %d ms, jitter %d ms", ping, jitter)
        if on_ping_complete:
            on_ping_complete(summary)

        # -- Throughput -----------------------------------------------------
        self._enter(Phase.DOWNLOAD)
        download = await self._throughput(Direction.DOWNLOAD, progress, cancel)

        self._enter(Phase.UPLOAD)
        upload = await self._throughput(Direction.UPLOAD, progress, cancel)

        self._enter(Phase.DONE)
        result = SpeedTestResult(
            ping_ms=ping,
            jitter_ms=jitter,
            download_mbps=download,
            upload_mbps=upload,
        )
        logger.info("Download %.2f Mbps, upload %.2f Mbps", download, upload)
        return result
