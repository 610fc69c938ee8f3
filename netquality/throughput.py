"""
Throughput ramp and measurement strategies.

``ThroughputSimulator`` animates a value from *start* to *end* over a fixed
duration, ticking roughly once per display frame.  A ``ThroughputStrategy``
decides what the end value is; the shipped ``SimulatedThroughput`` draws it
from a ``SyntheticSource``.  A transfer-based strategy can replace it
without touching the runner.
"""
from __future__ import annotations

import abc
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .constants import FRAME_INTERVAL, RAMP_DURATION
from .errors import check_cancelled
from .synthetic import SyntheticSource

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]


class Direction(str, Enum):
    """Throughput phase; the value doubles as its progress label."""

    DOWNLOAD = "Download"
    UPLOAD = "Upload"


# ---------------------------------------------------------------------------
# Ramp
# ---------------------------------------------------------------------------

@dataclass
class RampState:
    start: float
    end: float
    duration: float
    elapsed: float = 0.0

    @property
    def finished(self) -> bool:
        return self.duration <= 0 or self.elapsed >= self.duration

    @property
    def value(self) -> float:
        if self.finished:
            return self.end
        progress = min(self.elapsed / self.duration, 1.0)
        return self.start + (self.end - self.start) * progress


class ThroughputSimulator:
    """
    Time-driven linear interpolation.

    *clock* and *frame_interval* are injectable so tests can drive the ramp
    without real waiting.
    """

    def __init__(
        self,
        frame_interval: float = FRAME_INTERVAL,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.frame_interval = frame_interval
        self._clock = clock

    async def ramp(
        self,
        start: float,
        end: float,
        duration: float,
        on_tick: TickCallback,
        cancel: Optional[asyncio.Event] = None,
    ) -> float:
        """
        Tick ``on_tick(value)`` until *duration* seconds have elapsed, then
        deliver exactly *end* once more and return it.
        """
        state = RampState(start=start, end=end, duration=duration)
        t0 = self._clock()

        while True:
            check_cancelled(cancel)
            state.elapsed = self._clock() - t0
            if state.finished:
                break
            on_tick(state.value)
            await asyncio.sleep(self.frame_interval)

        on_tick(end)
        return end


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class ThroughputStrategy(abc.ABC):
    """Produces the throughput for one direction, reporting ticks as it goes."""

    @abc.abstractmethod
    async def measure(
        self,
        direction: Direction,
        on_tick: TickCallback,
        cancel: Optional[asyncio.Event] = None,
    ) -> float:
        """Return the final throughput in Mbps."""


class SimulatedThroughput(ThroughputStrategy):
    """Animate from 0 towards a randomly drawn target; no data is transferred."""

    def __init__(
        self,
        source: Optional[SyntheticSource] = None,
        simulator: Optional[ThroughputSimulator] = None,
        duration: float = RAMP_DURATION,
    ) -> None:
        self.source = source or SyntheticSource()
        self.simulator = simulator or ThroughputSimulator()
        self.duration = duration

    async def measure(
        self,
        direction: Direction,
        on_tick: TickCallback,
        cancel: Optional[asyncio.Event] = None,
    ) -> float:
        if direction is Direction.DOWNLOAD:
            target = self.source.download_mbps()
        else:
            target = self.source.upload_mbps()
        logger.debug("%s target: %.2f Mbps", direction.value, target)
        return await self.simulator.ramp(0.0, target, self.duration, on_tick, cancel)
