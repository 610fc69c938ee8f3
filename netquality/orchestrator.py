"""
Sequential probe orchestration.

``PhaseOrchestrator`` runs a fixed number of paced probes against one
target.  ``MultiTargetRunner`` walks a list of targets one after another,
so probes to different targets never compete for the same uplink.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Sequence

from .constants import PING_INTERVAL
from .errors import ConfigurationError, check_cancelled
from .latency import LatencyProbe, Sample
from .stats import AggregateResult, aggregate
from .targets import Target, validate_targets

logger = logging.getLogger(__name__)

SampleCallback = Callable[[float], None]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

class PhaseStatus(str, Enum):
    TESTING = "testing"
    COMPLETE = "complete"


@dataclass(frozen=True)
class PhaseEvent:
    """Lifecycle notification for one target.  Emitted, never stored."""

    target: Target
    status: PhaseStatus
    aggregate: Optional[AggregateResult] = None

    def to_dict(self) -> dict:
        data: dict = {"status": self.status.value}
        if self.aggregate is not None:
            data.update(
                avg=self.aggregate.avg,
                jitter=self.aggregate.jitter,
                packetLoss=self.aggregate.packet_loss,
            )
        return data


UpdateCallback = Callable[[Target, PhaseEvent], None]


def _check_count(count: int) -> None:
    if count < 1:
        raise ConfigurationError(f"Probe count must be at least 1, got {count}")


# ---------------------------------------------------------------------------
# Single target
# ---------------------------------------------------------------------------

class PhaseOrchestrator:
    """Run *count* sequential probes against one target."""

    def __init__(
        self,
        probe: LatencyProbe,
        interval: float = PING_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.probe = probe
        self.interval = interval
        self._sleep = sleep

    async def iter_probes(
        self,
        target: Target,
        count: int,
        cancel: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[Sample]:
        """
        Lazily yield one ``Sample`` per probe.

        The pacing delay runs when the consumer asks for the next sample,
        so any work done between iterations happens before the delay.  No
        delay follows the last probe.
        """
        for i in range(count):
            check_cancelled(cancel)
            yield await self.probe.probe(target.url)

            if i < count - 1:
                check_cancelled(cancel)
                await self._sleep(self.interval)

    async def run_probes(
        self,
        target: Target,
        count: int,
        on_sample: Optional[SampleCallback] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> AggregateResult:
        """Probe *target* exactly *count* times and aggregate the outcome."""
        _check_count(count)
        target.validate()

        samples: List[Sample] = []
        async for sample in self.iter_probes(target, count, cancel):
            samples.append(sample)
            if sample.ok and on_sample:
                on_sample(sample.latency_ms)

        result = aggregate(samples, total_attempted=count)
        logger.info(
            "%s: avg=%.1f ms jitter=%.1f ms loss=%.0f%%",
            target.name, result.avg, result.jitter, result.packet_loss * 100,
        )
        return result


# ---------------------------------------------------------------------------
# Multiple targets
# ---------------------------------------------------------------------------

class MultiTargetRunner:
    """Run a full probe round against each target in turn."""

    def __init__(self, orchestrator: PhaseOrchestrator) -> None:
        self.orchestrator = orchestrator

    async def run(
        self,
        targets: Sequence[Target],
        count_per_target: int,
        on_update: Optional[UpdateCallback] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> List[PhaseEvent]:
        """
        Probe every target sequentially, reporting ``testing`` and
        ``complete`` events through *on_update*.

        Returns the ``complete`` events in target order.
        """
        _check_count(count_per_target)
        checked = validate_targets(targets)

        completed: List[PhaseEvent] = []
        for target in checked:
            check_cancelled(cancel)
            logger.debug("Testing %s (%s)", target.name, target.address)
            if on_update:
                on_update(target, PhaseEvent(target, PhaseStatus.TESTING))

            result = await self.orchestrator.run_probes(
                target, count_per_target, cancel=cancel
            )

            event = PhaseEvent(target, PhaseStatus.COMPLETE, result)
            completed.append(event)
            if on_update:
                on_update(target, event)

        return completed
