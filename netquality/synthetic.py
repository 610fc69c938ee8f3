"""
Synthetic measurement values.

The speed test does not move real payloads: ping, jitter and throughput
targets are drawn from a random source.  Pass a seeded ``random.Random``
(or a subclass returning fixed values) to make runs reproducible.
"""
from __future__ import annotations

import math
import random
from typing import Optional

from .constants import DOWNLOAD_RANGE, JITTER_RANGE, PING_RANGE, UPLOAD_RANGE


class SyntheticSource:
    """Draws ping, jitter and throughput values from *rng*."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def _int_between(self, bounds: tuple) -> int:
        lo, hi = bounds
        return math.floor(self.rng.random() * (hi - lo + 1)) + lo

    def _float_between(self, bounds: tuple) -> float:
        lo, hi = bounds
        return self.rng.random() * (hi - lo) + lo

    def ping_ms(self) -> int:
        return self._int_between(PING_RANGE)

    def jitter_ms(self) -> int:
        return self._int_between(JITTER_RANGE)

    def download_mbps(self) -> float:
        return self._float_between(DOWNLOAD_RANGE)

    def upload_mbps(self) -> float:
        return self._float_between(UPLOAD_RANGE)
