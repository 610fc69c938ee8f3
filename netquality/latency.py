"""
HTTP round-trip latency probing.

Probe flow::

    1. Append a unique cache-busting query parameter to the target URL.
    2. GET the URL and read the full response body.
    3. Time the exchange with ``time.perf_counter``.

Transport errors, timeouts and non-2xx statuses all become a failed
``Sample``.  A failed ping is valid measurement data and is never raised.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import aiohttp

from .constants import CACHE_BUST_PARAM, COMMON_HEADERS, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

_SEQUENCE = itertools.count()


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Sample:
    """A single probe outcome.  ``latency_ms`` is meaningless when not ``ok``."""

    latency_ms: float = 0.0
    ok: bool = True
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> Sample:
        return cls(latency_ms=0.0, ok=False, error=error)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def cache_busted_url(url: str, token: Optional[str] = None) -> str:
    """Return *url* with a ``t=<token>`` query parameter appended.

    Existing query parameters are preserved as-is.
    """
    if token is None:
        token = f"{int(time.time() * 1000)}{next(_SEQUENCE)}"
    parts = urlsplit(url)
    extra = f"{CACHE_BUST_PARAM}={token}"
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


# ---------------------------------------------------------------------------
# Probe
# ---------------------------------------------------------------------------

class LatencyProbe:
    """
    Times one request/response exchange per call.

    Use as an async context manager to get a managed session, or pass an
    existing ``aiohttp.ClientSession`` in.  There are no retries: exactly
    one outbound request is made per ``probe()``.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self._session = session
        self._owns_session = False

    # -- Context manager ----------------------------------------------------

    async def __aenter__(self) -> LatencyProbe:
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=COMMON_HEADERS)
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._owns_session and self._session:
            await self._session.close()
            self._session = None
            self._owns_session = False

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError(
                "LatencyProbe needs a session: use 'async with LatencyProbe() "
                "as probe: ...' or pass session=..."
            )
        return self._session

    # -- Public -------------------------------------------------------------

    async def probe(self, url: str) -> Sample:
        session = self._ensure_session()
        request_url = cache_busted_url(url)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        start = time.perf_counter()
        try:
            async with session.get(request_url, timeout=timeout) as resp:
                await resp.read()
                status = resp.status
        except asyncio.TimeoutError:
            logger.warning("Probe to %s timed out after %.1f s", url, self.timeout)
            return Sample.failed("Timeout")
        except (aiohttp.ClientError, OSError) as exc:
            logger.warning("Probe to %s failed: %s", url, exc)
            return Sample.failed(str(exc) or type(exc).__name__)

        elapsed_ms = (time.perf_counter() - start) * 1000

        if not 200 <= status < 300:
            logger.warning("Probe to %s returned HTTP %d", url, status)
            return Sample.failed(f"HTTP {status}")

        logger.debug("Probe to %s: %.1f ms", url, elapsed_ms)
        return Sample(latency_ms=elapsed_ms)
