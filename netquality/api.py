"""
Client network information lookup.

Fetches the public IP and rough location of the machine running the test.
All HTTP work goes through a single ``aiohttp.ClientSession`` managed via
async-context-manager protocol (``async with NetworkInfoAPI() as api: ...``).
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from .constants import CLIENT_INFO_URL, COMMON_HEADERS, DEFAULT_TIMEOUT
from .errors import LookupFailed

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass
class ClientInfo:
    """Information about the client as seen by the lookup service."""

    ip: str
    city: str = ""
    region: str = ""
    country: str = ""
    org: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ClientInfo:
        return cls(
            ip=data.get("ip") or "Unavailable",
            city=data.get("city") or "",
            region=data.get("region") or "",
            country=data.get("country_name") or data.get("country") or "",
            org=data.get("org") or "",
        )

    @property
    def location(self) -> str:
        return ", ".join(p for p in (self.city, self.region, self.country) if p)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ip": self.ip,
            "city": self.city,
            "region": self.region,
            "country": self.country,
            "org": self.org,
        }


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

class NetworkInfoAPI:
    """Async context-manager wrapping the IP lookup service."""

    def __init__(self, url: str = CLIENT_INFO_URL, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.url = url
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None
        self.client_info: Optional[ClientInfo] = None

    # -- Context manager ----------------------------------------------------

    async def __aenter__(self) -> NetworkInfoAPI:
        self._session = aiohttp.ClientSession(
            headers=COMMON_HEADERS,
            timeout=aiohttp.ClientTimeout(total=self.timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._session:
            await self._session.close()
            self._session = None

    # -- Internal helpers ---------------------------------------------------

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError(
                "NetworkInfoAPI must be used as an async context manager "
                "(async with NetworkInfoAPI() as api: ...)"
            )
        return self._session

    # -- Public methods -----------------------------------------------------

    async def get_client_info(self) -> ClientInfo:
        """Return the public IP and location of this machine."""
        session = self._ensure_session()

        try:
            async with session.get(self.url) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("Client info lookup failed: %s", exc)
            raise LookupFailed(f"Could not fetch client info: {exc}") from exc

        if not isinstance(data, dict):
            raise LookupFailed("Unexpected client info payload")

        self.client_info = ClientInfo.from_dict(data)
        return self.client_info
