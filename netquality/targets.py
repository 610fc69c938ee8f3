"""
Latency targets -- static reachability endpoints.

A target is identified by a display name, an IP address and a concrete
HTTP(S) URL that accepts a query string.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlsplit

from .constants import DEFAULT_TARGETS
from .errors import ConfigurationError


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Target:
    """One reachability test destination."""

    name: str
    address: str
    url: str

    # -- Constructors -------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Target:
        return cls(
            name=str(data.get("name", "")),
            address=str(data.get("address", "")),
            url=str(data.get("url", "")),
        )

    @classmethod
    def from_spec(cls, spec: str) -> Target:
        """Parse a ``NAME=URL`` command-line value.

        The address is taken from the URL host.
        """
        name, sep, url = spec.partition("=")
        if not sep:
            raise ConfigurationError(f"Target must look like NAME=URL, got {spec!r}")
        host = urlsplit(url.strip()).hostname or ""
        return cls(name=name.strip(), address=host, url=url.strip())

    # -- Validation ---------------------------------------------------------

    def validate(self) -> None:
        """Raise ``ConfigurationError`` if the target can't be probed."""
        if not self.name:
            raise ConfigurationError("Target name must not be empty")
        parts = urlsplit(self.url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(
                f"Target {self.name!r} has a malformed URL: {self.url!r}"
            )

    # -- Serialisation ------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "address": self.address,
            "url": self.url,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def default_targets() -> List[Target]:
    return [Target.from_dict(t) for t in DEFAULT_TARGETS]


def validate_targets(targets: Iterable[Target]) -> List[Target]:
    """Validate every target up front and return them as a list."""
    checked = list(targets)
    if not checked:
        raise ConfigurationError("At least one target is required")
    for target in checked:
        target.validate()
    return checked


def targets_from_config(config: Dict[str, Any]) -> List[Target]:
    """Build targets from the ``targets`` config key (defaults when empty)."""
    raw: Optional[list] = config.get("targets")
    if not raw:
        return default_targets()
    if not isinstance(raw, list):
        raise ConfigurationError("Config key 'targets' must be a list")
    return [Target.from_dict(t) for t in raw if isinstance(t, dict)]
