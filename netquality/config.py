"""
User configuration file support.

Reads/writes ``~/.netquality/config.json``.

Supported keys::

    ping_count = 4           # probes per target
    ping_interval = 0.25     # seconds between probes
    probe_timeout = 5.0      # seconds per probe
    ramp_duration = 3.0      # seconds per throughput animation
    targets = []             # [{name, address, url}, ...]; empty = built-ins
    log_level = "WARNING"
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from .constants import (
    DEFAULT_PING_COUNT,
    DEFAULT_TIMEOUT,
    MAX_PING_COUNT,
    MAX_PING_INTERVAL,
    MAX_RAMP_DURATION,
    MAX_TIMEOUT,
    MIN_PING_COUNT,
    MIN_PING_INTERVAL,
    MIN_RAMP_DURATION,
    MIN_TIMEOUT,
    PING_INTERVAL,
    RAMP_DURATION,
)
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_CONFIG_DIR = os.path.join(Path.home(), ".netquality")
_CONFIG_FILE = "config.json"


def _config_path() -> str:
    return os.path.join(_CONFIG_DIR, _CONFIG_FILE)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULTS: Dict[str, Any] = {
    "ping_count": DEFAULT_PING_COUNT,
    "ping_interval": PING_INTERVAL,
    "probe_timeout": DEFAULT_TIMEOUT,
    "ramp_duration": RAMP_DURATION,
    "targets": [],
    "log_level": "WARNING",
}


# ---------------------------------------------------------------------------
# Read / Write
# ---------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """Load config from disk, returning defaults for missing keys."""
    path = _config_path()
    config = dict(DEFAULTS)

    if not os.path.isfile(path):
        return config

    try:
        with open(path, encoding="utf-8") as fh:
            user = json.load(fh)
        if isinstance(user, dict):
            config.update(user)
    except (json.JSONDecodeError, IOError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)

    return config


def save_config(config: Dict[str, Any]) -> str:
    """
    Persist the known settings from *config*.  Returns the file path.

    Unknown keys are dropped so a saved file only ever holds settings the
    CLI understands.
    """
    path = _config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    settings = {key: config.get(key, default) for key, default in DEFAULTS.items()}
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(settings, fh, indent=2, ensure_ascii=False)

    logger.info("Saved settings to %s", path)
    return path


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_settings(
    ping_count: int,
    ping_interval: float,
    probe_timeout: float,
    ramp_duration: float,
) -> None:
    """Raise ``ConfigurationError`` if any parameter has the wrong type or range."""
    if isinstance(ping_count, bool) or not isinstance(ping_count, int):
        raise ConfigurationError(f"Ping count must be a whole number, got {ping_count!r}")
    for name, value in (
        ("Ping interval", ping_interval),
        ("Probe timeout", probe_timeout),
        ("Ramp duration", ramp_duration),
    ):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not MIN_PING_COUNT <= ping_count <= MAX_PING_COUNT:
        raise ConfigurationError(
            f"Ping count must be between {MIN_PING_COUNT} and {MAX_PING_COUNT}"
        )
    if not MIN_PING_INTERVAL <= ping_interval <= MAX_PING_INTERVAL:
        raise ConfigurationError(
            f"Ping interval must be between {MIN_PING_INTERVAL} and {MAX_PING_INTERVAL} s"
        )
    if not MIN_TIMEOUT <= probe_timeout <= MAX_TIMEOUT:
        raise ConfigurationError(
            f"Probe timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT} s"
        )
    if not MIN_RAMP_DURATION <= ramp_duration <= MAX_RAMP_DURATION:
        raise ConfigurationError(
            f"Ramp duration must be between {MIN_RAMP_DURATION} and {MAX_RAMP_DURATION} s"
        )
