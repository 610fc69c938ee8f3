"""
Shared constants used across all netquality modules.

Centralises magic numbers, default headers, and tunables so they live in
exactly one place.
"""

# ---------------------------------------------------------------------------
# HTTP headers
# ---------------------------------------------------------------------------

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/144.0.0.0 Safari/537.36"
)

COMMON_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

CLIENT_INFO_URL = "https://ipapi.co/json/"

DEFAULT_TARGETS = [
    {
        "name": "Google DNS",
        "address": "8.8.8.8",
        "url": "https://dns.google/resolve?name=example.com",
    },
    {
        "name": "Cloudflare DNS",
        "address": "1.1.1.1",
        "url": "https://cloudflare-dns.com/dns-query?name=example.com&type=A&ct=application/dns-json",
    },
]

CACHE_BUST_PARAM = "t"

# ---------------------------------------------------------------------------
# Latency probing
# ---------------------------------------------------------------------------

DEFAULT_PING_COUNT = 4
MIN_PING_COUNT = 1
MAX_PING_COUNT = 100

PING_INTERVAL = 0.25            # 250 ms between probes to one target
MIN_PING_INTERVAL = 0.0
MAX_PING_INTERVAL = 10.0

DEFAULT_TIMEOUT = 5.0           # seconds per probe round-trip
MIN_TIMEOUT = 0.1
MAX_TIMEOUT = 60.0

# ---------------------------------------------------------------------------
# Speed test pacing
# ---------------------------------------------------------------------------

WARMUP_SECONDS = 0.5            # pause before ping/jitter are synthesised
JITTER_PAUSE = 0.2
PHASE_PAUSE = 0.5               # before each throughput ramp

RAMP_DURATION = 3.0             # seconds for the download / upload animation
MIN_RAMP_DURATION = 0.0
MAX_RAMP_DURATION = 60.0
FRAME_INTERVAL = 1 / 60         # ~16 ms between ramp ticks

# ---------------------------------------------------------------------------
# Synthetic value ranges
# ---------------------------------------------------------------------------

PING_RANGE = (8, 32)            # ms, inclusive
JITTER_RANGE = (1, 8)           # ms, inclusive
DOWNLOAD_RANGE = (50.0, 850.0)  # Mbps
UPLOAD_RANGE = (20.0, 220.0)    # Mbps
