"""Network quality measurement -- latency probing, statistics and speed test sequencing."""

from .api import ClientInfo, NetworkInfoAPI
from .errors import ConfigurationError, LookupFailed, MeasurementCancelled, NetQualityError
from .grading import classify_ping, describe_target_result
from .latency import LatencyProbe, Sample, cache_busted_url
from .orchestrator import MultiTargetRunner, PhaseEvent, PhaseOrchestrator, PhaseStatus
from .runner import Phase, PingSummary, RunnerTimings, SpeedTestResult, SpeedTestRunner
from .stats import (
    AggregateResult,
    aggregate,
    calculate_jitter,
    format_latency,
    format_loss,
    format_speed,
)
from .synthetic import SyntheticSource
from .targets import Target, default_targets
from .throughput import (
    Direction,
    SimulatedThroughput,
    ThroughputSimulator,
    ThroughputStrategy,
)

__version__ = "1.0.0"

__all__ = [
    "AggregateResult",
    "ClientInfo",
    "ConfigurationError",
    "Direction",
    "LatencyProbe",
    "LookupFailed",
    "MeasurementCancelled",
    "MultiTargetRunner",
    "NetQualityError",
    "NetworkInfoAPI",
    "Phase",
    "PhaseEvent",
    "PhaseOrchestrator",
    "PhaseStatus",
    "PingSummary",
    "RunnerTimings",
    "Sample",
    "SimulatedThroughput",
    "SpeedTestResult",
    "SpeedTestRunner",
    "SyntheticSource",
    "Target",
    "ThroughputSimulator",
    "ThroughputStrategy",
    "aggregate",
    "cache_busted_url",
    "calculate_jitter",
    "classify_ping",
    "default_targets",
    "describe_target_result",
    "format_latency",
    "format_loss",
    "format_speed",
]
