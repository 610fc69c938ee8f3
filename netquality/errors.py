"""Exception hierarchy for netquality."""


class NetQualityError(Exception):
    """Base class for all errors raised by netquality."""


class ConfigurationError(NetQualityError, ValueError):
    """A target, probe count or setting is invalid.

    Raised before any network traffic is generated: misconfiguration is not
    a meaningful measurement outcome.
    """


class MeasurementCancelled(NetQualityError):
    """The caller's cancellation event was set at a suspension point."""


class LookupFailed(NetQualityError):
    """Client network information could not be fetched."""


def check_cancelled(cancel) -> None:  # noqa: ANN001 (asyncio.Event or None)
    """Raise ``MeasurementCancelled`` if the *cancel* event has been set."""
    if cancel is not None and cancel.is_set():
        raise MeasurementCancelled("Measurement cancelled by caller")
