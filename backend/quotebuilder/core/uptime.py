"""Human-readable process uptime for the health endpoint."""
import math
import time

_STARTED_AT = time.monotonic()


def _plural(count: int, singular: str) -> str:
    return f"{count} {singular if count == 1 else singular + 's'}"


def format_uptime(seconds: float) -> str:
    """Formats an uptime in seconds.

    Under a minute: seconds only. Under an hour: minutes and seconds. Under a
    day: hours and minutes. Beyond: days, hours, minutes and seconds.

    >>> format_uptime(3725)
    '1 hour, 2 minutes'
    """
    if seconds < 60:
        return _plural(math.floor(seconds), "second")
    if seconds < 3600:
        return f"{_plural(math.floor(seconds / 60), 'minute')}, {_plural(math.floor(seconds % 60), 'second')}"
    if seconds < 86400:
        hours = math.floor(seconds / 3600)
        minutes = math.floor((seconds % 3600) / 60)
        return f"{_plural(hours, 'hour')}, {_plural(minutes, 'minute')}"
    days = math.floor(seconds / 86400)
    hours = math.floor((seconds % 86400) / 3600)
    minutes = math.floor((seconds % 3600) / 60)
    secs = math.floor(seconds % 60)
    return ", ".join([
        _plural(days, "day"),
        _plural(hours, "hour"),
        _plural(minutes, "minute"),
        _plural(secs, "second"),
    ])


def process_uptime_seconds() -> float:
    return time.monotonic() - _STARTED_AT
