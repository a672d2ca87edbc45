import pytest

from quotebuilder.core.uptime import format_uptime


@pytest.mark.parametrize("seconds,expected", [
    (0, "0 seconds"),
    (1, "1 second"),
    (59.9, "59 seconds"),
    (60, "1 minute, 0 seconds"),
    (61, "1 minute, 1 second"),
    (3599, "59 minutes, 59 seconds"),
    (3600, "1 hour, 0 minutes"),
    (7260, "2 hours, 1 minute"),
    (86400, "1 day, 0 hours, 0 minutes, 0 seconds"),
    (90061, "1 day, 1 hour, 1 minute, 1 second"),
    (2 * 86400 + 3 * 3600 + 4 * 60 + 5, "2 days, 3 hours, 4 minutes, 5 seconds"),
])
def test_format_uptime(seconds, expected):
    assert format_uptime(seconds) == expected
