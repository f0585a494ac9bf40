from datetime import datetime, timedelta, timezone

import pytest

from minilinkedin.frontend.timeago import time_ago

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("delta, expected", [
    (timedelta(seconds=0), "0 secs ago"),
    (timedelta(seconds=1), "1 sec ago"),
    (timedelta(seconds=45), "45 secs ago"),
    (timedelta(minutes=1), "1 min ago"),
    (timedelta(minutes=59, seconds=59), "59 mins ago"),
    (timedelta(minutes=90), "1 hour ago"),
    (timedelta(hours=5), "5 hours ago"),
    (timedelta(days=1), "1 day ago"),
    (timedelta(days=3, hours=2), "3 days ago"),
])
def test_buckets(delta, expected):
    assert time_ago(NOW - delta, now=NOW) == expected


def test_parses_api_timestamps():
    assert time_ago("2026-10-18T11:59:15Z", now=NOW) == "45 secs ago"
    assert time_ago("2026-10-18T11:00:00+00:00", now=NOW) == "1 hour ago"


def test_naive_timestamps_are_utc():
    assert time_ago("2026-10-18T11:58:00", now=NOW) == "2 mins ago"
