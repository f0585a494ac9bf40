from datetime import datetime, timezone
from typing import Optional, Union


def _parse(value: Union[str, datetime]) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def time_ago(value: Union[str, datetime], now: Optional[datetime] = None) -> str:
    """Convert a timestamp to "x mins ago" and friends."""
    now = now or datetime.now(timezone.utc)
    seconds = int((now - _parse(value)).total_seconds())

    if seconds < 60:
        return _plural(seconds, "sec")
    minutes = seconds // 60
    if minutes < 60:
        return _plural(minutes, "min")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    return _plural(hours // 24, "day")
