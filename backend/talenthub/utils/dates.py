import math
from datetime import datetime, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def format_posted_date(created_at: str, now: datetime | None = None) -> str:
    """Human label for a posting's age, e.g. "3 days ago" or "2 weeks ago".

    Day counts round up, so anything posted within the last 24 hours reads
    "1 day ago".
    """
    now = now or datetime.now(timezone.utc)
    delta = abs(now - parse_timestamp(created_at))
    days = math.ceil(delta.total_seconds() / 86400)

    if days == 1:
        return "1 day ago"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{math.ceil(days / 7)} weeks ago"
    if days < 365:
        return f"{math.ceil(days / 30)} months ago"
    return f"{math.ceil(days / 365)} years ago"
