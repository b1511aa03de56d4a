"""Display helpers shared by the dashboard, search and analytics views."""

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

Timestamp = Union[str, datetime, None]


def parse_timestamp(value: Timestamp) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def relative_time(value: Timestamp, now: Optional[datetime] = None) -> str:
    """'just now', '5 minutes ago', '2 hours ago', '3 days ago', '2 weeks ago', ..."""
    dt = parse_timestamp(value)
    if dt is None:
        return ""
    now = now or datetime.now(timezone.utc)
    seconds = int((now - dt).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    days = hours // 24
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(days // 7, "week")
    if days < 365:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")


def day_label(value: Timestamp, now: Optional[datetime] = None) -> str:
    """Calendar-day flavoured label: Today, Yesterday, then relative_time."""
    dt = parse_timestamp(value)
    if dt is None:
        return ""
    now = now or datetime.now(timezone.utc)
    days = (now.date() - dt.astimezone(now.tzinfo).date()).days
    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    return relative_time(dt, now)


def size_label(size_bytes: Optional[int]) -> str:
    if not size_bytes:
        return "0.0kb"
    return f"{size_bytes / 1024:.1f}kb"


def storage_label(size_bytes: Optional[int]) -> str:
    return f"{(size_bytes or 0) / 1024 / 1024:.1f} MB"


def svg_filename(name: str) -> str:
    return name if name.lower().endswith(".svg") else f"{name}.svg"


def normalize_tags(tags: Union[str, Iterable[str], None]) -> Optional[List[str]]:
    """Accept 'a, b' or ['a', 'b, c']; trim, drop empties and duplicates. Empty -> None."""
    if tags is None:
        return None
    if isinstance(tags, str):
        tags = [tags]
    out: List[str] = []
    for raw in tags:
        for tag in str(raw).split(","):
            tag = tag.strip()
            if tag and tag not in out:
                out.append(tag)
    return out or None


def contains_pattern(text: str) -> str:
    """ilike pattern matching text anywhere, with LIKE wildcards in text escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
