"""Write-path hooks shared by every store backend."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def stamp_itinerary_update(changes: Dict[str, Any], previous_updated_at=None, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Runs for every itinerary update, whatever columns changed.
    Any client-supplied updated_at is discarded and replaced with the store
    clock, clamped so it never moves behind the previously stored value.
    """
    stamped = {key: value for key, value in changes.items() if key != "updated_at"}
    stamp = now or utcnow()
    previous = parse_timestamp(previous_updated_at)
    if previous is not None and previous > stamp:
        stamp = previous
    stamped["updated_at"] = format_timestamp(stamp)
    return stamped
