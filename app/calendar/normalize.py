import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from app.calendar.types import Meeting


logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp or date into an aware datetime.

    Date-only values (all-day events) become midnight UTC and naive
    timestamps are treated as UTC. Returns None for anything unparseable.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        if len(text) == 10:
            d = date.fromisoformat(text)
            return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _extract_time(raw: Dict[str, Any], key: str, flat_key: str) -> Optional[str]:
    value = raw.get(key)
    if isinstance(value, dict):
        value = value.get("dateTime") or value.get("date")
    if not value:
        value = raw.get(flat_key)
    return value if isinstance(value, str) else None


def _extract_attendees(raw_attendees: Any) -> List[str]:
    emails = []
    for attendee in raw_attendees or []:
        if isinstance(attendee, dict):
            email = attendee.get("email")
        else:
            email = attendee
        if email and isinstance(email, str):
            emails.append(email)
    return emails


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _fallback_id(start: Optional[str]) -> str:
    # Only reached for provider records without an id of their own.
    return f"{start}_{uuid.uuid4().hex[:12]}"


def normalize_event(raw: Dict[str, Any]) -> Optional[Meeting]:
    """Map one provider event to a Meeting, or None if it cannot be used."""
    if not isinstance(raw, dict):
        return None

    start = _extract_time(raw, "start", "start_time")
    end = _extract_time(raw, "end", "end_time")
    if parse_timestamp(start) is None or parse_timestamp(end) is None:
        return None

    location = raw.get("location")
    if isinstance(location, dict):
        location = location.get("displayName")

    return Meeting(
        id=str(raw.get("id") or raw.get("event_id") or _fallback_id(start)),
        title=_text(raw.get("summary")) or _text(raw.get("title")) or "Untitled",
        start_time=start,
        end_time=end,
        attendees=_extract_attendees(raw.get("attendees")),
        description=_text(raw.get("description")),
        location=_text(location),
    )


def normalize_events(items: Iterable[Dict[str, Any]], source: str) -> List[Meeting]:
    meetings = []
    dropped = 0
    for item in items:
        meeting = normalize_event(item)
        if meeting is None:
            dropped += 1
            continue
        meetings.append(meeting)
    if dropped:
        logger.debug("Dropped %d %s events with unusable start/end times", dropped, source)
    return meetings
