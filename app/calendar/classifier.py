from datetime import datetime, timezone
from typing import List

from app.calendar.normalize import parse_timestamp
from app.calendar.types import ClassifiedMeetings, Meeting


MAX_PER_BUCKET = 5


def classify(events: List[Meeting], now: datetime, limit: int = MAX_PER_BUCKET) -> ClassifiedMeetings:
    """
    Split meetings into upcoming and past relative to ``now``.

    Upcoming meetings (start strictly after now) are sorted ascending, past
    meetings (start at or before now) descending, each capped at ``limit``.
    Meetings whose start time cannot be parsed are dropped. Sorting is stable,
    so meetings sharing a start time keep their input order.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    upcoming = []
    past = []
    for event in events:
        start = parse_timestamp(event.start_time)
        if start is None:
            continue
        if start > now:
            upcoming.append((start, event))
        else:
            past.append((start, event))

    upcoming.sort(key=lambda pair: pair[0])
    past.sort(key=lambda pair: pair[0], reverse=True)

    return ClassifiedMeetings(
        upcoming=[event for _, event in upcoming[:limit]],
        past=[event for _, event in past[:limit]],
    )
