from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import httpx

from app.calendar.normalize import normalize_events
from app.calendar.types import Meeting
from app.core.errors import FallbackSourceError
from app.observability.logger import log_event, log_warning, timing


EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
LOOKBACK_DAYS = 90
MAX_RESULTS = 250


class GoogleCalendarEventSource:
    """Fallback event source: the Google Calendar API, called with the user's own token."""

    name = "google_calendar"

    def __init__(self, timeout: float = 15, clock: Optional[Callable[[], datetime]] = None):
        self.timeout = timeout
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _build_params(self) -> dict:
        time_min = self._clock() - timedelta(days=LOOKBACK_DAYS)
        return {
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": MAX_RESULTS,
            "timeMin": time_min.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z"),
        }

    async def fetch(self, access_token: str) -> List[Meeting]:
        """
        Fetch the last 90 days of single events from the primary calendar.

        Raises:
            FallbackSourceError: on any transport, status or body problem
        """
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            with timing("google_calendar_fetch") as t:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(EVENTS_URL, headers=headers, params=self._build_params())
                    if response.status_code >= 400:
                        log_warning("Google Calendar fetch failed", {
                            "status_code": response.status_code,
                            "body": response.text,
                        })
                        raise FallbackSourceError(
                            f"Google Calendar returned {response.status_code}", source=self.name
                        )
                    data = response.json()
                    items = data.get("items", []) if isinstance(data, dict) else None
                    if not isinstance(items, list):
                        raise FallbackSourceError("Google Calendar response has no item list", source=self.name)
        except FallbackSourceError:
            raise
        except Exception as exc:
            raise FallbackSourceError(f"Google Calendar fetch failed: {exc}", source=self.name) from exc

        meetings = normalize_events(items, self.name)
        log_event("fetched", self.name, duration_ms=t.get_duration_ms(),
                  raw_count=len(items), meeting_count=len(meetings))
        return meetings
