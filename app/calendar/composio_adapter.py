from typing import Any, List, Optional

import httpx

from app.calendar.normalize import normalize_events
from app.calendar.types import Meeting
from app.core.config import AppConfig
from app.core.errors import PrimarySourceError
from app.observability.logger import log_event, log_warning, timing


MAX_EVENTS = 50
TIMEOUT_SECONDS = 10


class ComposioEventSource:
    """Primary event source: the Composio calendar aggregation endpoint."""

    name = "composio"

    def __init__(self, api_base: str, api_key: Optional[str], timeout: float = TIMEOUT_SECONDS):
        self.api_base = api_base.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    @property
    def events_url(self) -> str:
        return f"{self.api_base}/v1/mcp/calendar/events"

    def _extract_items(self, data: Any) -> List[dict]:
        if isinstance(data, dict) and isinstance(data.get("events"), list):
            return data["events"]
        if isinstance(data, list):
            return data
        raise PrimarySourceError("Composio response has no event list", source=self.name)

    async def fetch(self, access_token: str) -> List[Meeting]:
        """
        Fetch and normalize events for the holder of ``access_token``.

        Raises:
            PrimarySourceError: on timeout, non-2xx status or a malformed body
        """
        payload = {
            "provider": "google",
            "provider_access_token": access_token,
            "max_events": MAX_EVENTS,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            with timing("composio_fetch") as t:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.events_url, json=payload, headers=headers)
                    if response.status_code >= 400:
                        log_warning("Composio fetch failed", {
                            "status_code": response.status_code,
                            "body": response.text,
                        })
                        raise PrimarySourceError(
                            f"Composio returned {response.status_code}", source=self.name
                        )
                    items = self._extract_items(response.json())
        except PrimarySourceError:
            raise
        except httpx.TimeoutException as exc:
            raise PrimarySourceError(f"Composio timeout after {self.timeout}s", source=self.name) from exc
        except Exception as exc:
            raise PrimarySourceError(f"Composio fetch failed: {exc}", source=self.name) from exc

        meetings = normalize_events(items, self.name)
        log_event("fetched", self.name, duration_ms=t.get_duration_ms(),
                  raw_count=len(items), meeting_count=len(meetings))
        return meetings


def create_composio_source(config: AppConfig) -> ComposioEventSource:
    return ComposioEventSource(api_base=config.composio_api_base, api_key=config.composio_api_key)
