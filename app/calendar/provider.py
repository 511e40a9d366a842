from typing import List, Protocol, Sequence

from app.calendar.types import Meeting
from app.core.config import AppConfig
from app.core.errors import AllSourcesExhaustedError, SourceError
from app.observability.logger import log_error, log_warning


class EventSource(Protocol):
    name: str

    async def fetch(self, access_token: str) -> List[Meeting]:
        """
        Fetch normalized meetings visible to the holder of ``access_token``.

        Every returned meeting has parseable start and end times. Failures
        are raised as a ``SourceError`` subclass.
        """
        ...


def select_event_sources(config: AppConfig) -> List[EventSource]:
    """Ordered source chain: Composio first, the direct Google Calendar API second."""
    from app.calendar.composio_adapter import create_composio_source
    from app.calendar.google_adapter import GoogleCalendarEventSource

    return [create_composio_source(config), GoogleCalendarEventSource()]


async def fetch_events(access_token: str, sources: Sequence[EventSource]) -> List[Meeting]:
    """
    Try each source once, in order, returning the first successful result.

    Later sources are never called once one succeeds.

    Raises:
        AllSourcesExhaustedError: if every source fails
    """
    failures = []
    for source in sources:
        try:
            return await source.fetch(access_token)
        except SourceError as exc:
            failures.append(source.name)
            log_warning("Event source failed", {"source": source.name, "error": exc.message})

    error = AllSourcesExhaustedError(
        f"All event sources failed: {', '.join(failures) or 'none configured'}"
    )
    log_error(error, {"sources": failures})
    raise error
