from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.auth.session import SessionStore
from app.calendar.classifier import classify
from app.calendar.provider import EventSource, fetch_events
from app.core.dependencies import get_event_sources, get_now, get_session_id, get_session_store
from app.core.errors import NotAuthenticatedError


router = APIRouter()


def _access_token(store: SessionStore, session_id: Optional[str]) -> str:
    session = store.get(session_id) if session_id else None
    tokens = (session or {}).get("tokens") or {}
    access_token = tokens.get("access_token")
    if not access_token:
        raise NotAuthenticatedError("No access token in session")
    return access_token


@router.get("/meetings")
async def list_meetings(
    store: SessionStore = Depends(get_session_store),
    session_id: Optional[str] = Depends(get_session_id),
    sources: List[EventSource] = Depends(get_event_sources),
    now: datetime = Depends(get_now),
) -> JSONResponse:
    """Upcoming and past meetings (five of each) for the signed-in user."""
    access_token = _access_token(store, session_id)
    events = await fetch_events(access_token, sources)
    classified = classify(events, now)
    return JSONResponse(status_code=200, content=classified.to_response())
