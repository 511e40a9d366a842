"""
FastAPI dependency providers.

Everything with state or outbound I/O is reached through these functions so
tests can swap implementations with ``app.dependency_overrides``.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

from fastapi import Depends, Request

from app.auth.oauth import GoogleOAuthBroker, create_oauth_broker
from app.auth.session import SessionCookie, SessionStore
from app.calendar.provider import EventSource, select_event_sources
from app.core.config import AppConfig
from app.llm.service import LLMClient, select_llm_client


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_session_cookie(config: AppConfig = Depends(get_config)) -> SessionCookie:
    return SessionCookie(secret=config.session_secret, max_age=config.session_max_age)


def get_session_id(
    request: Request,
    config: AppConfig = Depends(get_config),
    cookie: SessionCookie = Depends(get_session_cookie),
) -> Optional[str]:
    return cookie.loads(request.cookies.get(config.session_cookie_name))


def get_oauth_broker(config: AppConfig = Depends(get_config)) -> GoogleOAuthBroker:
    return create_oauth_broker(config)


def get_event_sources(config: AppConfig = Depends(get_config)) -> List[EventSource]:
    return select_event_sources(config)


def get_llm_factory(config: AppConfig = Depends(get_config)) -> Callable[[], LLMClient]:
    # Deferred so a missing meeting is reported before a missing API key.
    return lambda: select_llm_client(config)


def get_now() -> datetime:
    return datetime.now(timezone.utc)
