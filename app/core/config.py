import os
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, field_validator


DEV_FRONTEND_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]


class AppConfig(BaseModel):
    server_root: Optional[str] = None
    frontend_root: str = "http://localhost:5173"
    extra_allowed_origins: List[str] = []
    composio_api_key: Optional[str] = None
    composio_api_base: str = "https://api.composio.ai"
    openai_api_key: Optional[str] = None
    llm_model: str = "gpt-4o-mini"
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    session_secret: str = "please-change-me"
    session_cookie_name: str = "meeting_session"
    session_max_age: int = 86400
    session_cookie_secure: bool = False
    summary_timezone: Optional[str] = None
    port: int = 4000

    @field_validator("summary_timezone")
    @classmethod
    def _known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError):
                raise ValueError(f"unknown timezone: {value}")
        return value

    @property
    def allowed_origins(self) -> List[str]:
        origins = []
        for origin in [self.frontend_root, *DEV_FRONTEND_ORIGINS, *self.extra_allowed_origins]:
            if origin and origin not in origins:
                origins.append(origin)
        return origins


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw and raw.isdigit() else default


def load_config() -> AppConfig:
    return AppConfig(
        server_root=os.getenv("SERVER_ROOT") or None,
        frontend_root=os.getenv("FRONTEND_ROOT", "http://localhost:5173"),
        extra_allowed_origins=_split_csv(os.getenv("ALLOWED_ORIGINS", "")),
        composio_api_key=os.getenv("COMPOSIO_API_KEY") or os.getenv("VITE_COMPOSIO_API_KEY"),
        composio_api_base=os.getenv("COMPOSIO_API_BASE") or "https://api.composio.ai",
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        llm_model=os.getenv("LLM_MODEL", "gpt-4o-mini"),
        google_client_id=os.getenv("GOOGLE_CLIENT_ID"),
        google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET"),
        session_secret=os.getenv("SESSION_SECRET", "please-change-me"),
        session_cookie_name=os.getenv("SESSION_COOKIE_NAME", "meeting_session"),
        session_max_age=_int_env("SESSION_MAX_AGE", 86400),
        session_cookie_secure=os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true",
        summary_timezone=os.getenv("SUMMARY_TIMEZONE") or None,
        port=_int_env("PORT", 4000),
    )
