import secrets
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from itsdangerous import BadSignature, TimestampSigner


class SessionStore(ABC):
    """Keyed storage for per-browser session data."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Return the session data, or None if unknown or expired."""
        pass

    @abstractmethod
    def set(self, session_id: str, data: Dict[str, Any]) -> None:
        """Create or replace the session data."""
        pass

    @abstractmethod
    def destroy(self, session_id: str) -> None:
        """Remove the session. Unknown ids are ignored."""
        pass


class InMemorySessionStore(SessionStore):
    """TTL-based in-process session store."""

    def __init__(self, ttl_seconds: Optional[float] = 86400):
        self.ttl_seconds = ttl_seconds
        self._sessions: Dict[str, Tuple[Dict[str, Any], float]] = {}

    def _is_expired(self, timestamp: float) -> bool:
        if self.ttl_seconds is None:
            return False
        return time.time() - timestamp > self.ttl_seconds

    def get(self, session_id: str) -> Optional[Dict[str, Any]]:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        data, timestamp = entry
        if self._is_expired(timestamp):
            del self._sessions[session_id]
            return None
        return data

    def set(self, session_id: str, data: Dict[str, Any]) -> None:
        self._purge_expired()
        self._sessions[session_id] = (dict(data), time.time())

    def destroy(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def _purge_expired(self) -> None:
        expired = [sid for sid, (_, ts) in self._sessions.items() if self._is_expired(ts)]
        for sid in expired:
            del self._sessions[sid]

    def __len__(self) -> int:
        return len(self._sessions)


class SessionCookie:
    """Issues session ids and signs/verifies them for the session cookie."""

    def __init__(self, secret: str, max_age: int):
        self._signer = TimestampSigner(secret, salt="meeting-session")
        self.max_age = max_age

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(32)

    def dumps(self, session_id: str) -> str:
        return self._signer.sign(session_id).decode("utf-8")

    def loads(self, cookie_value: Optional[str]) -> Optional[str]:
        """Return the session id from a cookie value, or None if missing, tampered or expired."""
        if not cookie_value:
            return None
        try:
            return self._signer.unsign(cookie_value, max_age=self.max_age).decode("utf-8")
        except BadSignature:
            return None
