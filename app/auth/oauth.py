from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

import httpx
from fastapi import Request

from app.core.config import AppConfig
from app.core.errors import TokenExchangeError
from app.observability.logger import log_event, log_warning, timing


AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
SCOPES = [
    "openid",
    "profile",
    "email",
    "https://www.googleapis.com/auth/calendar.readonly",
]
CALLBACK_PATH = "/api/auth/google/callback"


def _first_header_value(request: Request, name: str) -> str:
    return request.headers.get(name, "").split(",")[0].strip()


def get_server_origin(request: Request, config: AppConfig) -> str:
    """Public origin of this server; SERVER_ROOT wins over proxy headers."""
    if config.server_root:
        return config.server_root.rstrip("/")
    proto = _first_header_value(request, "x-forwarded-proto") or request.url.scheme
    host = _first_header_value(request, "x-forwarded-host") or request.headers.get("host") or request.url.netloc
    return f"{proto}://{host}"


def callback_url(request: Request, config: AppConfig) -> str:
    return f"{get_server_origin(request, config)}{CALLBACK_PATH}"


class GoogleOAuthBroker:
    """Google authorization-code flow for a web server client."""

    def __init__(self, client_id: Optional[str], client_secret: Optional[str], timeout: float = 10):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout

    def authorization_url(self, redirect_uri: str) -> str:
        params = {
            "client_id": self.client_id or "",
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "redirect_uri": redirect_uri,
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params, quote_via=quote)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for the provider's token payload.

        Raises:
            TokenExchangeError: on any transport or provider failure
        """
        form = {
            "code": code,
            "client_id": self.client_id or "",
            "client_secret": self.client_secret or "",
            "redirect_uri": redirect_uri,
            "grant_type": "authorization_code",
        }

        try:
            with timing("oauth_token_exchange") as t:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(TOKEN_URL, data=form)
                    if response.status_code >= 400:
                        log_warning("OAuth token exchange rejected", {
                            "status_code": response.status_code,
                            "body": response.text,
                        })
                        raise TokenExchangeError(f"Token endpoint returned {response.status_code}")
                    tokens = response.json()
        except TokenExchangeError:
            raise
        except Exception as exc:
            raise TokenExchangeError(f"OAuth token exchange failed: {exc}") from exc

        if not isinstance(tokens, dict) or not tokens.get("access_token"):
            raise TokenExchangeError("Token endpoint response has no access_token")

        log_event("token_exchanged", "google_oauth", duration_ms=t.get_duration_ms(),
                  has_refresh=bool(tokens.get("refresh_token")))
        return tokens


def create_oauth_broker(config: AppConfig) -> GoogleOAuthBroker:
    return GoogleOAuthBroker(client_id=config.google_client_id, client_secret=config.google_client_secret)
