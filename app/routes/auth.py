from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from app.auth.oauth import GoogleOAuthBroker, callback_url
from app.auth.session import SessionCookie, SessionStore
from app.core.config import AppConfig
from app.core.dependencies import (
    get_config,
    get_oauth_broker,
    get_session_cookie,
    get_session_id,
    get_session_store,
)
from app.core.errors import MissingCodeError
from app.observability.logger import log_event


router = APIRouter()


@router.get("/google")
async def start_login(
    request: Request,
    config: AppConfig = Depends(get_config),
    broker: GoogleOAuthBroker = Depends(get_oauth_broker),
):
    """Redirect the browser to Google's consent screen."""
    return RedirectResponse(broker.authorization_url(callback_url(request, config)), status_code=302)


@router.get("/google/callback")
async def handle_callback(
    request: Request,
    code: Optional[str] = None,
    config: AppConfig = Depends(get_config),
    broker: GoogleOAuthBroker = Depends(get_oauth_broker),
    store: SessionStore = Depends(get_session_store),
    cookie: SessionCookie = Depends(get_session_cookie),
    previous_session_id: Optional[str] = Depends(get_session_id),
):
    """Exchange the authorization code, start a session and return to the frontend."""
    if not code:
        raise MissingCodeError("OAuth callback without code")

    tokens = await broker.exchange_code(code, callback_url(request, config))

    if previous_session_id:
        store.destroy(previous_session_id)
    session_id = cookie.new_session_id()
    store.set(session_id, {"tokens": tokens})
    log_event("login", "google_oauth")

    response = RedirectResponse(config.frontend_root, status_code=302)
    response.set_cookie(
        config.session_cookie_name,
        cookie.dumps(session_id),
        max_age=config.session_max_age,
        httponly=True,
        secure=config.session_cookie_secure,
        samesite="lax",
    )
    return response


@router.get("/logout")
async def logout(
    config: AppConfig = Depends(get_config),
    store: SessionStore = Depends(get_session_store),
    session_id: Optional[str] = Depends(get_session_id),
):
    if session_id:
        store.destroy(session_id)
        log_event("logout", "session")
    response = JSONResponse(status_code=200, content={"ok": True})
    response.delete_cookie(config.session_cookie_name)
    return response
