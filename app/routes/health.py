import os
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import AppConfig
from app.core.dependencies import get_config


router = APIRouter()


@router.get("/healthz")
async def health_check(config: AppConfig = Depends(get_config)) -> JSONResponse:
    """
    Health check endpoint.

    Reports which upstream credentials are configured, never their values.
    """
    response = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "configured": {
            "google_oauth": bool(config.google_client_id and config.google_client_secret),
            "composio": bool(config.composio_api_key),
            "openai": bool(config.openai_api_key),
        },
        "observability": {
            "enabled": os.getenv("OBS_ENABLED", "false").lower() == "true",
            "sentry_configured": bool(os.getenv("SENTRY_DSN")),
        },
    }
    return JSONResponse(status_code=200, content=response)
