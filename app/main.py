import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth.session import InMemorySessionStore, SessionStore
from app.core.config import AppConfig, load_config
from app.core.errors import AppError
from app.observability.logger import init_sentry, log_error
from app.routes.auth import router as auth_router
from app.routes.health import router as health_router
from app.routes.meetings import router as meetings_router
from app.routes.summarize import router as summarize_router

logger = logging.getLogger("meetings")
logging.basicConfig(level=logging.INFO)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    log_error(exc, {"path": request.url.path, "code": exc.code, "status_code": exc.status_code})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log_error(exc, {"path": request.url.path, "code": "invalid_request", "status_code": 400})
    return JSONResponse(status_code=400, content={"error": "invalid_request"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error(exc, {"path": request.url.path, "code": "internal_error", "status_code": 500})
    return JSONResponse(status_code=500, content={"error": "internal_error"})


def create_app(config: Optional[AppConfig] = None, session_store: Optional[SessionStore] = None) -> FastAPI:
    config = config or load_config()

    app = FastAPI(title="Meeting Summaries")
    app.state.config = config
    if session_store is None:
        session_store = InMemorySessionStore(ttl_seconds=config.session_max_age)
    app.state.session_store = session_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(meetings_router, prefix="/api", tags=["meetings"])
    app.include_router(summarize_router, prefix="/api", tags=["summarize"])
    app.include_router(health_router, tags=["health"])

    logger.info(f"Allowed CORS origins: {', '.join(config.allowed_origins)}")
    return app


load_dotenv()
init_sentry()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.config.port)
