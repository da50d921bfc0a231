"""FastAPI application factory.

create_app() returns a configured FastAPI instance. The token service
and the conversation proxy are built here, once, from Settings and kept
on app.state; route dependencies read them from there. Tests call
create_app() with their own settings and a fake upstream.

Errors: every askgate.errors.AppError becomes {"success": false, "error"}
with its status. Anything else is logged and answered with a generic 500.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from askgate import __version__
from askgate.api import api_router
from askgate.auth.tokens import TokenService
from askgate.chat.gemini import build_upstream
from askgate.chat.proxy import ChatUpstream, ConversationProxy
from askgate.config import Settings, settings as default_settings
from askgate.errors import AppError, Internal
from askgate.middleware.request_id import RequestIdMiddleware
from askgate.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    settings: Settings = app.state.settings
    logger.info(
        "askgate.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    if not app.state.proxy.configured:
        logger.warning(
            "askgate.gemini_unavailable",
            detail="/api/ask will return 503 until Gemini is configured",
        )

    yield

    logger.info("askgate.shutdown")

    from askgate.db.engine import engine
    await engine.dispose()


def _error_body(message: str) -> dict:
    return {"success": False, "error": message}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message),
        headers=exc.headers,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body') or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content=_error_body(f"Invalid request: {problems}"),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("askgate.unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content=_error_body(Internal().message))


def create_app(
    settings: Optional[Settings] = None,
    upstream: Optional[ChatUpstream] = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    upstream defaults to a Gemini client built from settings (None when
    no API key is configured, which makes /api/ask answer 503).
    """
    settings = settings or default_settings

    app = FastAPI(
        title="askgate",
        description="Token-authenticated conversational proxy for Google Gemini",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.tokens = TokenService(
        secret=settings.jwt_secret,
        ttl=settings.token_ttl,
        algorithm=settings.jwt_algorithm,
    )
    if upstream is None:
        upstream = build_upstream(settings)
    app.state.proxy = ConversationProxy(upstream)

    # ── Errors ────────────────────────────────────────────────
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    # Static frontend last, so /api routes take precedence.
    static_dir = Path(settings.static_dir)
    if settings.static_dir and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


# Default app instance (used by uvicorn: askgate.main:app)
app = create_app()
