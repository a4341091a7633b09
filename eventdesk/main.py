from __future__ import annotations

import secrets
from contextlib import asynccontextmanager
from datetime import timedelta

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from eventdesk.api.errors import install_error_handlers
from eventdesk.api.v1.router import router as v1_router
from eventdesk.auth.jwt import SessionTokenIssuer
from eventdesk.core.clock import Clock, utc_now
from eventdesk.core.config import Settings, settings as default_settings
from eventdesk.core.logging import configure_logging
from eventdesk.db import SessionLocal, build_engine, build_session_factory, engine, init_db
from eventdesk.mail import Mailer, build_mailer
from eventdesk.middleware.rate_limit import RateLimitMiddleware
from eventdesk.middleware.request_id import RequestIdMiddleware
from eventdesk.middleware.security_headers import SecurityHeadersMiddleware

MIN_SECRET_LENGTH = 32

logger = structlog.get_logger()


def _signing_secret(settings: Settings) -> str:
    secret = settings.jwt_secret
    if secret and len(secret) >= MIN_SECRET_LENGTH:
        return secret
    if settings.is_dev:
        logger.warning("jwt_secret_generated", reason="JWT_SECRET unset or too short")
        return secrets.token_urlsafe(MIN_SECRET_LENGTH)
    raise RuntimeError(f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(app.state.engine)
    yield
    if app.state.engine is not engine:
        app.state.engine.dispose()


def create_app(
    settings: Settings = default_settings,
    *,
    mailer: Mailer | None = None,
    clock: Clock = utc_now,
) -> FastAPI:
    configure_logging()

    app = FastAPI(title="eventdesk API", lifespan=lifespan)

    # The signing key is read once here and lives on the token issuer.
    app.state.settings = settings
    app.state.clock = clock
    if settings.database_url == default_settings.database_url:
        app.state.engine = engine
        app.state.session_factory = SessionLocal
    else:
        app.state.engine = build_engine(settings.database_url, settings.db_timeout_seconds)
        app.state.session_factory = build_session_factory(app.state.engine)
    app.state.tokens = SessionTokenIssuer(
        _signing_secret(settings),
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        ttl=timedelta(days=settings.session_token_ttl_days),
        clock=clock,
    )
    app.state.mailer = mailer or build_mailer(settings)
    app.state.reset_ttl = timedelta(seconds=settings.password_reset_ttl_seconds)

    # Starlette runs the LAST added middleware FIRST (outermost).
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    install_error_handlers(app)
    if settings.metrics_enabled:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    @app.get("/")
    def root():
        return {"name": "eventdesk API", "status": "ok"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(v1_router, prefix="/v1")
    return app


app = create_app()
