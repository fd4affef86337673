from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authapi.api.auth import router as auth_router
from authapi.api.errors import register_exception_handlers
from authapi.api.health import router as health_router
from authapi.api.metrics_endpoint import router as metrics_router
from authapi.api.profile import router as profile_router
from authapi.core.config import SETTINGS, Settings
from authapi.core.logging import setup_logging
from authapi.middleware.metrics import MetricsMiddleware
from authapi.middleware.request_context import (
    RequestContextMiddleware,
    install_log_filter,
)
from authapi.repos.factory import ActiveStore, open_user_repo
from authapi.repos.user_repo import UserRepo
from authapi.services.auth_service import AuthService
from authapi.services.token_service import TokenIssuer, parse_duration

logger = logging.getLogger(__name__)


def _wire(app: FastAPI, settings: Settings, repo: UserRepo) -> None:
    tokens = TokenIssuer(settings.jwt_secret, parse_duration(settings.jwt_expires_in))
    app.state.token_issuer = tokens
    app.state.auth_service = AuthService(repo, tokens)


def create_app(
    settings: Settings | None = None,
    *,
    user_repo: UserRepo | None = None,
) -> FastAPI:
    """Build the application.

    With *user_repo* given (tests, local experiments) that repo is wired
    immediately and no database is touched.  Otherwise the lifespan opens
    the backend named by DATABASE_DRIVER and closes it on shutdown.
    """
    settings = settings or SETTINGS

    if settings.jwt_secret is None:
        logger.warning("JWT_SECRET is not set; token issuance will fail with 500")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if user_repo is not None:
            yield
            return
        async with open_user_repo(settings) as store:
            app.state.store = store
            _wire(app, settings, store.repo)
            yield

    app = FastAPI(
        title="auth-backend",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )

    if user_repo is not None:
        _wire(app, settings, user_repo)
        app.state.store = ActiveStore(
            driver="memory", repo=user_repo, ping=_always_up
        )

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Last added runs first: RequestContext → Metrics → CORS → route
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(metrics_router)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(profile_router)

    return app


async def _always_up() -> None:
    return None


def build_default_app() -> FastAPI:
    setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
    install_log_filter()
    app = create_app(SETTINGS)
    logger.info(
        "auth-backend configured  env=%s driver=%s log_level=%s port=%d",
        SETTINGS.app_env,
        SETTINGS.database_driver,
        SETTINGS.log_level,
        SETTINGS.port,
    )
    return app
