from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from taskmanager.core.config import Settings, settings as default_settings
from taskmanager.core.database import Base, make_engine, make_session_factory
from taskmanager.core.errors import UnhandledErrorMiddleware, install_error_handlers
from taskmanager.core.logging import configure_logging
from taskmanager.core.middleware import (
    AccessLogMiddleware,
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)
from taskmanager.routers import health, tasks, stats

logger = logging.getLogger(__name__)


def create_app(engine: Engine = None, settings: Settings = None) -> FastAPI:
    """Build the API around an injected engine (connection pool)."""
    settings = settings or default_settings
    engine = engine or make_engine(settings.DATABASE_URL)
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Init DB
        Base.metadata.create_all(bind=engine)
        logger.info("Task API started (environment=%s)", settings.ENVIRONMENT)
        yield
        logger.info("Gracefully shutting down...")
        engine.dispose()

    app = FastAPI(
        title="Task Manager API",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.settings = settings

    # Middlewares (le dernier ajouté est le plus externe)
    app.add_middleware(UnhandledErrorMiddleware, show_details=settings.is_development)
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(
            max_requests=settings.RATE_LIMIT_MAX,
            window_seconds=settings.RATE_LIMIT_WINDOW_MIN * 60
        )
    )
    if settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"]
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=".*",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"]
        )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(AccessLogMiddleware)

    install_error_handlers(app, show_details=settings.is_development)

    # Routes
    app.include_router(health.router, prefix="/health")
    app.include_router(tasks.router)
    app.include_router(stats.router)

    return app


def run() -> None:
    uvicorn.run(
        "taskmanager.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_config=None
    )


app = create_app()
