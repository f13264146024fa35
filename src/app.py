"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routers import api_router
from src.config.settings import Settings, get_settings
from src.infrastructure.logging.logger import setup_logging
from src.infrastructure.store import InsightsStore
from src.services.insights.client import InsightsClient
from src.services.notifications.center import NotificationCenter
from src.services.reports.pipeline import ReportPipeline
from src.services.reports.session import ReportSession
from src.services.widgets.store import WidgetOrderingStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around one backend store for the process lifetime."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup and shutdown lifecycle."""
        logger.info("Starting %s %s", settings.app_name, settings.app_version)
        store = InsightsStore.seeded()
        client = InsightsClient(settings, store)
        notifications = NotificationCenter(settings.notification_duration)
        widget_store = WidgetOrderingStore(client, notifications)

        app.state.settings = settings
        app.state.store = store
        app.state.client = client
        app.state.notifications = notifications
        pipeline = ReportPipeline(settings, client)
        app.state.pipeline = pipeline
        app.state.report_session = ReportSession(settings, pipeline, notifications)
        app.state.widget_store = widget_store

        await widget_store.load()
        logger.info("Loaded %d dashboard widgets", len(widget_store.widgets))
        yield
        await app.state.report_session.wait_idle()
        logger.info("Shutting down %s", settings.app_name)

    app = FastAPI(
        title=settings.app_name,
        description="Program reporting and dashboard insights API",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")
    return app


_settings = get_settings()

setup_logging(
    level=_settings.log_level,
    json_output=not _settings.debug,
    silence_noisy_loggers=True,
)

app = create_app(_settings)
