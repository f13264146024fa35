"""FastAPI dependencies.

Service objects live on ``app.state``; they are created once in the
application lifespan.
"""

from fastapi import Request

from src.config.settings import Settings
from src.services.insights.client import InsightsClient
from src.services.notifications.center import NotificationCenter
from src.services.reports.pipeline import ReportPipeline
from src.services.reports.session import ReportSession
from src.services.widgets.store import WidgetOrderingStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client(request: Request) -> InsightsClient:
    return request.app.state.client


def get_pipeline(request: Request) -> ReportPipeline:
    return request.app.state.pipeline


def get_widget_store(request: Request) -> WidgetOrderingStore:
    return request.app.state.widget_store


def get_notifications(request: Request) -> NotificationCenter:
    return request.app.state.notifications


def get_report_session(request: Request) -> ReportSession:
    return request.app.state.report_session
