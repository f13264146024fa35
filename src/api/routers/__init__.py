"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from src.api.router import router as health_router
from src.api.routers.documents import router as documents_router
from src.api.routers.insights import router as insights_router
from src.api.routers.reports import router as reports_router
from src.api.routers.session import router as session_router
from src.api.routers.widgets import router as widgets_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])
api_router.include_router(session_router, prefix="/reports/session", tags=["reports"])
api_router.include_router(widgets_router, prefix="/widgets", tags=["widgets"])
api_router.include_router(documents_router, prefix="/documents", tags=["documents"])
api_router.include_router(insights_router, tags=["insights"])
