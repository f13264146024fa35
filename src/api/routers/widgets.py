"""Dashboard widget endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_app_settings, get_client, get_widget_store
from src.api.models import MoveWidgetRequest, ResizeWidgetRequest
from src.config.settings import Settings
from src.services.charts.formatter import style_chart
from src.services.insights.client import InsightsClient
from src.services.reports.models import ChartData
from src.services.widgets.models import Widget
from src.services.widgets.store import WidgetOrderingStore, widget_preview

router = APIRouter()


def _require_widget(store: WidgetOrderingStore, widget_id: int) -> Widget:
    widget = store.get(widget_id)
    if widget is None:
        raise HTTPException(status_code=404, detail="Widget not found")
    return widget


@router.get("/", response_model=list[Widget])
async def list_widgets(
    store: WidgetOrderingStore = Depends(get_widget_store),
) -> list[Widget]:
    """List dashboard widgets in display order."""
    if not store.widgets:
        await store.load()
    return store.widgets


@router.post("/move", response_model=list[Widget])
async def move_widget(
    request: MoveWidgetRequest,
    store: WidgetOrderingStore = Depends(get_widget_store),
) -> list[Widget]:
    """Drop one widget onto another's position."""
    source = _require_widget(store, request.source_id)
    target = _require_widget(store, request.target_id)
    store.start_drag(source)
    try:
        moved = await store.drop_on(target)
    finally:
        store.end_drag()
    if not moved and source.id != target.id:
        raise HTTPException(status_code=502, detail="Failed to update widget order")
    return store.widgets


@router.patch("/{widget_id}/size", response_model=Widget)
async def resize_widget(
    widget_id: int,
    request: ResizeWidgetRequest,
    store: WidgetOrderingStore = Depends(get_widget_store),
) -> Widget:
    """Change a widget's size."""
    _require_widget(store, widget_id)
    if not await store.resize(widget_id, request.size):
        raise HTTPException(status_code=502, detail="Failed to update widget size")
    return _require_widget(store, widget_id)


@router.get("/{widget_id}/preview", response_model=ChartData, response_model_exclude_none=True)
async def preview_widget(
    widget_id: int,
    store: WidgetOrderingStore = Depends(get_widget_store),
    client: InsightsClient = Depends(get_client),
    settings: Settings = Depends(get_app_settings),
) -> ChartData:
    """Sample preview chart data for a widget tile."""
    widget = _require_widget(store, widget_id)
    data = widget_preview(widget, client.rng, settings.time_series_points)
    return style_chart(data, widget.chart_kind.visualization)
