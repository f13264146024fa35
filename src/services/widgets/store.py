"""Dashboard widget ordering and sizing."""

import logging
from typing import Protocol

import numpy as np

from src.config.constants import NotificationType, PipelineStep, WidgetSize
from src.config.metrics import preview_metric_for
from src.infrastructure.logging.logger import StructuredLogger
from src.infrastructure.logging.step_timer import timed_step
from src.services.charts.formatter import build_chart_data
from src.services.notifications.center import NotificationCenter
from src.services.reports.models import ChartData
from src.services.widgets.models import Widget

logger = logging.getLogger(__name__)


class WidgetBackend(Protocol):
    async def fetch_widgets(self) -> list[Widget]: ...

    async def update_widget_order(self, widgets: list[Widget]) -> list[Widget]: ...

    async def update_widget_size(self, widget_id: int, size: WidgetSize) -> list[Widget]: ...


def move_widget(widgets: list[Widget], source_index: int, target_index: int) -> list[Widget]:
    """Return a new list with the widget at *source_index* moved to *target_index*."""
    reordered = list(widgets)
    moved = reordered.pop(source_index)
    reordered.insert(target_index, moved)
    return reordered


def widget_preview(widget: Widget, rng: np.random.Generator, time_series_points: int = 12) -> ChartData:
    """Sample preview chart data for a widget tile."""
    metric = preview_metric_for(widget.title)
    return build_chart_data(
        [metric],
        widget.chart_kind.visualization,
        rng,
        time_series_points=time_series_points,
    )


class WidgetOrderingStore:
    """Ordered dashboard widgets driven by drag-and-drop and resize actions.

    Changes are applied in memory first, then persisted; a failed persist
    restores the previous state and posts an error notification.
    """

    def __init__(self, backend: WidgetBackend, notifications: NotificationCenter) -> None:
        self.backend = backend
        self.notifications = notifications
        self.widgets: list[Widget] = []
        self.dragged: Widget | None = None
        self.structured = StructuredLogger(__name__)

    def _index_of(self, widget_id: int) -> int | None:
        for index, widget in enumerate(self.widgets):
            if widget.id == widget_id:
                return index
        return None

    def get(self, widget_id: int) -> Widget | None:
        index = self._index_of(widget_id)
        return None if index is None else self.widgets[index]

    def _restore_order(self, order: list[int]) -> None:
        """Put the current widget objects back into *order*, keeping their current sizes."""
        by_id = {w.id: w for w in self.widgets}
        self.widgets = [by_id[widget_id] for widget_id in order if widget_id in by_id]

    async def load(self) -> list[Widget]:
        """Load widgets from the backend; keep the current list on failure."""
        try:
            self.widgets = await self.backend.fetch_widgets()
        except Exception as e:
            logger.error("Failed to load widgets: %s", e, exc_info=True)
            self.notifications.notify(NotificationType.ERROR, "Failed to load dashboard widgets")
        return self.widgets

    def start_drag(self, widget: Widget) -> None:
        self.dragged = widget

    def end_drag(self) -> None:
        self.dragged = None

    async def drop_on(self, target: Widget) -> bool:
        """Move the dragged widget to *target*'s position. Returns True if persisted."""
        if self.dragged is None:
            return False
        source_index = self._index_of(self.dragged.id)
        target_index = self._index_of(target.id)
        if source_index is None or target_index is None or source_index == target_index:
            return False

        previous_order = [w.id for w in self.widgets]
        self.widgets = move_widget(self.widgets, source_index, target_index)

        try:
            async with timed_step(
                PipelineStep.WIDGET_ORDER,
                self.structured,
                widget_id=self.dragged.id,
                from_index=source_index,
                to_index=target_index,
            ):
                await self.backend.update_widget_order(list(self.widgets))
        except Exception as e:
            logger.error("Failed to persist widget order: %s", e)
            self._restore_order(previous_order)
            self.notifications.notify(NotificationType.ERROR, "Failed to update widget order")
            return False
        return True

    async def resize(self, widget_id: int, size: WidgetSize) -> bool:
        """Resize a widget. Returns True if persisted."""
        index = self._index_of(widget_id)
        if index is None:
            return False

        previous = self.widgets[index]
        self.widgets[index] = previous.model_copy(update={"size": WidgetSize(size)})

        try:
            async with timed_step(
                PipelineStep.WIDGET_SIZE,
                self.structured,
                widget_id=widget_id,
                size=WidgetSize(size).value,
            ):
                await self.backend.update_widget_size(widget_id, WidgetSize(size))
        except Exception as e:
            logger.error("Failed to persist widget size: %s", e)
            current = self._index_of(widget_id)
            # A later resize of the same widget wins over this revert
            if current is not None and self.widgets[current].size == WidgetSize(size):
                self.widgets[current] = self.widgets[current].model_copy(update={"size": previous.size})
            self.notifications.notify(NotificationType.ERROR, "Failed to update widget size")
            return False
        return True
