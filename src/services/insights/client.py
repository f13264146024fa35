"""Insights backend collaborator.

Serves widgets, documents, insights and report aggregates from an
``InsightsStore`` with simulated network latency.
"""

import asyncio
import logging
from datetime import date, datetime, timezone

import numpy as np

from src.config.constants import ReportFrequency, WidgetSize
from src.config.settings import Settings
from src.infrastructure.store import InsightsStore, audit_log
from src.services.charts.formatter import build_chart_data, make_rng
from src.services.errors import CollaboratorError
from src.services.insights.models import AutomatedInsight, Document, ScheduledReport
from src.services.reports.models import ChartData, ReportConfig
from src.services.widgets.models import Widget

logger = logging.getLogger(__name__)

_BYTES_PER_MB = 1024 * 1024


def _file_type(name: str) -> str:
    """Extension of *name*, or 'unknown' when it has none."""
    _, dot, ext = name.rpartition(".")
    return ext if dot and ext else "unknown"


def _format_size(size_bytes: int) -> str:
    return f"{size_bytes / _BYTES_PER_MB:.1f}MB"


class InsightsClient:
    """Backend calls used by the dashboard and the report builder."""

    def __init__(
        self,
        settings: Settings,
        store: InsightsStore,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.rng = rng if rng is not None else make_rng(settings.random_seed)

    async def _latency(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)

    # ------------------------------------------------------------------
    # Widgets
    # ------------------------------------------------------------------

    async def fetch_widgets(self) -> list[Widget]:
        """Fetch the dashboard widgets in display order."""
        await self._latency(self.settings.widget_fetch_delay)
        return [w.model_copy() for w in self.store.widgets]

    async def update_widget_order(self, widgets: list[Widget]) -> list[Widget]:
        """Persist a new widget order and echo the accepted order."""
        await self._latency(self.settings.widget_update_delay)
        known = {w.id for w in self.store.widgets}
        incoming = [w.id for w in widgets]
        if set(incoming) != known or len(incoming) != len(known):
            raise CollaboratorError(f"Widget order {incoming} does not match stored widgets")
        self.store.widgets = [w.model_copy() for w in widgets]
        audit_log("UPDATE", "widget_order", ",".join(str(i) for i in incoming))
        return [w.model_copy() for w in self.store.widgets]

    async def update_widget_size(self, widget_id: int, size: WidgetSize) -> list[Widget]:
        """Persist a widget size and return the full widget list."""
        await self._latency(self.settings.widget_update_delay)
        for widget in self.store.widgets:
            if widget.id == widget_id:
                widget.size = WidgetSize(size)
                audit_log("UPDATE", "widget_size", widget_id)
                return [w.model_copy() for w in self.store.widgets]
        raise CollaboratorError(f"Widget {widget_id} not found")

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    async def generate_report(self, config: ReportConfig) -> ChartData:
        """Aggregate chart data for a report configuration."""
        await self._latency(self.settings.report_generation_delay)
        return build_chart_data(
            config.metrics,
            config.visualization,
            self.rng,
            time_series_points=self.settings.time_series_points,
        )

    async def schedule_report(
        self,
        config: ReportConfig,
        frequency: ReportFrequency,
        time: str,
        recipients: list[str],
        name: str | None = None,
    ) -> ScheduledReport:
        """Register a recurring report delivery."""
        await self._latency(self.settings.report_action_delay)
        schedule = ScheduledReport(
            id=len(self.store.schedules) + 1,
            name=name or config.title,
            frequency=frequency,
            time=time,
            recipients=recipients,
            config=config,
        )
        self.store.schedules.append(schedule)
        audit_log("CREATE", "report_schedule", schedule.id)
        return schedule

    async def share_report(self, emails: list[str], config: ReportConfig) -> bool:
        """Share a report configuration with the given addresses."""
        await self._latency(self.settings.report_action_delay)
        if not emails:
            raise CollaboratorError("No recipients provided")
        self.store.shares.append((list(emails), config.title))
        audit_log("SHARE", "report", config.title)
        return True

    # ------------------------------------------------------------------
    # Documents and insights
    # ------------------------------------------------------------------

    async def fetch_documents(self) -> list[Document]:
        await self._latency(self.settings.document_fetch_delay)
        return [d.model_copy() for d in self.store.documents]

    async def upload_document(
        self,
        name: str,
        size_bytes: int,
        owner: str = "Current User",
    ) -> Document:
        """Record an uploaded document."""
        await self._latency(self.settings.document_upload_delay)
        if not name:
            raise CollaboratorError("Uploaded file has no name")
        document = Document(
            id=len(self.store.documents) + 1,
            name=name,
            type=_file_type(name),
            size=_format_size(size_bytes),
            updated=date.today().isoformat(),
            owner=owner,
        )
        self.store.documents.append(document)
        audit_log("CREATE", "document", document.id)
        return document

    async def fetch_automated_insights(self) -> list[AutomatedInsight]:
        """Fetch automated insights, stamped with the fetch time."""
        await self._latency(self.settings.insights_fetch_delay)
        now = datetime.now(timezone.utc)
        return [i.model_copy(update={"timestamp": now}) for i in self.store.insights]
