"""Report builder session: selection state, debounced regeneration and export."""

import asyncio
import logging
from collections.abc import Sequence

from src.config.constants import (
    NO_METRICS_MESSAGE,
    DateRange,
    ExportFormat,
    NotificationType,
    Visualization,
)
from src.config.metrics import METRIC_CATALOG
from src.config.settings import Settings
from src.services.errors import EmptyMetricSelectionError, ExportPreconditionError, ReportGenerationError
from src.services.export.serializer import ChartSurface, ExportArtifact, csv_artifact, png_artifact
from src.services.notifications.center import NotificationCenter
from src.services.reports.models import ChartData, ReportConfig
from src.services.reports.pipeline import ReportPipeline

logger = logging.getLogger(__name__)


class ReportSession:
    """State of one report builder.

    Every configuration change re-runs source/metric reconciliation and
    schedules one debounced regeneration. Responses to superseded requests
    are discarded.
    """

    def __init__(
        self,
        settings: Settings,
        pipeline: ReportPipeline,
        notifications: NotificationCenter,
        config: ReportConfig | None = None,
        catalog: Sequence[str] = METRIC_CATALOG,
    ) -> None:
        self.settings = settings
        self.pipeline = pipeline
        self.notifications = notifications
        self.catalog = list(catalog)
        self.config = config or ReportConfig()
        self.resolved_metrics: list[str] = []
        self.chart_data: ChartData | None = None
        self.error: str | None = None
        self.is_generating = False
        self.surface: ChartSurface | None = None
        self.export_error: str | None = None
        self._generation = 0
        self._debounce_task: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[ChartData | None]] = set()
        self._reconcile()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def can_submit(self) -> bool:
        return bool(self.config.metrics)

    @property
    def submit_hint(self) -> str | None:
        return None if self.can_submit else NO_METRICS_MESSAGE

    def _reconcile(self) -> None:
        resolver = self.pipeline.resolver
        self.resolved_metrics = resolver.resolve_metrics(self.config.data_sources, self.catalog)
        self.config = resolver.reconcile(self.config, self.resolved_metrics)

    def set_data_sources(self, sources: Sequence[str]) -> None:
        self.config = self.config.model_copy(update={"data_sources": list(dict.fromkeys(sources))})
        self._reconcile()
        self._config_changed()

    def set_catalog(self, catalog: Sequence[str]) -> None:
        self.catalog = list(catalog)
        self._reconcile()
        self._config_changed()

    def toggle_metric(self, metric: str) -> None:
        """Select or deselect a metric; only resolvable metrics can be selected."""
        metrics = list(self.config.metrics)
        if metric in metrics:
            metrics.remove(metric)
        elif metric in self.resolved_metrics:
            metrics.append(metric)
        else:
            logger.debug("Metric %r is not available for the selected sources", metric)
            return
        self.config = self.config.model_copy(update={"metrics": metrics})
        self._config_changed()

    def set_visualization(self, visualization: Visualization) -> None:
        self.config = self.config.model_copy(update={"visualization": Visualization(visualization)})
        self._config_changed()

    def set_date_range(self, date_range: DateRange) -> None:
        self.config = self.config.model_copy(update={"date_range": DateRange(date_range)})
        self._config_changed()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _config_changed(self) -> None:
        """Restart the debounce timer; only the last change inside the window regenerates.

        Only the sleeping timer is cancelled. A regeneration already talking to
        the backend runs to completion and its result is discarded as stale.
        """
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (synchronous use): callers run generate() themselves
            self._debounce_task = None
            return
        self._debounce_task = loop.create_task(self._debounced_generate())

    async def _debounced_generate(self) -> None:
        await asyncio.sleep(self.settings.config_debounce_seconds)
        if self.can_submit:
            task = asyncio.get_running_loop().create_task(self.generate())
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

    async def wait_idle(self) -> None:
        """Wait for a pending debounced regeneration and any in-flight requests."""
        task = self._debounce_task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._inflight:
            await asyncio.gather(*self._inflight)

    async def generate(self) -> ChartData | None:
        """Run the pipeline for the current config.

        On failure the chart data is cleared and an error notification posted.
        A response arriving after a newer request was issued is discarded.
        """
        if not self.can_submit:
            self.notifications.notify(NotificationType.WARNING, NO_METRICS_MESSAGE)
            return None

        self._generation += 1
        token = self._generation
        config = self.config
        self.is_generating = True
        try:
            data = await self.pipeline.generate(config)
        except (ReportGenerationError, EmptyMetricSelectionError) as e:
            if token != self._generation:
                logger.info("Discarding stale report failure (request %s)", token)
                return None
            logger.error("Report generation failed: %s", e)
            self.chart_data = None
            self.error = str(e)
            self.notifications.notify(NotificationType.ERROR, "Failed to generate report")
            return None
        finally:
            if token == self._generation:
                self.is_generating = False

        if token != self._generation:
            logger.info("Discarding stale report response (request %s)", token)
            return None
        self.chart_data = data
        self.error = None
        return data

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    @property
    def title(self) -> str:
        return self.config.title

    def export(self, fmt: ExportFormat, title: str | None = None) -> ExportArtifact | None:
        """
        Export the current chart; warns and returns None when preconditions fail.

        Raises:
            ValueError: *fmt* is not a known export format.
        """
        fmt = ExportFormat(fmt)
        title = title or self.title
        self.export_error = None
        try:
            if fmt == ExportFormat.CSV:
                return csv_artifact(title, self.chart_data)
            return png_artifact(title, self.chart_data, self.surface)
        except ExportPreconditionError as e:
            self.export_error = str(e)
            self.notifications.notify(NotificationType.WARNING, str(e))
            return None
