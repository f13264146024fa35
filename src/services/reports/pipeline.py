"""Report generation pipeline."""

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from src.config.constants import BatchStatus, PipelineStep
from src.config.settings import Settings
from src.infrastructure.logging.logger import StructuredLogger
from src.infrastructure.logging.step_timer import timed_step
from src.services.errors import EmptyMetricSelectionError, ReportGenerationError
from src.services.reports.models import BatchReport, ChartData, ReportConfig
from src.services.reports.resolver import ReportConfigResolver
from src.utils.retry import run_with_retry

logger = logging.getLogger(__name__)


class ReportBackend(Protocol):
    async def generate_report(self, config: ReportConfig) -> ChartData: ...


class ReportPipeline:
    """Turns report configurations into chart data."""

    def __init__(
        self,
        settings: Settings,
        backend: ReportBackend,
        resolver: ReportConfigResolver | None = None,
    ) -> None:
        self.settings = settings
        self.backend = backend
        self.resolver = resolver or ReportConfigResolver()
        self.structured = StructuredLogger(__name__)

    def resolve(self, config: ReportConfig) -> tuple[list[str], ReportConfig]:
        """Resolve selectable metrics for the config's sources and repair its selection."""
        return self.resolver.apply(config)

    async def generate(self, config: ReportConfig) -> ChartData:
        """
        Generate chart data for one report.

        Raises:
            EmptyMetricSelectionError: No metric is selected.
            ReportGenerationError: The backend call failed.
        """
        if not config.metrics:
            raise EmptyMetricSelectionError()

        async with timed_step(
            PipelineStep.GENERATE,
            self.structured,
            metrics=config.metrics,
            visualization=config.visualization.value,
        ) as step:
            try:
                data = await run_with_retry(
                    lambda: self.backend.generate_report(config),
                    max_retries=self.settings.report_retry_attempts,
                    initial_delay=self.settings.retry_initial_delay,
                    backoff_factor=self.settings.retry_backoff_factor,
                )
            except Exception as e:
                raise ReportGenerationError(f"Failed to generate report: {e}") from e
            step.set_result(labels=len(data.labels), datasets=len(data.datasets))
        return data

    async def generate_batch(
        self,
        reports: Sequence[BatchReport],
        on_status: Callable[[BatchReport], None] | None = None,
    ) -> list[BatchReport]:
        """
        Generate reports one after another, in list order.

        Reports without metrics stay pending. Each other report moves
        pending -> generating -> completed|error before the next one starts;
        a failure never aborts the rest of the batch.
        """
        for report in reports:
            if not report.metrics:
                logger.info("Skipping batch report %s: no metrics selected", report.id)
                continue

            report.status = BatchStatus.GENERATING
            report.error = None
            if on_status:
                on_status(report)

            try:
                report.result = await self.generate(report)
                report.status = BatchStatus.COMPLETED
            except Exception as e:
                logger.error("Batch report %s failed: %s", report.id, e)
                report.result = None
                report.error = str(e)
                report.status = BatchStatus.ERROR

            if on_status:
                on_status(report)

        return list(reports)
