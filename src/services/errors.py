"""Error types raised by the insights services."""

from src.config.constants import NO_METRICS_MESSAGE


class InsightsError(Exception):
    """Base class for insights service errors."""


class CollaboratorError(InsightsError):
    """A call to the backend collaborator failed."""


class EmptyMetricSelectionError(InsightsError):
    """A report was submitted without any metric selected."""

    def __init__(self, message: str = NO_METRICS_MESSAGE) -> None:
        super().__init__(message)


class ExportPreconditionError(InsightsError):
    """Export was requested without data or without a rendered chart."""


class ReportGenerationError(InsightsError):
    """Report generation failed; ``__cause__`` holds the underlying error."""

    def __init__(self, message: str, report_id: str | None = None) -> None:
        super().__init__(message)
        self.report_id = report_id
