"""Request/Response models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from src.config.constants import (
    DateRange,
    ExportFormat,
    NotificationType,
    ReportFrequency,
    Visualization,
    WidgetSize,
)
from src.services.reports.models import ChartData, ReportConfig


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")


class OperationResponse(BaseModel):
    """Generic acknowledgement of a write operation."""

    status: str = "success"
    id: str | None = None


class CatalogResponse(_CamelModel):
    """Data sources and the metrics each one exposes."""

    data_sources: list[str] = Field(..., alias="dataSources")
    metrics: list[str] = Field(..., description="Full metric catalog, in display order")
    source_metrics: dict[str, list[str]] = Field(..., alias="sourceMetrics")


class ResolveResponse(_CamelModel):
    """Selectable metrics for a config and the repaired config."""

    resolved_metrics: list[str] = Field(..., alias="resolvedMetrics")
    config: ReportConfig


class ExportRequest(_CamelModel):
    """Chart data to export under a report title."""

    title: str = Field(..., min_length=1)
    data: ChartData | None = None
    visualization: Visualization = Visualization.BAR


class PngExportResponse(_CamelModel):
    filename: str
    data_uri: str = Field(..., alias="dataUri")


class ScheduleRequest(_CamelModel):
    config: ReportConfig
    frequency: ReportFrequency = ReportFrequency.WEEKLY
    time: str = Field("09:00", pattern=r"^\d{2}:\d{2}$")
    recipients: list[str] = Field(default_factory=list)
    name: str | None = None


class ShareRequest(_CamelModel):
    emails: list[str] = Field(..., min_length=1)
    config: ReportConfig


class MoveWidgetRequest(_CamelModel):
    """Drop the widget ``source_id`` onto the widget ``target_id``."""

    source_id: int = Field(..., alias="sourceId")
    target_id: int = Field(..., alias="targetId")


class ResizeWidgetRequest(BaseModel):
    size: WidgetSize


class NotificationResponse(BaseModel):
    id: str
    type: NotificationType
    message: str
    duration: float


class SessionStateResponse(_CamelModel):
    """Current state of the report builder session."""

    config: ReportConfig
    title: str
    resolved_metrics: list[str] = Field(..., alias="resolvedMetrics")
    can_submit: bool = Field(..., alias="canSubmit")
    submit_hint: str | None = Field(None, alias="submitHint")
    is_generating: bool = Field(..., alias="isGenerating")
    chart_data: ChartData | None = Field(None, alias="chartData")
    error: str | None = None


class DataSourcesRequest(_CamelModel):
    data_sources: list[str] = Field(..., alias="dataSources")


class MetricToggleRequest(BaseModel):
    metric: str = Field(..., min_length=1)


class VisualizationRequest(BaseModel):
    visualization: Visualization


class DateRangeRequest(_CamelModel):
    date_range: DateRange = Field(..., alias="dateRange")


class SessionExportRequest(BaseModel):
    format: ExportFormat = ExportFormat.CSV
    title: str | None = None
