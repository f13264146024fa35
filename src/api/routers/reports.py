"""Report builder endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from src.api.dependencies import get_client, get_notifications, get_pipeline
from src.api.headers import attachment_disposition
from src.api.models import (
    CatalogResponse,
    ExportRequest,
    OperationResponse,
    PngExportResponse,
    ResolveResponse,
    ScheduleRequest,
    ShareRequest,
)
from src.config.constants import NotificationType
from src.config.metrics import DATA_SOURCE_METRICS, DATA_SOURCES, METRIC_CATALOG
from src.services.errors import (
    CollaboratorError,
    EmptyMetricSelectionError,
    ExportPreconditionError,
    ReportGenerationError,
)
from src.services.charts.formatter import style_chart
from src.services.export.serializer import csv_artifact, png_artifact
from src.services.export.surface import PlotlyChartSurface
from src.services.insights.client import InsightsClient
from src.services.insights.models import ScheduledReport
from src.services.notifications.center import NotificationCenter
from src.services.reports.models import BatchReport, ChartData, ReportConfig
from src.services.reports.pipeline import ReportPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog() -> CatalogResponse:
    """List data sources and the metrics each exposes."""
    return CatalogResponse(
        data_sources=list(DATA_SOURCES),
        metrics=list(METRIC_CATALOG),
        source_metrics={
            source: [m for m in METRIC_CATALOG if m in DATA_SOURCE_METRICS[source]]
            for source in DATA_SOURCES
        },
    )


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_config(
    config: ReportConfig,
    pipeline: ReportPipeline = Depends(get_pipeline),
) -> ResolveResponse:
    """Resolve selectable metrics for the config's data sources and drop stale selections."""
    resolved, repaired = pipeline.resolve(config)
    return ResolveResponse(resolved_metrics=resolved, config=repaired)


@router.post("/generate", response_model=ChartData, response_model_exclude_none=True)
async def generate_report(
    config: ReportConfig,
    styled: bool = False,
    pipeline: ReportPipeline = Depends(get_pipeline),
    notifications: NotificationCenter = Depends(get_notifications),
) -> ChartData:
    """Generate chart data for a report configuration."""
    try:
        data = await pipeline.generate(config)
    except EmptyMetricSelectionError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ReportGenerationError as e:
        notifications.notify(NotificationType.ERROR, "Failed to generate report")
        raise HTTPException(status_code=502, detail=str(e)) from e
    return style_chart(data, config.visualization) if styled else data


@router.post("/batch", response_model=list[BatchReport], response_model_exclude_none=True)
async def generate_batch(
    reports: list[BatchReport],
    pipeline: ReportPipeline = Depends(get_pipeline),
) -> list[BatchReport]:
    """Generate several reports sequentially; failures are reported per report."""
    return await pipeline.generate_batch(reports)


@router.post("/export/csv")
async def export_csv(request: ExportRequest) -> Response:
    """Download chart data as CSV."""
    try:
        artifact = csv_artifact(request.title, request.data)
    except ExportPreconditionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": attachment_disposition(artifact.filename)},
    )


@router.post("/export/png", response_model=PngExportResponse)
async def export_png(request: ExportRequest) -> PngExportResponse:
    """Render chart data and return it as a PNG data URI."""
    surface = None
    if request.data is not None and request.data.datasets:
        surface = PlotlyChartSurface(request.data, request.visualization, request.title)
    try:
        artifact = png_artifact(request.title, request.data, surface)
    except ExportPreconditionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return PngExportResponse(filename=artifact.filename, data_uri=artifact.content)


@router.post("/schedule", response_model=ScheduledReport, status_code=201)
async def schedule_report(
    request: ScheduleRequest,
    client: InsightsClient = Depends(get_client),
) -> ScheduledReport:
    """Schedule recurring delivery of a report."""
    if not request.config.metrics:
        raise HTTPException(status_code=422, detail=str(EmptyMetricSelectionError()))
    return await client.schedule_report(
        request.config,
        request.frequency,
        request.time,
        request.recipients,
        name=request.name,
    )


@router.post("/share", response_model=OperationResponse)
async def share_report(
    request: ShareRequest,
    client: InsightsClient = Depends(get_client),
) -> OperationResponse:
    """Share a report configuration by email."""
    try:
        await client.share_report(request.emails, request.config)
    except CollaboratorError as e:
        logger.error("Failed to share report: %s", e)
        raise HTTPException(status_code=502, detail="Failed to share report") from e
    return OperationResponse(id=request.config.title)
