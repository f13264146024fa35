"""Interactive report builder endpoints.

Selection changes reconcile immediately and schedule a debounced
regeneration in the background; ``GET`` returns whatever state is current.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from src.api.dependencies import get_report_session
from src.api.headers import attachment_disposition
from src.api.models import (
    DataSourcesRequest,
    DateRangeRequest,
    MetricToggleRequest,
    PngExportResponse,
    SessionExportRequest,
    SessionStateResponse,
    VisualizationRequest,
)
from src.config.constants import ExportFormat
from src.services.export.surface import PlotlyChartSurface
from src.services.reports.session import ReportSession

router = APIRouter()


def _state(session: ReportSession) -> SessionStateResponse:
    return SessionStateResponse(
        config=session.config,
        title=session.title,
        resolved_metrics=session.resolved_metrics,
        can_submit=session.can_submit,
        submit_hint=session.submit_hint,
        is_generating=session.is_generating,
        chart_data=session.chart_data,
        error=session.error,
    )


@router.get("", response_model=SessionStateResponse)
async def get_session(session: ReportSession = Depends(get_report_session)) -> SessionStateResponse:
    """Current selection, resolved metrics and chart."""
    return _state(session)


@router.put("/data-sources", response_model=SessionStateResponse)
async def set_data_sources(
    request: DataSourcesRequest,
    session: ReportSession = Depends(get_report_session),
) -> SessionStateResponse:
    """Replace the selected data sources; orphaned metric selections are dropped."""
    session.set_data_sources(request.data_sources)
    return _state(session)


@router.post("/metrics/toggle", response_model=SessionStateResponse)
async def toggle_metric(
    request: MetricToggleRequest,
    session: ReportSession = Depends(get_report_session),
) -> SessionStateResponse:
    session.toggle_metric(request.metric)
    return _state(session)


@router.put("/visualization", response_model=SessionStateResponse)
async def set_visualization(
    request: VisualizationRequest,
    session: ReportSession = Depends(get_report_session),
) -> SessionStateResponse:
    session.set_visualization(request.visualization)
    return _state(session)


@router.put("/date-range", response_model=SessionStateResponse)
async def set_date_range(
    request: DateRangeRequest,
    session: ReportSession = Depends(get_report_session),
) -> SessionStateResponse:
    session.set_date_range(request.date_range)
    return _state(session)


@router.post("/generate", response_model=SessionStateResponse)
async def generate(session: ReportSession = Depends(get_report_session)) -> SessionStateResponse:
    """Generate now and return once no regeneration is outstanding.

    Failures and an empty selection are reported through notifications.
    """
    await session.generate()
    await session.wait_idle()
    return _state(session)


@router.post("/export", response_model=None)
async def export(
    request: SessionExportRequest,
    session: ReportSession = Depends(get_report_session),
) -> Response | PngExportResponse:
    """Export the session chart as a CSV download or a PNG data URI."""
    if request.format == ExportFormat.PNG:
        data = session.chart_data
        session.surface = (
            PlotlyChartSurface(data, session.config.visualization, request.title or session.title)
            if data is not None and data.datasets
            else None
        )

    artifact = session.export(request.format, request.title)
    if artifact is None:
        raise HTTPException(status_code=409, detail=session.export_error)

    if request.format == ExportFormat.CSV:
        return Response(
            content=artifact.content,
            media_type=artifact.media_type,
            headers={"Content-Disposition": attachment_disposition(artifact.filename)},
        )
    return PngExportResponse(filename=artifact.filename, data_uri=artifact.content)
