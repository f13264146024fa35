"""Tests for the report builder session."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.config.constants import ExportFormat, NotificationType, Visualization
from src.services.reports.models import ChartData, Dataset, ReportConfig
from src.services.reports.pipeline import ReportPipeline
from src.services.reports.session import ReportSession


def _chart(label: str) -> ChartData:
    return ChartData(labels=["Jan", "Feb"], datasets=[Dataset(label=label, data=[1, 2])])


@pytest.fixture
def backend():
    backend = AsyncMock()
    backend.generate_report.return_value = _chart("X")
    return backend


@pytest.fixture
def make_session(settings, backend, notifications):
    def _make(config: ReportConfig | None = None) -> ReportSession:
        return ReportSession(settings, ReportPipeline(settings, backend), notifications, config)

    return _make


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


class TestSelection:
    def test_starts_empty_and_blocked(self, make_session):
        session = make_session()
        assert session.resolved_metrics == []
        assert session.can_submit is False
        assert session.submit_hint == "select at least one metric"

    def test_changing_sources_drops_orphaned_metrics(self, make_session):
        session = make_session(
            ReportConfig(metrics=["Risk: Level", "Budget Utilization"], data_sources=["Financials", "Risks"])
        )
        assert session.config.metrics == ["Risk: Level", "Budget Utilization"]

        session.set_data_sources(["Financials"])

        assert "Risk: Level" not in session.resolved_metrics
        assert session.config.metrics == ["Budget Utilization"]
        assert session.config.data_sources == ["Financials"]

    def test_toggle_adds_and_removes(self, make_session):
        session = make_session(ReportConfig(data_sources=["Risks"]))
        session.toggle_metric("Risk: Score")
        assert session.config.metrics == ["Risk: Score"]
        assert session.can_submit is True
        session.toggle_metric("Risk: Score")
        assert session.config.metrics == []

    def test_toggle_ignores_unavailable_metric(self, make_session):
        session = make_session(ReportConfig(data_sources=["Risks"]))
        session.toggle_metric("Budget Utilization")
        assert session.config.metrics == []

    def test_narrower_catalog_repairs_selection(self, make_session):
        session = make_session(ReportConfig(metrics=["Risk: Level", "Risk: Score"], data_sources=["Risks"]))
        session.set_catalog(["Risk: Score"])
        assert session.resolved_metrics == ["Risk: Score"]
        assert session.config.metrics == ["Risk: Score"]

    def test_title_joins_metrics(self, make_session):
        session = make_session(ReportConfig(metrics=["Risk: Level", "Risk: Score"], data_sources=["Risks"]))
        assert session.title == "Risk: Level, Risk: Score Report"


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


class TestGenerate:
    @pytest.mark.asyncio
    async def test_success_stores_chart(self, make_session):
        session = make_session(ReportConfig(metrics=["Risk: Score"], data_sources=["Risks"]))
        data = await session.generate()
        assert data == _chart("X")
        assert session.chart_data == data
        assert session.error is None
        assert session.is_generating is False

    @pytest.mark.asyncio
    async def test_empty_selection_warns_without_calling_backend(self, make_session, backend, notifications):
        session = make_session()
        assert await session.generate() is None
        backend.generate_report.assert_not_called()
        [note] = notifications.active()
        assert note.type == NotificationType.WARNING

    @pytest.mark.asyncio
    async def test_failure_clears_chart_and_notifies(self, make_session, backend, notifications):
        session = make_session(ReportConfig(metrics=["Risk: Score"], data_sources=["Risks"]))
        await session.generate()
        backend.generate_report.side_effect = RuntimeError("backend down")

        assert await session.generate() is None

        assert session.chart_data is None
        assert "backend down" in session.error
        [note] = notifications.active()
        assert note.type == NotificationType.ERROR
        assert note.message == "Failed to generate report"

    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self, make_session, backend):
        started = asyncio.Event()
        release = asyncio.Event()
        calls = 0

        async def fake_generate(config):
            nonlocal calls
            calls += 1
            if calls == 1:
                started.set()
                await release.wait()
                return _chart("old")
            return _chart("new")

        backend.generate_report.side_effect = fake_generate
        session = make_session(ReportConfig(metrics=["Risk: Score"], data_sources=["Risks"]))

        slow = asyncio.create_task(session.generate())
        await started.wait()
        fresh = await session.generate()
        release.set()
        stale = await slow

        assert fresh.datasets[0].label == "new"
        assert stale is None
        assert session.chart_data.datasets[0].label == "new"
        assert session.is_generating is False

    @pytest.mark.asyncio
    async def test_rapid_changes_regenerate_once(self, settings, backend, notifications):
        settings.config_debounce_seconds = 0.05
        session = ReportSession(
            settings,
            ReportPipeline(settings, backend),
            notifications,
            ReportConfig(data_sources=["Risks"]),
        )

        session.toggle_metric("Risk: Score")
        session.toggle_metric("Risk: Level")
        session.set_visualization(Visualization.LINE)
        await session.wait_idle()

        assert backend.generate_report.await_count == 1
        config = backend.generate_report.await_args.args[0]
        assert config.metrics == ["Risk: Score", "Risk: Level"]
        assert config.visualization == Visualization.LINE

    @pytest.mark.asyncio
    async def test_change_to_empty_selection_does_not_generate(self, make_session, backend):
        session = make_session(ReportConfig(metrics=["Risk: Score"], data_sources=["Risks"]))
        session.toggle_metric("Risk: Score")
        await session.wait_idle()
        backend.generate_report.assert_not_called()


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


class FakeSurface:
    def capture(self) -> bytes:
        return b"png"


class TestExport:
    def test_csv_without_chart_warns(self, make_session, notifications):
        session = make_session()
        assert session.export(ExportFormat.CSV) is None
        [note] = notifications.active()
        assert note.type == NotificationType.WARNING
        assert note.message == "no data to export"

    def test_png_without_surface_warns(self, make_session, notifications):
        session = make_session()
        session.chart_data = _chart("X")
        assert session.export(ExportFormat.PNG) is None
        assert notifications.active()[0].message == "no chart to export"

    def test_csv_uses_session_title(self, make_session):
        session = make_session(ReportConfig(metrics=["Risk: Score"], data_sources=["Risks"]))
        session.chart_data = _chart("Risk: Score")
        artifact = session.export(ExportFormat.CSV)
        assert artifact.filename == "Risk: Score Report.csv"
        assert artifact.content == "Category,Risk: Score\nJan,1\nFeb,2"

    def test_png_with_surface(self, make_session):
        session = make_session()
        session.chart_data = _chart("X")
        session.surface = FakeSurface()
        artifact = session.export("png", title="Custom")
        assert artifact.filename == "Custom.png"
        assert artifact.content.startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_in_flight_regeneration_is_not_cancelled(settings, backend, notifications):
    started = asyncio.Event()
    release = asyncio.Event()
    outcomes: list[str] = []

    async def fake_generate(config):
        first = not started.is_set()
        started.set()
        try:
            if first:
                await release.wait()
        except asyncio.CancelledError:
            outcomes.append("cancelled")
            raise
        outcomes.append("completed")
        return _chart(config.visualization.value)

    backend.generate_report.side_effect = fake_generate
    session = ReportSession(
        settings,
        ReportPipeline(settings, backend),
        notifications,
        ReportConfig(data_sources=["Risks"]),
    )

    session.toggle_metric("Risk: Score")
    await started.wait()
    session.set_visualization(Visualization.LINE)
    release.set()
    await session.wait_idle()

    assert outcomes == ["completed", "completed"]
    assert session.chart_data.datasets[0].label == "Line Chart"
    assert notifications.active() == []


def test_export_rejects_unknown_format(make_session):
    session = make_session()
    with pytest.raises(ValueError):
        session.export("pdf")
