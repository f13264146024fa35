"""Data sources, metric catalog and chart-kind backfill.

Every metric carries an explicit ``SeriesKind`` and every widget an explicit
``ChartKind``. The title heuristics below only fill in entries declared
without one, once, when the catalog or widget is created.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.config.constants import ChartKind, SeriesKind

FINANCIALS = "Financials"
RISKS = "Risks"
MILESTONES = "Milestones"
KPIS = "KPIs"
GOALS = "Goals"

DATA_SOURCES: tuple[str, ...] = (FINANCIALS, RISKS, MILESTONES, KPIS, GOALS)


@dataclass(frozen=True)
class MetricDefinition:
    """A selectable report metric."""

    name: str
    kind: SeriesKind | None = None


def infer_series_kind(name: str) -> SeriesKind:
    """Backfill a generator tag from a metric or widget title."""
    if "Budget" in name:
        return SeriesKind.BUDGET
    if "Progress" in name or "Performance" in name:
        return SeriesKind.TIMELINE
    if "Task" in name or "Team" in name:
        return SeriesKind.TASK
    if "Risk" in name:
        return SeriesKind.RISK
    return SeriesKind.DEFAULT


def infer_chart_kind(title: str) -> ChartKind:
    """Backfill a chart kind from a widget title."""
    if "Budget" in title:
        return ChartKind.BAR
    if "Progress" in title or "Performance" in title:
        return ChartKind.LINE
    if "Risk" in title:
        return ChartKind.PIE
    return ChartKind.BAR


def preview_metric_for(title: str) -> str:
    """Pick the metric a widget previews, from its title."""
    if "Budget" in title:
        return "Budget Utilization"
    if "Task" in title or "Team" in title:
        return "Task Completion"
    if "Risk" in title:
        return "Risk Mitigation"
    return "Budget Utilization"


_DECLARED_CATALOG: tuple[MetricDefinition, ...] = (
    MetricDefinition("Budget Utilization", SeriesKind.BUDGET),
    MetricDefinition("Financial: ROI (%)"),
    MetricDefinition("Financial: Actual Cost"),
    MetricDefinition("Financial: Budget Variance"),
    MetricDefinition("Timeline Progress", SeriesKind.TIMELINE),
    MetricDefinition("Milestone: Completion Rate", SeriesKind.TIMELINE),
    MetricDefinition("Task Completion", SeriesKind.TASK),
    MetricDefinition("KPI: Team Performance"),
    MetricDefinition("Goal: Progress"),
    MetricDefinition("Risk Mitigation", SeriesKind.RISK),
    MetricDefinition("Risk: Level"),
    MetricDefinition("Risk: Score"),
)


def _backfill(definitions: tuple[MetricDefinition, ...]) -> tuple[MetricDefinition, ...]:
    return tuple(
        d if d.kind is not None else MetricDefinition(d.name, infer_series_kind(d.name))
        for d in definitions
    )


METRIC_DEFINITIONS: tuple[MetricDefinition, ...] = _backfill(_DECLARED_CATALOG)

METRIC_KINDS: dict[str, SeriesKind] = {d.name: d.kind for d in METRIC_DEFINITIONS}  # type: ignore[misc]

METRIC_CATALOG: tuple[str, ...] = tuple(d.name for d in METRIC_DEFINITIONS)

DATA_SOURCE_METRICS: dict[str, frozenset[str]] = {
    FINANCIALS: frozenset(
        {
            "Budget Utilization",
            "Financial: ROI (%)",
            "Financial: Actual Cost",
            "Financial: Budget Variance",
        }
    ),
    RISKS: frozenset({"Risk Mitigation", "Risk: Level", "Risk: Score"}),
    MILESTONES: frozenset({"Timeline Progress", "Milestone: Completion Rate"}),
    KPIS: frozenset({"Task Completion", "KPI: Team Performance", "Budget Utilization"}),
    GOALS: frozenset({"Goal: Progress", "Timeline Progress"}),
}
