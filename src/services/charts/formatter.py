"""Chart data shaping: metric series to chart payloads."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import NamedTuple

import numpy as np

from src.config.constants import SeriesKind, Visualization
from src.config.metrics import METRIC_KINDS
from src.services.reports.models import ChartData, Dataset

logger = logging.getLogger(__name__)

VALUE_FLOOR = 0
VALUE_CEILING = 100


class LabeledSeries(NamedTuple):
    labels: list[str]
    values: list[int]


@dataclass(frozen=True)
class SeriesGenerator:
    """Samples integer values in ``[low, high)`` over a fixed label set."""

    labels: tuple[str, ...]
    low: int
    high: int

    def sample(self, rng: np.random.Generator, size: int | None = None) -> list[int]:
        n = len(self.labels) if size is None else size
        return rng.integers(self.low, self.high, size=n).tolist()

    def generate(self, rng: np.random.Generator) -> LabeledSeries:
        return LabeledSeries(list(self.labels), self.sample(rng))


GENERATORS: dict[SeriesKind, SeriesGenerator] = {
    SeriesKind.BUDGET: SeriesGenerator(
        (
            "Personnel",
            "Equipment",
            "Marketing",
            "Operations",
            "Development",
            "Research",
            "Administration",
        ),
        50,
        100,
    ),
    SeriesKind.TIMELINE: SeriesGenerator(
        ("Planning", "Design", "Development", "Testing", "Deployment", "Review"), 0, 100
    ),
    SeriesKind.TASK: SeriesGenerator(("Team A", "Team B", "Team C", "Team D"), 30, 100),
    SeriesKind.RISK: SeriesGenerator(
        ("Technical", "Schedule", "Cost", "Resource", "Scope"), 40, 100
    ),
    SeriesKind.DEFAULT: SeriesGenerator(("Jan", "Feb", "Mar", "Apr", "May", "Jun"), 0, 100),
}

# Daily time-series values and per-metric jitter
_TIME_SERIES_LOW, _TIME_SERIES_HIGH = 70, 100
_JITTER_LOW, _JITTER_HIGH = -10, 10

PALETTE: tuple[str, ...] = (
    "rgba(75, 192, 192, 0.6)",
    "rgba(54, 162, 235, 0.6)",
    "rgba(153, 102, 255, 0.6)",
    "rgba(255, 99, 132, 0.6)",
    "rgba(255, 159, 64, 0.6)",
    "rgba(255, 205, 86, 0.6)",
    "rgba(201, 203, 207, 0.6)",
)
LINE_FILL = "rgba(0, 0, 0, 0.1)"


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Build the sampling generator; pass a seed for reproducible charts."""
    return np.random.default_rng(seed)


def generator_for(metric: str, kinds: Mapping[str, SeriesKind] = METRIC_KINDS) -> SeriesGenerator | None:
    """Return the registered generator for *metric*, or None if it has none."""
    kind = kinds.get(metric)
    if kind is None:
        return None
    return GENERATORS[kind]


def series_for_metric(
    metric: str,
    rng: np.random.Generator,
    kinds: Mapping[str, SeriesKind] = METRIC_KINDS,
) -> LabeledSeries | None:
    """Generate a labeled series for a single metric."""
    generator = generator_for(metric, kinds)
    if generator is None:
        return None
    return generator.generate(rng)


def time_series_labels(points: int, today: date | None = None) -> list[str]:
    """Daily labels ending yesterday, formatted like 'Mar 4'."""
    today = today or date.today()
    labels = []
    for i in range(points):
        day = today - timedelta(days=points - i)
        labels.append(f"{day:%b} {day.day}")
    return labels


def build_chart_data(
    metrics: Sequence[str],
    visualization: Visualization,
    rng: np.random.Generator,
    *,
    time_series_points: int = 12,
    today: date | None = None,
    kinds: Mapping[str, SeriesKind] = METRIC_KINDS,
) -> ChartData:
    """Combine the selected metrics into one chart payload.

    Metrics without a registered generator are dropped. Line charts share a
    daily label sequence; bar and pie charts take their labels from the first
    usable metric, and pie charts render only that metric.
    """
    known = [m for m in metrics if m in kinds]
    dropped = [m for m in metrics if m not in kinds]
    if dropped:
        logger.debug("Dropping metrics without a generator: %s", dropped)
    if not known:
        return ChartData()

    if visualization == Visualization.LINE:
        labels = time_series_labels(time_series_points, today)
        base = rng.integers(_TIME_SERIES_LOW, _TIME_SERIES_HIGH, size=len(labels))
        datasets = []
        for metric in known:
            jitter = rng.integers(_JITTER_LOW, _JITTER_HIGH, size=len(labels))
            values = np.clip(base + jitter, VALUE_FLOOR, VALUE_CEILING)
            datasets.append(Dataset(label=metric, data=values.tolist()))
        return ChartData(labels=labels, datasets=datasets)

    first, *rest = known
    labels, values = GENERATORS[kinds[first]].generate(rng)
    datasets = [Dataset(label=first, data=values)]
    if visualization != Visualization.PIE:
        for metric in rest:
            values = GENERATORS[kinds[metric]].sample(rng, size=len(labels))
            datasets.append(Dataset(label=metric, data=values))
    return ChartData(labels=labels, datasets=datasets)


def palette(count: int) -> list[str]:
    return [PALETTE[i % len(PALETTE)] for i in range(count)]


def style_chart(data: ChartData, visualization: Visualization) -> ChartData:
    """Return a copy of *data* with display colours filled in."""
    styled = data.model_copy(deep=True)
    for dataset in styled.datasets:
        if dataset.background_color is None:
            if visualization == Visualization.PIE:
                dataset.background_color = palette(len(styled.labels))
            else:
                dataset.background_color = PALETTE[0]
        if dataset.border_color is None and visualization == Visualization.LINE:
            dataset.border_color = dataset.background_color
            dataset.background_color = LINE_FILL
        if not dataset.border_width:
            dataset.border_width = 1
    return styled
