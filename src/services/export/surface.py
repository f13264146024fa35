"""Plotly rendering surface for report charts."""

from __future__ import annotations

import plotly.graph_objects as go

from src.config.constants import Visualization
from src.services.charts.formatter import PALETTE
from src.services.reports.models import ChartData

PNG_WIDTH = 1100
PNG_HEIGHT = 650


def build_figure(data: ChartData, visualization: Visualization, title: str | None = None) -> go.Figure:
    """Render chart data into a styled Plotly figure."""
    fig = go.Figure()
    if visualization == Visualization.PIE:
        if data.datasets:
            first = data.datasets[0]
            fig.add_trace(
                go.Pie(
                    labels=data.labels,
                    values=first.data,
                    name=first.label,
                    marker={"colors": list(PALETTE)},
                )
            )
    else:
        for index, dataset in enumerate(data.datasets):
            colour = PALETTE[index % len(PALETTE)]
            if visualization == Visualization.LINE:
                fig.add_trace(
                    go.Scatter(
                        x=data.labels,
                        y=dataset.data,
                        name=dataset.label,
                        mode="lines+markers",
                        line={"color": colour, "width": 3},
                    )
                )
            else:
                fig.add_trace(
                    go.Bar(x=data.labels, y=dataset.data, name=dataset.label, marker_color=colour)
                )
        fig.update_layout(barmode="group")

    fig.update_layout(
        title=title or "",
        template="plotly_white",
        legend={"orientation": "h", "y": 1.1},
        font={"family": "Inter, Arial, sans-serif", "size": 14},
        margin={"l": 60, "r": 30, "t": 70, "b": 50},
    )
    return fig


class PlotlyChartSurface:
    """A report chart rendered with Plotly; captured to PNG via kaleido."""

    def __init__(self, data: ChartData, visualization: Visualization, title: str | None = None) -> None:
        self.figure = build_figure(data, visualization, title)

    def capture(self) -> bytes:
        return self.figure.to_image(format="png", width=PNG_WIDTH, height=PNG_HEIGHT, scale=2)
