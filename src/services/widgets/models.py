"""Dashboard widget model."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.config.constants import ChartKind, WidgetSize, WidgetType
from src.config.metrics import infer_chart_kind


class Widget(BaseModel):
    """A dashboard tile bound to one data source and chart kind."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    type: WidgetType
    source: str
    size: WidgetSize = WidgetSize.MEDIUM
    chart_kind: ChartKind | None = Field(None, alias="chartKind")

    @model_validator(mode="after")
    def backfill_chart_kind(self) -> "Widget":
        if self.chart_kind is None:
            self.chart_kind = infer_chart_kind(self.title)
        return self
