"""Report configuration and chart payload models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.config.constants import BatchStatus, DateRange, Visualization


def _unique(values: list[str]) -> list[str]:
    """Drop repeated entries, keeping the first occurrence."""
    return list(dict.fromkeys(values))


class ReportConfig(BaseModel):
    """User-chosen report configuration."""

    model_config = ConfigDict(populate_by_name=True)

    metrics: list[str] = Field(default_factory=list, description="Selected metric names")
    date_range: DateRange = Field(DateRange.LAST_30_DAYS, alias="dateRange")
    visualization: Visualization = Visualization.BAR
    data_sources: list[str] = Field(default_factory=list, alias="dataSources")

    @field_validator("metrics", "data_sources")
    @classmethod
    def dedupe(cls, v: list[str]) -> list[str]:
        return _unique(v)

    @property
    def title(self) -> str:
        """Default report title: the selected metrics plus ' Report', or 'Report' when none."""
        if not self.metrics:
            return "Report"
        return f"{', '.join(self.metrics)} Report"


class Dataset(BaseModel):
    """One chart series, aligned positionally with ``ChartData.labels``."""

    model_config = ConfigDict(populate_by_name=True)

    label: str
    data: list[int | float]
    background_color: str | list[str] | None = Field(None, alias="backgroundColor")
    border_color: str | list[str] | None = Field(None, alias="borderColor")
    border_width: int | None = Field(None, alias="borderWidth")


class ChartData(BaseModel):
    """Chart-ready aggregate data."""

    labels: list[str] = Field(default_factory=list)
    datasets: list[Dataset] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_alignment(self) -> "ChartData":
        for dataset in self.datasets:
            if len(dataset.data) != len(self.labels):
                raise ValueError(
                    f"dataset '{dataset.label}' has {len(dataset.data)} values "
                    f"for {len(self.labels)} labels"
                )
        return self

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BatchReport(ReportConfig):
    """A report configuration queued for batch generation."""

    id: str
    name: str = ""
    status: BatchStatus = BatchStatus.PENDING
    result: ChartData | None = None
    error: str | None = None
