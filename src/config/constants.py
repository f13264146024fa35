"""
Constants, enums, and static values.
"""

from enum import Enum


class Visualization(str, Enum):
    """Report visualizations offered by the report builder."""

    BAR = "Bar Chart"
    LINE = "Line Chart"
    PIE = "Pie Chart"


class ChartKind(str, Enum):
    """Chart kind attached to a dashboard widget."""

    BAR = "bar"
    LINE = "line"
    PIE = "pie"

    @property
    def visualization(self) -> Visualization:
        return _KIND_TO_VISUALIZATION[self]


_KIND_TO_VISUALIZATION = {
    ChartKind.BAR: Visualization.BAR,
    ChartKind.LINE: Visualization.LINE,
    ChartKind.PIE: Visualization.PIE,
}


class SeriesKind(str, Enum):
    """Sample-data generator backing a metric."""

    BUDGET = "budget"
    TIMELINE = "timeline"
    TASK = "task"
    RISK = "risk"
    DEFAULT = "default"


class DateRange(str, Enum):
    """Date ranges offered by the report builder."""

    LAST_7_DAYS = "Last 7 Days"
    LAST_30_DAYS = "Last 30 Days"
    LAST_90_DAYS = "Last 90 Days"
    CUSTOM = "Custom Range"


class WidgetType(str, Enum):
    CHART = "chart"
    PROGRESS = "progress"


class WidgetSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class BatchStatus(str, Enum):
    """Batch report lifecycle status."""

    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchStatus.COMPLETED, BatchStatus.ERROR)


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ExportFormat(str, Enum):
    CSV = "csv"
    PNG = "png"


class ReportFrequency(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


class PipelineStep(str, Enum):
    """Report pipeline steps (used for structured step logging)."""

    GENERATE = "generate"
    WIDGET_ORDER = "widget_order"
    WIDGET_SIZE = "widget_size"


CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
PNG_MEDIA_TYPE = "image/png"
CSV_CATEGORY_HEADER = "Category"

NO_METRICS_MESSAGE = "select at least one metric"
NO_DATA_MESSAGE = "no data to export"
NO_CHART_MESSAGE = "no chart to export"
