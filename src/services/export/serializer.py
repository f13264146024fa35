"""Chart data export to downloadable artifacts."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from src.config.constants import (
    CSV_CATEGORY_HEADER,
    CSV_MEDIA_TYPE,
    NO_CHART_MESSAGE,
    NO_DATA_MESSAGE,
    PNG_MEDIA_TYPE,
)
from src.services.errors import ExportPreconditionError
from src.services.reports.models import ChartData

logger = logging.getLogger(__name__)


class ChartSurface(Protocol):
    """A rendered chart whose pixels can be captured."""

    def capture(self) -> bytes: ...


@dataclass(frozen=True)
class ExportArtifact:
    """A file ready for download."""

    filename: str
    media_type: str
    content: str


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_csv(data: ChartData | None) -> str:
    """Serialize chart data as CSV text.

    The first column holds the category labels, then one column per dataset.
    Fields are joined with commas as-is; embedded commas are not quoted.
    """
    if data is None:
        raise ExportPreconditionError(NO_DATA_MESSAGE)

    header = [CSV_CATEGORY_HEADER, *(d.label for d in data.datasets)]
    lines = [",".join(header)]
    for index, label in enumerate(data.labels):
        row = [label, *(_format_number(d.data[index]) for d in data.datasets)]
        lines.append(",".join(row))
    return "\n".join(lines)


def to_png(data: ChartData | None, surface: ChartSurface | None) -> str:
    """Capture the rendered chart as a PNG data URI."""
    if data is None:
        raise ExportPreconditionError(NO_DATA_MESSAGE)
    if surface is None:
        raise ExportPreconditionError(NO_CHART_MESSAGE)

    png = surface.capture()
    return f"data:{PNG_MEDIA_TYPE};base64,{base64.b64encode(png).decode('ascii')}"


def csv_artifact(title: str, data: ChartData | None) -> ExportArtifact:
    content = to_csv(data)
    logger.info("Exported '%s' as CSV (%d rows)", title, content.count("\n"))
    return ExportArtifact(filename=f"{title}.csv", media_type=CSV_MEDIA_TYPE, content=content)


def png_artifact(title: str, data: ChartData | None, surface: ChartSurface | None) -> ExportArtifact:
    content = to_png(data, surface)
    logger.info("Exported '%s' as PNG", title)
    return ExportArtifact(filename=f"{title}.png", media_type=PNG_MEDIA_TYPE, content=content)
