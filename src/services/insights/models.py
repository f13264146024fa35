"""Document, insight and scheduling models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.config.constants import ReportFrequency
from src.services.reports.models import ReportConfig


class Document(BaseModel):
    """An uploaded program document."""

    id: int
    name: str
    type: str
    size: str
    updated: str
    owner: str


class AutomatedInsight(BaseModel):
    """A backend-generated observation shown on the insights page."""

    id: int
    type: str
    summary: str
    details: str
    severity: str | None = None
    category: str | None = None
    timestamp: datetime | None = None


class ScheduledReport(BaseModel):
    """A report delivered on a recurring schedule."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    frequency: ReportFrequency
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    recipients: list[str] = Field(default_factory=list)
    config: ReportConfig
    next_run_date: str | None = Field(None, alias="nextRunDate")
