"""In-memory backend dataset."""

from __future__ import annotations

from dataclasses import dataclass, field

from src.config.constants import WidgetSize, WidgetType
from src.config.metrics import FINANCIALS, KPIS, RISKS
from src.services.insights.models import AutomatedInsight, Document, ScheduledReport
from src.services.widgets.models import Widget


@dataclass
class InsightsStore:
    """Records served by the insights backend.

    One instance is created per process and handed to the collaborator that
    reads and writes it.
    """

    widgets: list[Widget] = field(default_factory=list)
    documents: list[Document] = field(default_factory=list)
    insights: list[AutomatedInsight] = field(default_factory=list)
    schedules: list[ScheduledReport] = field(default_factory=list)
    shares: list[tuple[list[str], str]] = field(default_factory=list)

    @classmethod
    def seeded(cls) -> InsightsStore:
        """Build a store holding the demo program dataset."""
        return cls(
            widgets=[
                Widget(id=1, title="Budget Overview", type=WidgetType.CHART, source=FINANCIALS, size=WidgetSize.MEDIUM),
                Widget(id=2, title="Task Completion", type=WidgetType.PROGRESS, source=KPIS, size=WidgetSize.SMALL),
                Widget(id=3, title="Risk Assessment", type=WidgetType.CHART, source=RISKS, size=WidgetSize.MEDIUM),
                Widget(id=4, title="Team Performance", type=WidgetType.CHART, source=KPIS, size=WidgetSize.LARGE),
            ],
            documents=[
                Document(id=1, name="Project Plan.pdf", type="pdf", size="2.4MB", updated="2023-06-15", owner="Alice Johnson"),
                Document(id=2, name="Budget Forecast.xlsx", type="excel", size="1.8MB", updated="2023-06-12", owner="Bob Smith"),
                Document(id=3, name="Requirements Spec.docx", type="word", size="3.2MB", updated="2023-06-10", owner="Charlie Brown"),
                Document(id=4, name="Risk Assessment.pdf", type="pdf", size="1.5MB", updated="2023-06-08", owner="Alice Johnson"),
            ],
            insights=[
                AutomatedInsight(
                    id=1,
                    type="Alert",
                    severity="high",
                    summary="Budget exceeding 80% utilization.",
                    details="Consider reallocating resources to avoid overspending.",
                    category="Financial",
                ),
                AutomatedInsight(
                    id=2,
                    type="Success",
                    severity="info",
                    summary="Project is on track for timely completion.",
                    details="All milestones are currently meeting their deadlines.",
                    category="Timeline",
                ),
                AutomatedInsight(
                    id=3,
                    type="Recommendation",
                    severity="medium",
                    summary="Resource allocation can be optimized.",
                    details="Team A is currently under-utilized while Team B is over capacity.",
                    category="Resources",
                ),
                AutomatedInsight(
                    id=4,
                    type="Information",
                    severity="low",
                    summary="Stakeholder review scheduled next week.",
                    details="Prepare presentation materials for the quarterly review.",
                    category="Meetings",
                ),
            ],
        )
