"""Data-source to metric resolution for report configurations."""

import logging
from collections.abc import Mapping, Sequence, Set

from src.config.metrics import DATA_SOURCE_METRICS, METRIC_CATALOG
from src.services.reports.models import ReportConfig

logger = logging.getLogger(__name__)


class ReportConfigResolver:
    """Derives the selectable metrics from the chosen data sources.

    Resolution is one-directional: sources constrain metrics, a metric
    change never alters the source selection.
    """

    def __init__(
        self,
        source_metrics: Mapping[str, Set[str]] = DATA_SOURCE_METRICS,
        catalog: Sequence[str] = METRIC_CATALOG,
    ) -> None:
        self.source_metrics = source_metrics
        self.catalog = list(catalog)

    def resolve_metrics(
        self,
        data_sources: Sequence[str],
        metric_catalog: Sequence[str] | None = None,
    ) -> list[str]:
        """Catalog entries exposed by at least one source, in catalog order."""
        catalog = self.catalog if metric_catalog is None else metric_catalog
        allowed: set[str] = set()
        for source in data_sources:
            metrics = self.source_metrics.get(source)
            if metrics is None:
                logger.warning("Unknown data source %r ignored", source)
                continue
            allowed.update(metrics)
        return [m for m in catalog if m in allowed]

    @staticmethod
    def reconcile(config: ReportConfig, resolved_metrics: Sequence[str]) -> ReportConfig:
        """Return a copy of *config* keeping only metrics still resolvable."""
        allowed = set(resolved_metrics)
        kept = [m for m in config.metrics if m in allowed]
        removed = [m for m in config.metrics if m not in allowed]
        if removed:
            logger.info("Dropped metrics no longer backed by a data source: %s", removed)
        return config.model_copy(update={"metrics": kept})

    def apply(self, config: ReportConfig, metric_catalog: Sequence[str] | None = None) -> tuple[list[str], ReportConfig]:
        """Resolve for ``config.data_sources`` and reconcile in one step."""
        resolved = self.resolve_metrics(config.data_sources, metric_catalog)
        return resolved, self.reconcile(config, resolved)
