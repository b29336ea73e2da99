"""Collect, reconcile and summarize drift for every tracked path."""

import logging
from dataclasses import dataclass

from .config import DriftConfig
from .drift_analyzer import annotate, collect_report, count_drift, reconcile
from .models import Mode, Report

logger = logging.getLogger(__name__)


@dataclass
class DriftResult:
    mode: Mode
    full_report: Report
    report: Report
    drift_count: int

    @property
    def has_drift(self) -> bool:
        return self.drift_count > 0


def detect(config: DriftConfig, source, mode: Mode = Mode.COMPARISON) -> DriftResult:
    """
    Run one comparison of every tracked path against upstream.

    Args:
        config: Loaded configuration, including the baseline
        source: Object with a ``diff(path)`` method (an UpstreamRepository)
        mode: Reconciliation mode

    Returns:
        DriftResult holding the annotated full report (for baseline updates)
        and the reconciled report to render

    Raises:
        SourceUnavailable: If any tracked path cannot be compared
    """
    raw = collect_report(config, source)
    full_report = annotate(raw, config)
    report = reconcile(raw, config, mode)
    drift_count = count_drift(report)

    total = sum(len(records) for records in raw.values())
    logger.info(f"📊 {total} differing file(s), {drift_count} not in baseline")
    return DriftResult(mode=mode, full_report=full_report, report=report, drift_count=drift_count)
