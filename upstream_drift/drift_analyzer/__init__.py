"""
Drift Analyzer Module
Turns raw upstream diffs into per-file records and reconciles them with the
acknowledged baseline.
"""

from .collector import (
    collect_report,
    fingerprint,
    parse_diff,
    split_segments,
    strip_index_lines,
)
from .reconciler import (
    annotate,
    count_drift,
    reconcile,
)

__all__ = [
    # Diff collection
    'collect_report',
    'fingerprint',
    'parse_diff',
    'split_segments',
    'strip_index_lines',

    # Baseline reconciliation
    'annotate',
    'count_drift',
    'reconcile',
]
