"""
Match collected diff records against the acknowledged baseline.

A record is acknowledged when the ignore list for its tracked path holds an
entry for the same file that is either marked ``skip`` or carries the same
hash. Records without a file name never match.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List

from ..config import DriftConfig
from ..models import DiffRecord, IgnoredDiff, Mode, Report

logger = logging.getLogger(__name__)


def _is_skipped(record: DiffRecord, ignored: List[IgnoredDiff]) -> bool:
    return record.file is not None and any(
        entry.skip and entry.file == record.file for entry in ignored
    )


def _is_acknowledged(record: DiffRecord, ignored: List[IgnoredDiff]) -> bool:
    return any(entry.matches(record) for entry in ignored)


def annotate(report: Report, config: DriftConfig) -> Report:
    """
    Copy of the full report with skip markers applied.

    Skipped records lose their diff text; nothing is removed. This is the
    view the baseline is written from.
    """
    annotated: Report = {}
    for path, records in report.items():
        ignored = config.ignored_for(path)
        annotated[path] = [
            replace(record, diff_text=None, skip=True) if _is_skipped(record, ignored)
            else replace(record)
            for record in records
        ]
    return annotated


def reconcile(report: Report, config: DriftConfig, mode: Mode = Mode.COMPARISON) -> Report:
    """
    Filter a report down to what still needs the operator's attention.

    Comparison mode keeps skipped records (without diff text) so they stay
    visible; summary mode drops them. Hash-matched records are dropped in
    both modes, as are tracked paths left with no records.
    """
    result: Report = {}
    for path, records in annotate(report, config).items():
        ignored = config.ignored_for(path)
        kept: List[DiffRecord] = []
        for record in records:
            if record.skip:
                if mode == Mode.COMPARISON:
                    kept.append(record)
                continue
            if _is_acknowledged(record, ignored):
                logger.debug(f"{path}/{record.file}: matches baseline")
                continue
            kept.append(record)
        if kept:
            result[path] = kept
    return result


def count_drift(report: Report) -> int:
    """Number of records that are neither skipped nor acknowledged."""
    return sum(1 for records in report.values() for record in records if not record.skip)
