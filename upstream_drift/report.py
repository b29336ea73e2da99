"""
Report rendering.

Comparison mode prints the raw diff of every unacknowledged file. Summary
mode builds a JUnit-style XML document with one failing test case per
drifted file, which CI servers can display next to regular test results.
"""

import logging
import posixpath
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Optional, TextIO

from .models import Report

logger = logging.getLogger(__name__)

SUITE_NAME = "upstream-drift"
UNKNOWN_FILE = "<unknown>"


def render_comparison(report: Report, stream: TextIO) -> int:
    """
    Write each drifted file's diff to ``stream``, path order then file order.

    Args:
        report: Reconciled report (comparison mode)
        stream: Output stream, normally stdout

    Returns:
        Number of diffs written
    """
    written = 0
    for path, records in report.items():
        for record in records:
            if record.skip or record.diff_text is None:
                logger.info(f"Skipping {path}/{record.file or UNKNOWN_FILE} (marked skip in baseline)")
                continue
            stream.write(record.diff_text)
            written += 1
    return written


def full_file_path(path: str, file: Optional[str]) -> str:
    """
    Project path of a drifted file.

    A tracked path that is a single file is diffed blob against blob, and git
    names the record by its whole path, so no join is needed.
    """
    if not file:
        return path
    stripped = path.rstrip("/")
    if file == stripped or file.endswith("/" + stripped):
        return stripped
    return posixpath.join(path, file)


def build_summary(report: Report, generated_at: Optional[datetime] = None) -> ET.Element:
    """Build the ``testsuite`` element for a reconciled summary-mode report."""
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    cases = [
        (path, record)
        for path, records in report.items()
        for record in records
        if not record.skip
    ]

    suite = ET.Element("testsuite", {
        "name": SUITE_NAME,
        "tests": str(len(cases)),
        "failures": str(len(cases)),
        "errors": "0",
        "timestamp": generated_at.isoformat(),
    })

    for path, record in cases:
        name = record.file or UNKNOWN_FILE
        full_path = full_file_path(path, record.file)
        case = ET.SubElement(suite, "testcase", {
            "name": name,
            "classname": path,
            "file": full_path,
        })
        failure = ET.SubElement(case, "failure", {
            "message": f"{full_path} differs from upstream",
            "type": "drift",
        })
        failure.text = f"hash: {record.hash}\nfile: {name}"

    return suite


def summary_xml(report: Report, generated_at: Optional[datetime] = None) -> str:
    """Serialize the summary document, XML declaration included."""
    suite = build_summary(report, generated_at)
    ET.indent(suite)
    body = ET.tostring(suite, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'
