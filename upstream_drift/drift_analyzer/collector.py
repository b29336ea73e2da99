from __future__ import annotations
import hashlib, logging, re
from typing import List, Optional

from ..config import DriftConfig
from ..models import DiffRecord, Report

logger = logging.getLogger(__name__)

DIFF_BOUNDARY = "diff --git "

# `index <blob>..<blob> [<mode>]` lines are dropped before hashing
INDEX_LINE_RE = re.compile(r"^index [0-9a-f]+\.\.[0-9a-f]+(?: [0-7]+)?(?:\n|\Z)", re.M)
BOUNDARY_RE = re.compile(r"^diff --git ", re.M)
FULL_RENAME_RE = re.compile(r"^similarity index 100%$", re.M)
SOURCE_FILE_RE = re.compile(r'^a/(.+?) "?b/')
QUOTED_SOURCE_RE = re.compile(r'^"a/((?:[^"\\]|\\.)*)"')
C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}

# -------- Segment helpers --------
def fingerprint(diff_text: str) -> str:
    return hashlib.sha256(diff_text.encode("utf-8")).hexdigest()

def strip_index_lines(diff: str) -> str:
    return INDEX_LINE_RE.sub("", diff)

def split_segments(diff: str) -> List[str]:
    """Split a multi-file diff into per-file segments, boundary token removed."""
    parts = BOUNDARY_RE.split(diff)
    if parts and parts[0].strip():
        logger.debug(f"Ignoring {len(parts[0])} bytes before first diff header")
    return parts[1:]

def is_full_rename(segment: str) -> bool:
    return FULL_RENAME_RE.search(segment) is not None

def unquote_c_path(quoted: str) -> Optional[str]:
    """Decode the body of a git C-quoted path (``\\t``, ``\\"``, ``\\303`` ...)."""
    out = bytearray()
    i = 0
    while i < len(quoted):
        ch = quoted[i]
        if ch != "\\":
            out += ch.encode("utf-8"); i += 1
            continue
        nxt = quoted[i + 1:i + 2]
        if nxt in C_ESCAPES:
            out.append(C_ESCAPES[nxt]); i += 2
        elif len(quoted[i + 1:i + 4]) == 3 and all(c in "01234567" for c in quoted[i + 1:i + 4]):
            out.append(int(quoted[i + 1:i + 4], 8) & 0xFF); i += 4
        else:
            return None
    return out.decode("utf-8", errors="replace")

def source_file(segment: str) -> Optional[str]:
    """File name from the ``a/<path>`` marker of a segment's header line."""
    header = segment.split("\n", 1)[0]
    m = QUOTED_SOURCE_RE.match(header)
    if m:
        return unquote_c_path(m.group(1))
    m = SOURCE_FILE_RE.match(header)
    return m.group(1) if m else None

# -------- Records --------
def parse_diff(diff: str) -> List[DiffRecord]:
    records: List[DiffRecord] = []
    seen = set()
    for segment in split_segments(strip_index_lines(diff)):
        if is_full_rename(segment):
            continue
        text = DIFF_BOUNDARY + segment
        name = source_file(segment)
        if name is None:
            header = segment.split("\n", 1)[0]
            logger.warning(f"Could not read file name from diff header: {header!r}")
        elif name in seen:
            logger.warning(f"Duplicate diff segment for {name}")
        else:
            seen.add(name)
        records.append(DiffRecord(file=name, hash=fingerprint(text), diff_text=text))
    return records

def collect_report(config: DriftConfig, source) -> Report:
    """
    Diff every tracked path against upstream.

    ``source`` is anything with a ``diff(path) -> str`` method, normally an
    UpstreamRepository. Paths without differences are left out. Errors from
    the source propagate and abort the whole collection.
    """
    report: Report = {}
    for path in config.paths:
        records = parse_diff(source.diff(path))
        logger.info(f"{path}: {len(records)} file(s) differ from upstream")
        if records:
            report[path] = records
    return report
