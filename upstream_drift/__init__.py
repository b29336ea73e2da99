"""
Upstream drift detector.

Compares a project's forked copies of upstream files against the upstream
branch and reports files whose diff is not in the acknowledged baseline.
"""

from .config import DriftConfig, UpstreamSettings, load_config, save_config, with_baseline
from .detector import DriftResult, detect
from .exceptions import ConfigError, SourceUnavailable, UpstreamDriftError
from .models import DiffRecord, IgnoreEntry, IgnoredDiff, Mode

__all__ = [
    "ConfigError",
    "DiffRecord",
    "DriftConfig",
    "DriftResult",
    "IgnoreEntry",
    "IgnoredDiff",
    "Mode",
    "SourceUnavailable",
    "UpstreamDriftError",
    "UpstreamSettings",
    "detect",
    "load_config",
    "save_config",
    "with_baseline",
]

__version__ = "1.0.0"
