#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Upstream Drift - check forked files against their upstream origin

Usage:
    python main.py              # print diffs not yet in the baseline
    python main.py --summary    # JUnit XML summary, exit 1 on drift
    python main.py --update     # accept current diffs as the new baseline

Settings can also come from a .env file (UPSTREAM_DRIFT_CONFIG, LOG_LEVEL).
"""

import sys

from upstream_drift.cli import main


if __name__ == "__main__":
    sys.exit(main())
