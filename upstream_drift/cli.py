"""Command line entry point for the upstream drift detector."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from dotenv import load_dotenv

from .config import get_config_path, load_config, save_config, with_baseline
from .detector import detect
from .exceptions import UpstreamDriftError
from .git_operations import UpstreamRepository
from .logging_config import setup_logging
from .models import Mode
from .report import render_comparison, summary_xml

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DRIFT = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upstream-drift",
        description="Report forked files that drifted from their upstream copies.",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to the config file (default: $UPSTREAM_DRIFT_CONFIG or .upstream-drift.yml).",
    )
    parser.add_argument(
        "-s", "--summary",
        action="store_true",
        help="Emit a JUnit XML summary instead of raw diffs; exit 1 on drift.",
    )
    parser.add_argument(
        "-u", "--update",
        action="store_true",
        help="Accept every current diff as the new baseline.",
    )
    parser.add_argument(
        "-o", "--output",
        help="Write the XML summary to this file instead of stdout.",
    )
    parser.add_argument(
        "--no-fetch",
        action="store_true",
        help="Skip remote setup and fetch; use existing remote-tracking refs.",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        type=str.upper,
        help="Override LOG_LEVEL.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None, stdout: Optional[TextIO] = None) -> int:
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    out = stdout if stdout is not None else sys.stdout

    mode = Mode.SUMMARY if args.summary else Mode.COMPARISON
    config_path = get_config_path(args.config)

    try:
        config = load_config(config_path)
        repository = UpstreamRepository.open(config.upstream, config_path.resolve().parent)

        if not args.no_fetch:
            repository.ensure_remote()
            repository.fetch()

        result = detect(config, repository, mode)

        if mode == Mode.SUMMARY:
            document = summary_xml(result.report)
            if args.output:
                Path(args.output).write_text(document, encoding="utf-8")
                logger.info(f"Summary written to {args.output}")
            else:
                out.write(document)
        else:
            render_comparison(result.report, out)

        if args.update:
            save_config(with_baseline(config, result.full_report), config_path)

    except (UpstreamDriftError, OSError) as e:
        logger.error(f"❌ {e}")
        return EXIT_ERROR

    if mode == Mode.SUMMARY and result.has_drift:
        logger.warning(f"⚠️  {result.drift_count} file(s) drifted from upstream")
        return EXIT_DRIFT
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
