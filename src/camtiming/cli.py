"""``camtiming`` command-line entry point."""

from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from camtiming.capture import RunStats, run_capture
from camtiming.config import EXIT_OK
from camtiming.errors import CaptureError
from camtiming.options import parse_args

log = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Per-frame lines go to stdout, warnings and errors to stderr."""
    out = logging.StreamHandler(sys.stdout)
    out.addFilter(lambda record: record.levelno < logging.WARNING)
    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.WARNING)
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[out, err],
        force=True,
    )


def format_summary(stats: RunStats) -> str:
    return f"Average: {stats.mean_interval_ms:05.0f}\t({stats.fps:05.0f} FPS)"


def main(argv: Optional[Sequence[str]] = None) -> int:
    options = parse_args(argv)
    configure_logging(options.verbose)

    try:
        stats = run_capture(options)
    except CaptureError as e:
        log.error("%s", e)
        return e.exit_code

    print(f"\n{format_summary(stats)}\n")
    return EXIT_OK
