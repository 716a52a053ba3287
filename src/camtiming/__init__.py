"""Webcam capture timing utility."""

from camtiming.capture import Frame, RunStats, run_capture
from camtiming.options import Options, parse_args

__all__ = ["Frame", "Options", "RunStats", "parse_args", "run_capture"]
__version__ = "0.1.0"
