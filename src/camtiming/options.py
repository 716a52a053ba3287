"""Command-line option parsing.

Values are glued to their flag letter, as in ``-n100`` or ``-fpng``. Any
malformed argument list prints the usage text and exits non-zero.
"""

from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

from camtiming.config import DEFAULT_FORMAT, EXIT_OK, EXIT_USAGE_ERROR

USAGE = (
    "Usage:\t{prog} -n<n_frames> [OPTIONS]\n"
    "Options available:\n"
    "\t-v\t\tVerbose mode (default: off)\n"
    "\t-s\t\tSaves frames under images/ directory (default: off)\n"
    "\t-d\t\tDisplays images on the screen (default: off)\n"
    "\t-f<fmt>\t\tSets format to the specified value (default: jpg)\n"
    "\t-h\t\tPrints this message\n"
)

_DIGITS = re.compile(r"[0-9]+")
_FLAGS = frozenset("vsdhfn")
_VALUE_FLAGS = frozenset("fn")


@dataclass(frozen=True)
class Options:
    n_frames: int
    fmt: str = DEFAULT_FORMAT
    save: bool = False
    verbose: bool = False
    display: bool = False


def _frame_count(value: str) -> int:
    if not _DIGITS.fullmatch(value):
        raise argparse.ArgumentTypeError(f"invalid frame count: {value!r}")
    return int(value)


class OptionParser(argparse.ArgumentParser):
    def format_usage(self) -> str:
        return USAGE.format(prog=self.prog)

    def format_help(self) -> str:
        return USAGE.format(prog=self.prog)

    def error(self, message):
        self.print_usage(sys.stdout)
        self.exit(EXIT_USAGE_ERROR, f"{self.prog}: error: {message}\n")


def build_parser(prog: Optional[str] = None) -> OptionParser:
    parser = OptionParser(prog=prog, add_help=False)
    parser.add_argument("-n", dest="n_frames", type=_frame_count, default=0)
    # Bare -f selects an empty extension; imwrite rejects it later.
    parser.add_argument("-f", dest="fmt", nargs="?", const="", default=DEFAULT_FORMAT)
    parser.add_argument("-s", dest="save", action="store_true")
    parser.add_argument("-v", dest="verbose", action="store_true")
    parser.add_argument("-d", dest="display", action="store_true")
    return parser


def _scan(parser: OptionParser, argv: Sequence[str]) -> List[str]:
    """Check tokens left to right by the letter after ``-``.

    The first bad token is an error and ``-h`` exits at once, so neither
    depends on what follows. Switches keep only their letter (``-vs`` is
    ``-v``) and values stay glued to ``-n``/``-f``.
    """
    tokens = []
    for arg in argv:
        if len(arg) < 2 or arg[0] != "-" or arg[1] not in _FLAGS:
            parser.error(f"unrecognized argument: {arg}")
        if arg[1] == "h":
            parser.print_help()
            parser.exit(EXIT_OK)
        tokens.append(arg if arg[1] in _VALUE_FLAGS else arg[:2])
    return tokens


def parse_args(argv: Optional[Sequence[str]] = None, prog: Optional[str] = None) -> Options:
    """Parse ``argv`` (without the program name) into :class:`Options`.

    Exits with ``EXIT_USAGE_ERROR`` on malformed input and with ``EXIT_OK``
    when ``-h`` is given.
    """
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser(prog)
    args = parser.parse_args(_scan(parser, argv))
    if not args.n_frames:
        parser.error("a frame count greater than zero is required (-n<n_frames>)")
    return Options(
        n_frames=args.n_frames,
        fmt=args.fmt,
        save=args.save,
        verbose=args.verbose,
        display=args.display,
    )
