"""Command-line front end: demangle one name, or every line of standard input."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import TextIO

from .demangle import demangle_or_original
from .flags import env_to_bool

__all__ = ["main"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symdemangle",
        description=(
            "Demangle Itanium C++ ABI symbol names.  Names that cannot be "
            "demangled are printed unchanged."
        ),
    )
    parser.add_argument(
        "--demangle_filter",
        "-demangle_filter",
        dest="demangle_filter",
        action="store_true",
        default=env_to_bool(None, "GLOG_demangle_filter", False),
        help="read names from standard input, one per line, and demangle each",
    )
    parser.add_argument(
        "name",
        nargs="?",
        help="a single mangled name to demangle",
    )
    return parser


def _filter(source: TextIO, sink: TextIO) -> None:
    for line in source:
        sink.write(demangle_or_original(line.rstrip("\n")) + "\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    if args.demangle_filter or args.name is None:
        _filter(sys.stdin, sys.stdout)
    else:
        sys.stdout.write(demangle_or_original(args.name) + "\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())