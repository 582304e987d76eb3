"""Dump the fields (or rows) of a CSV file or stdin: python -m streamcsv [FILE]."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, TextIO

from .errors import CSVError
from .lexer import END_OF_ROW, FieldLexer, RowAssembler
from .properties import Properties


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="streamcsv", description=__doc__)
    p.add_argument("file", nargs="?", help="CSV file (default: stdin)")
    p.add_argument("--rows", action="store_true", help="print whole rows instead of fields")
    p.add_argument("--sep", default=",", help="field separator (default: ,)")
    p.add_argument("--quote", default='"', help='quote character (default: ")')
    p.add_argument("--encoding", default="utf-8")
    return p


def dump(source: object, props: Properties, rows: bool, out: TextIO) -> int:
    if rows:
        for i, row in enumerate(RowAssembler(source, props)):
            out.write(f"row {i}: {row!r}\n")
        return 0
    for token in FieldLexer(source, props):
        if token is END_OF_ROW:
            out.write("-- end of row\n")
        else:
            out.write(f"read: [{token}]\n")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        props = Properties(field_sep=args.sep, quote=args.quote, encoding=args.encoding)
        if args.file is None:
            return dump(sys.stdin.buffer, props, args.rows, sys.stdout)
        with open(args.file, "rb") as f:
            return dump(f, props, args.rows, sys.stdout)
    except CSVError as e:
        print(f"streamcsv: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
