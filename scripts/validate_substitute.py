#!/usr/bin/env python3
"""Validate a substitute (offline) fleet document, or print a sample one.

Usage
-----
::

    python scripts/validate_substitute.py fleet.json
    python scripts/validate_substitute.py --sample > fleet.json

Exit status is 0 for a valid document, 1 for an invalid one and 2 when
the file cannot be read or parsed.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetsync import build_sample_document, validate_substitute_document  # noqa: E402
from fleetsync.substitute import read_document  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate a substitute fleet document.")
    parser.add_argument("path", nargs="?", help="JSON document to validate")
    parser.add_argument("--sample", action="store_true", help="Print a sample valid document and exit")
    args = parser.parse_args()

    if args.sample:
        print(json.dumps(build_sample_document(), indent=2))
        return 0
    if not args.path:
        parser.error("path is required unless --sample is given")

    try:
        document = read_document(args.path)
    except (OSError, ValueError) as exc:
        print(f"Failed to parse {args.path}: {exc}", file=sys.stderr)
        return 2

    result = validate_substitute_document(document)
    if result.valid:
        print(f"{args.path}: valid")
        return 0
    print(f"{args.path}: {len(result.errors)} problem(s)")
    for error in result.errors:
        print(f"  - {error}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
