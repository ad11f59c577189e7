#!/usr/bin/env python3
"""Discover and load course unit documents.

Layout:
  <content_root>/ch1/unit1.json
  <content_root>/ch1/unit2.json
  <content_root>/ch2/unit1.json
  ...

Anything that does not match ``ch<N>`` / ``unit<N>.json`` is skipped.
Order is numeric (ch2 before ch10, unit9 before unit10).

Usage:
  python tools/discover_units.py --content-root src/data
"""

from __future__ import annotations

import argparse
import json
import os
import re
import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from tools.unit_model import CAT_PARSE, Issue, UnitFile

CHAPTER_DIR_RE = re.compile(r"^ch([0-9]+)$")
UNIT_FILE_RE = re.compile(r"^unit([0-9]+)\.json$")


def discover_unit_files(content_root: str | Path) -> list[UnitFile]:
    """Return every unit file under content_root, ordered by chapter then unit."""
    root = Path(content_root)
    if not root.is_dir():
        raise FileNotFoundError(f"Content root is not a directory: {root}")

    chapters = []
    for entry in root.iterdir():
        m = CHAPTER_DIR_RE.match(entry.name)
        if m and entry.is_dir():
            chapters.append((int(m.group(1)), entry))
    chapters.sort(key=lambda c: c[0])

    files: list[UnitFile] = []
    for chapter_id, ch_dir in chapters:
        units = []
        for entry in ch_dir.iterdir():
            m = UNIT_FILE_RE.match(entry.name)
            if m and entry.is_file():
                units.append((int(m.group(1)), entry.stem, entry))
        # The stem is the unit id as written ("unit01" stays "unit01").
        units.sort(key=lambda u: (u[0], u[1]))
        for _, unit_id, path in units:
            files.append(UnitFile(chapter_id, unit_id, path))
    return files


def relative_name(path: Path, content_root: str | Path) -> str:
    """Forward-slash path of a unit file relative to the content root."""
    try:
        rel = Path(path).resolve().relative_to(Path(content_root).resolve())
    except ValueError:
        rel = Path(path)
    return rel.as_posix()


def load_unit(path: str | Path, rel: str) -> tuple[object | None, Issue | None]:
    """Read and decode one unit file.

    Returns (data, None) on success and (None, parse_issue) on any read or
    decode failure. Callers skip every further check when an issue comes back.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f), None
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return None, Issue(rel, CAT_PARSE, f"Failed to parse JSON: {e}")


def main():
    parser = argparse.ArgumentParser(description="List course unit documents in audit order")
    parser.add_argument("--content-root", required=True,
                        help="Directory holding ch<N>/unit<N>.json files")
    args = parser.parse_args()

    try:
        files = discover_unit_files(args.content_root)
    except FileNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    for uf in files:
        print(f"ch{uf.chapter_id}\t{uf.unit_id}\t{relative_name(uf.path, args.content_root)}")
    print(f"{len(files)} unit file(s)", file=sys.stderr)


if __name__ == "__main__":
    main()
