#!/usr/bin/env python3
"""Course manifest parsing and manifest ↔ disk cross-reference.

Manifest formats:
  - Structured (.yaml / .yml / .json), validated against
    schemas/course_manifest_schema_v0.1.json:

        chapters:
          - id: 1
            units:
              - id: unit1
              - id: unit2

  - Source text (chapters.ts and anything else): pattern-based extraction of
    chapter blocks ``id: <N>, ... units: [ ... ]`` and unit entries
    ``id: 'unit<N>'``. This trusts the regular layout of the file and builds no
    parse tree; a ']' nested inside a units list ends the block early.

Usage:
  python tools/manifest_xref.py --manifest src/data/chapters.ts --content-root src/data
"""

from __future__ import annotations

import argparse
import json
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

import jsonschema
import yaml

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from tools.discover_units import discover_unit_files
from tools.unit_model import (
    CAT_MISSING_FILE,
    CAT_ORPHAN_FILE,
    Issue,
    ManifestEntry,
    UnitFile,
    unit_label,
    unit_number,
)

SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"
MANIFEST_SCHEMA_FILE = "course_manifest_schema_v0.1.json"
STRUCTURED_SUFFIXES = {".yaml", ".yml", ".json"}

CHAPTER_BLOCK_RE = re.compile(r"id:\s*([0-9]+),[\s\S]*?units:\s*\[([\s\S]*?)\]")
UNIT_ID_RE = re.compile(r"""id:\s*['"](unit[0-9]+)['"]""")


class ManifestError(Exception):
    """The manifest cannot be read or does not follow its schema."""


def load_manifest_schema() -> dict:
    with open(SCHEMAS_DIR / MANIFEST_SCHEMA_FILE, encoding="utf-8") as f:
        return json.load(f)


def parse_manifest_text(content: str) -> list[ManifestEntry]:
    """Extract (chapter, unit) entries from manifest source text, in file order."""
    refs = []
    for m in CHAPTER_BLOCK_RE.finditer(content):
        chapter_id = int(m.group(1))
        for um in UNIT_ID_RE.finditer(m.group(2)):
            refs.append(ManifestEntry(chapter_id, um.group(1)))
    return refs


def parse_manifest_data(data, schema: dict | None = None) -> list[ManifestEntry]:
    """Extract entries from an already-decoded structured manifest."""
    if schema is None:
        schema = load_manifest_schema()
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ManifestError(f"Manifest schema violation at {where}: {e.message}") from e

    refs = []
    for chapter in data["chapters"]:
        for unit in chapter["units"]:
            refs.append(ManifestEntry(chapter["id"], unit["id"]))
    return refs


def load_manifest(path: str | Path) -> list[ManifestEntry]:
    """Read a manifest file in whichever format its suffix names."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e

    if path.suffix.lower() not in STRUCTURED_SUFFIXES:
        return parse_manifest_text(content)

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ManifestError(f"Cannot parse manifest {path}: {e}") from e
    return parse_manifest_data(data)


def _sort_key(key: tuple[int, str]):
    return (key[0], unit_number(key[1]), key[1])


@dataclass
class CrossReference:
    manifest_keys: set = field(default_factory=set)
    disk_keys: set = field(default_factory=set)
    findings: list[Issue] = field(default_factory=list)
    error: str | None = None

    @property
    def missing(self) -> list[Issue]:
        return [f for f in self.findings if f.category == CAT_MISSING_FILE]

    @property
    def orphans(self) -> list[Issue]:
        return [f for f in self.findings if f.category == CAT_ORPHAN_FILE]

    @property
    def passed(self) -> bool:
        return self.error is None and not self.findings

    def to_dict(self) -> dict:
        return {
            "manifest_units": len(self.manifest_keys),
            "disk_units": len(self.disk_keys),
            "findings": [f.to_dict() for f in self.findings],
            "error": self.error,
            "passed": self.passed,
        }


def cross_reference(manifest: list[ManifestEntry], unit_files: list[UnitFile]) -> CrossReference:
    """Compare manifest entries against discovered files (set membership only)."""
    xref = CrossReference(
        manifest_keys={e.key for e in manifest},
        disk_keys={u.key for u in unit_files},
    )
    for key in sorted(xref.manifest_keys - xref.disk_keys, key=_sort_key):
        name = unit_label(*key) + ".json"
        xref.findings.append(Issue(
            name, CAT_MISSING_FILE,
            f"{name} is referenced in the manifest but file does not exist"))
    for key in sorted(xref.disk_keys - xref.manifest_keys, key=_sort_key):
        name = unit_label(*key) + ".json"
        xref.findings.append(Issue(
            name, CAT_ORPHAN_FILE,
            f"{name} exists but is NOT referenced in the manifest"))
    return xref


def main():
    parser = argparse.ArgumentParser(description="Cross-reference a course manifest against unit files")
    parser.add_argument("--manifest", required=True, help="chapters.ts, chapters.yaml or chapters.json")
    parser.add_argument("--content-root", required=True, help="Directory holding ch<N>/unit<N>.json")
    args = parser.parse_args()

    try:
        manifest = load_manifest(args.manifest)
        files = discover_unit_files(args.content_root)
    except (ManifestError, FileNotFoundError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)

    xref = cross_reference(manifest, files)
    for f in xref.findings:
        print(f"  [{f.category.upper()}] {f.message}")
    print(f"\n  Manifest references: {len(xref.manifest_keys)} units")
    print(f"  Unit files on disk:  {len(xref.disk_keys)} files")
    print(f"  RESULT: {'PASS' if xref.passed else 'FAIL'}")
    sys.exit(0 if xref.passed else 1)


if __name__ == "__main__":
    main()
