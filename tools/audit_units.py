#!/usr/bin/env python3
"""Audit every course unit JSON document under a content root.

Checks, per unit:
  1. JSON decodes (parse failures skip the remaining checks for that unit)
  2. Top-level fields: title, intro, estimatedTime, sections
  3. Section shape: vocab, dialogue, grammar, quiz, flashcards, culture
  4. Required section types present (flashcards, quiz, vocab, dialogue, grammar)
  5. Forbidden names anywhere in the document
  6. Empty strings inside sections
Then, once for the course:
  7. Manifest ↔ disk cross-reference (missing files, orphan files)

Usage:
  python tools/audit_units.py \\
    --content-root src/data \\
    [--manifest src/data/chapters.ts] \\
    [--config audit_config.yaml] \\
    [--forbidden 黑木 黒木] \\
    [--json-out audit_report.json] [--quiet]

Exit codes: 0 PASS, 1 FAIL, 2 fatal (bad config, missing content root or
unusable manifest).
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime
from pathlib import Path

# Add repo root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from tools.audit_config import AuditConfig, ConfigError, resolve_config
from tools.audit_report import AuditReport
from tools.content_scan import scan_unit
from tools.discover_units import discover_unit_files, load_unit, relative_name
from tools.manifest_xref import CrossReference, ManifestError, cross_reference, load_manifest
from tools.unit_model import DEFAULT_FORBIDDEN_SUBSTRINGS, REQUIRED_SECTION_TYPES, Issue, UnitFile
from tools.validate_unit import validate_unit

QUIET = False


# ─── Utility ────────────────────────────────────────────────────────────────

def log(msg: str, level: str = "INFO"):
    if QUIET and level == "INFO":
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] [{level}] {msg}", file=sys.stderr, flush=True)


def abort(msg: str, code: int = 2):
    """Print error and exit."""
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(code)


# ─── Audit ──────────────────────────────────────────────────────────────────

def audit_document(data, rel: str,
                   forbidden=DEFAULT_FORBIDDEN_SUBSTRINGS,
                   required_sections=REQUIRED_SECTION_TYPES) -> tuple[list[Issue], int]:
    """Validate and scan one decoded unit. Returns (issues, sections_checked)."""
    check = validate_unit(data, rel, required_sections)
    issues = list(check.issues)
    issues.extend(scan_unit(data, rel, forbidden))
    return issues, check.sections_checked


def audit_unit_file(unit: UnitFile, content_root, report: AuditReport,
                    forbidden=DEFAULT_FORBIDDEN_SUBSTRINGS,
                    required_sections=REQUIRED_SECTION_TYPES):
    rel = relative_name(unit.path, content_root)
    data, parse_issue = load_unit(unit.path, rel)
    if parse_issue is not None:
        log(f"{rel}: {parse_issue.message}", "WARN")
        report.extend([parse_issue])
        return

    report.units_checked += 1
    issues, sections = audit_document(data, rel, forbidden, required_sections)
    report.sections_checked += sections
    report.extend(issues)


def run_audit(config: AuditConfig) -> AuditReport:
    """Discover, validate, scan and cross-reference. Never raises on content.

    FileNotFoundError propagates when the content root itself is missing.
    """
    report = AuditReport(content_root=str(config.content_root))
    unit_files = discover_unit_files(config.content_root)
    report.files_discovered = len(unit_files)
    log(f"Discovered {len(unit_files)} unit file(s) in {config.content_root}")

    for i, unit in enumerate(unit_files):
        if (i + 1) % 50 == 0:
            log(f"  Processing {i + 1}/{len(unit_files)}...")
        audit_unit_file(unit, config.content_root, report,
                        config.forbidden_substrings, config.required_sections)

    try:
        manifest = load_manifest(config.manifest)
    except ManifestError as e:
        log(str(e), "ERROR")
        report.xref = CrossReference(disk_keys={u.key for u in unit_files}, error=str(e))
        return report

    log(f"Manifest {config.manifest}: {len(manifest)} unit reference(s)")
    report.xref = cross_reference(manifest, unit_files)
    return report


def write_json_report(report: AuditReport, path: str | Path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
        f.write("\n")


def main(argv=None):
    global QUIET
    parser = argparse.ArgumentParser(description="Audit course unit JSON documents")
    parser.add_argument("--content-root", default=None,
                        help="Directory holding ch<N>/unit<N>.json (default: src/data)")
    parser.add_argument("--manifest", default=None,
                        help="Course manifest: chapters.ts, .yaml or .json (default: <content-root>/chapters.ts)")
    parser.add_argument("--config", default=None,
                        help="YAML config file (see audit_config.yaml)")
    parser.add_argument("--forbidden", nargs="+", default=None,
                        help="Forbidden substrings (overrides config)")
    parser.add_argument("--json-out", default=None,
                        help="Optional: write the report as JSON")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress progress lines on stderr")
    args = parser.parse_args(argv)
    QUIET = args.quiet

    try:
        config = resolve_config(args.config, args.content_root, args.manifest, args.forbidden)
    except ConfigError as e:
        abort(str(e))

    try:
        report = run_audit(config)
    except FileNotFoundError as e:
        abort(str(e))

    print(report.render_text())

    if args.json_out:
        write_json_report(report, args.json_out)
        log(f"JSON report written to {args.json_out}")

    if report.xref is not None and report.xref.error:
        sys.exit(2)
    sys.exit(0 if report.passed else 1)


if __name__ == "__main__":
    main()
