"""Aggregate audit findings and render them.

One AuditReport per run: unit issues, counters and the manifest
cross-reference. The verdict is PASS only when there are no issues, no
cross-reference findings and the manifest could be read.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone

from tools.manifest_xref import CrossReference
from tools.unit_model import Issue

RULE = "=" * 80


def utc_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass
class AuditReport:
    content_root: str
    timestamp: str = field(default_factory=utc_now)
    files_discovered: int = 0
    units_checked: int = 0
    sections_checked: int = 0
    issues: list[Issue] = field(default_factory=list)
    xref: CrossReference | None = None

    def extend(self, issues):
        self.issues.extend(issues)

    @property
    def xref_problems(self) -> int:
        if self.xref is None:
            return 0
        return len(self.xref.findings) + (1 if self.xref.error else 0)

    @property
    def total_problems(self) -> int:
        return len(self.issues) + self.xref_problems

    @property
    def passed(self) -> bool:
        return self.total_problems == 0

    @property
    def verdict(self) -> str:
        return "PASS" if self.passed else "FAIL"

    def by_file(self) -> dict[str, list[Issue]]:
        """Issues grouped per file, files in sorted order."""
        grouped: dict[str, list[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.file, []).append(issue)
        return {k: grouped[k] for k in sorted(grouped)}

    def by_category(self) -> list[tuple[str, int]]:
        """(category, count) sorted by count descending, then name."""
        counts = Counter(issue.category for issue in self.issues)
        return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))

    def to_dict(self) -> dict:
        return {
            "content_root": self.content_root,
            "timestamp": self.timestamp,
            "files_discovered": self.files_discovered,
            "units_checked": self.units_checked,
            "sections_checked": self.sections_checked,
            "issue_count": len(self.issues),
            "by_category": dict(self.by_category()),
            "issues": [i.to_dict() for i in self.issues],
            "cross_reference": self.xref.to_dict() if self.xref else None,
            "total_problems": self.total_problems,
            "verdict": self.verdict,
        }

    # ─── Text rendering ─────────────────────────────────────────────────────

    def render_header(self) -> list[str]:
        return [
            RULE,
            "COURSE UNIT DATA AUDIT",
            RULE,
            f"Data directory: {self.content_root}",
            f"Timestamp: {self.timestamp}",
            "",
            f"Discovered {self.files_discovered} unit JSON file(s).",
        ]

    def render_xref(self) -> list[str]:
        lines = ["", RULE, "CROSS-REFERENCE: manifest vs actual JSON files", RULE]
        xref = self.xref
        if xref is None:
            lines.append("  (skipped)")
            return lines
        if xref.error:
            lines.append(f"  ERROR: {xref.error}")
            lines.append("  RESULT: FAIL -- cross-reference impossible without the manifest.")
            return lines
        for f in xref.findings:
            lines.append(f"  [{f.category.upper()}] {f.message}")
        lines.append("")
        lines.append(f"  Manifest references: {len(xref.manifest_keys)} units")
        lines.append(f"  Actual JSON files:   {len(xref.disk_keys)} files")
        if xref.passed:
            lines.append("  RESULT: PASS -- All references match actual files.")
        else:
            lines.append(f"  RESULT: FAIL -- {len(xref.findings)} cross-reference issue(s) found.")
        return lines

    def render_results(self) -> list[str]:
        lines = [
            "", RULE, "AUDIT RESULTS", RULE,
            f"Total units checked:    {self.units_checked}",
            f"Total sections checked: {self.sections_checked}",
            f"Total issues found:     {len(self.issues)}",
            "",
        ]
        if self.passed:
            lines.append("ALL CHECKS PASSED. No issues found.")
            return lines
        if not self.issues:
            lines.append("No unit issues found.")
            return lines

        lines.append("--- Issues by category ---")
        for category, count in self.by_category():
            lines.append(f"  {category}: {count}")
        lines.append("")
        lines.append("--- Detailed issues by file ---")
        for file, issues in self.by_file().items():
            lines.append("")
            lines.append(f"  FILE: {file} ({len(issues)} issue(s))")
            for issue in issues:
                lines.append(f"    [{issue.category.upper()}] {issue.message}")
        return lines

    def render_verdict(self) -> list[str]:
        if self.passed:
            line = "VERDICT: PASS"
        else:
            line = f"VERDICT: FAIL ({self.total_problems} total problem(s))"
        return ["", RULE, line, RULE]

    def render_text(self) -> str:
        lines = self.render_header() + self.render_xref() + self.render_results() + self.render_verdict()
        return "\n".join(lines)
