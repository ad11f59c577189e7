"""Content-policy scanners over a whole unit document.

Both scanners visit every string at every depth:
  - dict values get ".key" path segments
  - list items get "[i]" path segments
  - the document itself is "root"

None, numbers and booleans never match.
"""

from __future__ import annotations

from typing import Iterator

from tools.unit_model import (
    CAT_EMPTY,
    CAT_FORBIDDEN,
    DEFAULT_FORBIDDEN_SUBSTRINGS,
    ROOT_PATH,
    SECTIONS_PATH,
    Issue,
)


def walk_strings(node, path: str = ROOT_PATH) -> Iterator[tuple[str, str]]:
    """Yield (path, value) for every string leaf under node, in document order."""
    if isinstance(node, str):
        yield path, node
    elif isinstance(node, list):
        for i, item in enumerate(node):
            yield from walk_strings(item, f"{path}[{i}]")
    elif isinstance(node, dict):
        for key, value in node.items():
            yield from walk_strings(value, f"{path}.{key}")


def find_forbidden_names(data, forbidden=DEFAULT_FORBIDDEN_SUBSTRINGS) -> list[tuple[str, str]]:
    """Return (path, matched_substring) per offending string.

    Substrings are literal text. When one string holds several, the first
    configured substring is the one reported.
    """
    results = []
    for path, value in walk_strings(data):
        for name in forbidden:
            if name and name in value:
                results.append((path, name))
                break
    return results


def find_empty_strings(data) -> list[str]:
    """Return the path of every "" value."""
    return [path for path, value in walk_strings(data) if value == ""]


def _under_sections(path: str) -> bool:
    return path == SECTIONS_PATH or path.startswith(SECTIONS_PATH + "[") \
        or path.startswith(SECTIONS_PATH + ".")


def scan_unit(data, file: str, forbidden=DEFAULT_FORBIDDEN_SUBSTRINGS) -> list[Issue]:
    """Run both scanners and convert their hits to Issues.

    Empty strings outside "sections" are dropped; the top-level ones are
    already reported by the general-field check.
    """
    issues = []
    for path, matched in find_forbidden_names(data, forbidden):
        issues.append(Issue(file, CAT_FORBIDDEN, f'Found forbidden name "{matched}" at {path}'))
    for path in find_empty_strings(data):
        if _under_sections(path):
            issues.append(Issue(file, CAT_EMPTY, f"Empty string at {path}"))
    return issues
