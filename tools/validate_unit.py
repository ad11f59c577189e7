"""Structural validation of one parsed unit document.

Checks:
  1. Top-level fields: title, intro, estimatedTime, sections
  2. Per-section shape, dispatched on the section "type" tag
     vocab / dialogue / grammar / quiz / flashcards / culture
  3. Presence of every required section type

Nothing here raises on bad content: every violation becomes an Issue.
Empty strings inside sections are left to content_scan.find_empty_strings.
"""

from __future__ import annotations

import json

from tools.unit_model import (
    CAT_GENERAL,
    CAT_MISSING_SECTION,
    CULTURE,
    DIALOGUE,
    DIALOGUE_LINE_FIELDS,
    FLASHCARD_FIELDS,
    FLASHCARDS,
    GRAMMAR,
    GRAMMAR_EXAMPLE_FIELDS,
    GRAMMAR_POINT_FIELDS,
    LEGACY_FLASHCARD_FIELDS,
    QUIZ,
    QUIZ_OPTION_COUNT,
    QUIZ_QUESTION_FIELDS,
    REQUIRED_SECTION_TYPES,
    UNIT_NONEMPTY_FIELDS,
    VOCAB,
    VOCAB_ITEM_FIELDS,
    Issue,
)


class UnitCheck:
    """Issues and counters collected for a single unit file."""

    def __init__(self, file: str):
        self.file = file
        self.issues: list[Issue] = []
        self.sections_checked = 0

    def add(self, category: str, message: str):
        self.issues.append(Issue(self.file, category, message))

    @property
    def ok(self) -> bool:
        return len(self.issues) == 0


def _show(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def _label(value) -> str:
    """Identifying text for messages; '?' when the value is unusable."""
    return value if isinstance(value, str) and value else "?"


def _required_array(section: dict, key: str, category: str, prefix: str, check: UnitCheck):
    """Return section[key] when it is a non-empty list, else record one issue."""
    value = section.get(key)
    if value is None:
        check.add(category, f'{prefix}: missing "{key}" array')
        return None
    if not isinstance(value, list):
        check.add(category, f'{prefix}: "{key}" is not an array')
        return None
    if not value:
        check.add(category, f'{prefix}: "{key}" array is empty')
        return None
    return value


def _missing_fields(obj: dict, fields) -> list[str]:
    return [f for f in fields if obj.get(f) is None]


# ─── General fields ─────────────────────────────────────────────────────────

def validate_general_fields(data, check: UnitCheck):
    """Check top-level fields. Returns the sections list, or None to stop."""
    if not isinstance(data, dict):
        check.add(CAT_GENERAL, "Unit document is not a JSON object — cannot continue checking this unit")
        return None

    for field in UNIT_NONEMPTY_FIELDS:
        value = data.get(field)
        if value is None:
            check.add(CAT_GENERAL, f'Missing top-level field: "{field}"')
        elif not isinstance(value, str):
            check.add(CAT_GENERAL, f'"{field}" is not a string')
        elif value == "":
            check.add(CAT_GENERAL, f'"{field}" is an empty string')

    # One issue for "sections", then stop: nothing below can be checked.
    sections = data.get("sections")
    if sections is None:
        check.add(CAT_GENERAL, 'Missing top-level field: "sections" — cannot continue checking this unit')
        return None
    if not isinstance(sections, list):
        check.add(CAT_GENERAL, '"sections" is not an array — cannot continue checking this unit')
        return None
    if not sections:
        check.add(CAT_GENERAL, '"sections" array is empty')
        return None
    return sections


# ─── Section validators ─────────────────────────────────────────────────────

def check_vocab(section: dict, prefix: str, check: UnitCheck):
    items = _required_array(section, "items", VOCAB, prefix, check)
    if items is None:
        return
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            check.add(VOCAB, f"{prefix}: items[{i}] is not an object")
            continue
        for field in _missing_fields(item, VOCAB_ITEM_FIELDS):
            check.add(VOCAB, f'{prefix}: items[{i}] missing "{field}" '
                             f'(japanese: "{_label(item.get("japanese"))}")')


def check_dialogue(section: dict, prefix: str, check: UnitCheck):
    scene = section.get("scene")
    if scene is None:
        check.add(DIALOGUE, f'{prefix}: missing "scene"')
    elif not isinstance(scene, str):
        check.add(DIALOGUE, f'{prefix}: "scene" is not a string')

    lines = _required_array(section, "lines", DIALOGUE, prefix, check)
    if lines is None:
        return
    for i, line in enumerate(lines):
        if not isinstance(line, dict):
            check.add(DIALOGUE, f"{prefix}: lines[{i}] is not an object")
            continue
        for field in _missing_fields(line, DIALOGUE_LINE_FIELDS):
            check.add(DIALOGUE, f'{prefix}: lines[{i}] missing "{field}"')


def check_grammar(section: dict, prefix: str, check: UnitCheck):
    points = _required_array(section, "points", GRAMMAR, prefix, check)
    if points is None:
        return
    for i, pt in enumerate(points):
        if not isinstance(pt, dict):
            check.add(GRAMMAR, f"{prefix}: points[{i}] is not an object")
            continue
        ident = f'(pattern: "{_label(pt.get("pattern"))}")'
        for field in _missing_fields(pt, GRAMMAR_POINT_FIELDS):
            check.add(GRAMMAR, f'{prefix}: points[{i}] missing "{field}" {ident}')

        examples = pt.get("examples")
        if examples is None:
            check.add(GRAMMAR, f'{prefix}: points[{i}] missing "examples" array {ident}')
            continue
        if not isinstance(examples, list) or not examples:
            check.add(GRAMMAR, f'{prefix}: points[{i}] "examples" is empty or not an array {ident}')
            continue
        for j, ex in enumerate(examples):
            if not isinstance(ex, dict):
                check.add(GRAMMAR, f"{prefix}: points[{i}].examples[{j}] is not an object {ident}")
                continue
            for field in _missing_fields(ex, GRAMMAR_EXAMPLE_FIELDS):
                check.add(GRAMMAR, f'{prefix}: points[{i}].examples[{j}] missing "{field}" {ident}')


def check_flashcards(section: dict, prefix: str, check: UnitCheck):
    cards = _required_array(section, "cards", FLASHCARDS, prefix, check)
    if cards is None:
        return

    seen: set[str] = set()
    for i, card in enumerate(cards):
        if not isinstance(card, dict):
            check.add(FLASHCARDS, f"{prefix}: cards[{i}] is not an object")
            continue
        if any(k in card for k in LEGACY_FLASHCARD_FIELDS):
            check.add(FLASHCARDS, f'{prefix}: cards[{i}] uses old "front/back" format '
                                  f'instead of "japanese/reading/romaji/chinese"')
        ident = _label(card.get("japanese") or card.get("front"))
        for field in _missing_fields(card, FLASHCARD_FIELDS):
            check.add(FLASHCARDS, f'{prefix}: cards[{i}] missing "{field}" (japanese: "{ident}")')

        # Duplicates key on the current field name only; legacy cards sit out.
        japanese = card.get("japanese")
        if not isinstance(japanese, str) or not japanese:
            continue
        if japanese in seen:
            check.add(FLASHCARDS, f'{prefix}: cards[{i}] DUPLICATE flashcard japanese value: "{japanese}"')
        seen.add(japanese)


def check_quiz(section: dict, prefix: str, check: UnitCheck):
    questions = _required_array(section, "questions", QUIZ, prefix, check)
    if questions is None:
        return
    for i, q in enumerate(questions):
        if not isinstance(q, dict):
            check.add(QUIZ, f"{prefix}: questions[{i}] is not an object")
            continue
        text = _label(q.get("question"))
        for field in _missing_fields(q, QUIZ_QUESTION_FIELDS):
            check.add(QUIZ, f'{prefix}: questions[{i}] missing "{field}"')

        options = q.get("options")
        if options is None:
            check.add(QUIZ, f'{prefix}: questions[{i}] missing "options"')
        elif not isinstance(options, list):
            check.add(QUIZ, f'{prefix}: questions[{i}] "options" is not an array')
        elif len(options) != QUIZ_OPTION_COUNT:
            check.add(QUIZ, f'{prefix}: questions[{i}] has {len(options)} options '
                            f'(expected {QUIZ_OPTION_COUNT}): "{text}"')
        else:
            for j, opt in enumerate(options):
                if not isinstance(opt, str):
                    check.add(QUIZ, f"{prefix}: questions[{i}] options[{j}] is not a string")

        correct = q.get("correct")
        if correct is None:
            check.add(QUIZ, f'{prefix}: questions[{i}] missing "correct"')
        elif (isinstance(correct, bool) or not isinstance(correct, int)
              or not 0 <= correct < QUIZ_OPTION_COUNT):
            check.add(QUIZ, f'{prefix}: questions[{i}] "correct" is {_show(correct)} '
                            f'(expected 0-{QUIZ_OPTION_COUNT - 1}): "{text}"')


def check_culture(section: dict, prefix: str, check: UnitCheck):
    content = section.get("content")
    if content is None:
        check.add(CULTURE, f'{prefix}: missing "content"')
    elif not isinstance(content, str):
        check.add(CULTURE, f'{prefix}: "content" is not a string')

    tips = section.get("tips")
    if tips is None:
        return
    if not isinstance(tips, list):
        check.add(CULTURE, f'{prefix}: "tips" is not an array')
        return
    for j, tip in enumerate(tips):
        if not isinstance(tip, str):
            check.add(CULTURE, f"{prefix}: tips[{j}] is not a string")


SECTION_CHECKS = {
    VOCAB: check_vocab,
    DIALOGUE: check_dialogue,
    GRAMMAR: check_grammar,
    FLASHCARDS: check_flashcards,
    QUIZ: check_quiz,
    CULTURE: check_culture,
}


def validate_section(section, idx: int, check: UnitCheck) -> str | None:
    """Validate one section. Returns its type tag when it has one."""
    check.sections_checked += 1
    if not isinstance(section, dict):
        check.add(CAT_GENERAL, f"sections[{idx}] is not an object")
        return None

    stype = section.get("type")
    if stype is None or stype == "":
        check.add(CAT_GENERAL, f'sections[{idx}] missing "type"')
        return None
    validator = SECTION_CHECKS.get(stype) if isinstance(stype, str) else None
    if validator is None:
        check.add(CAT_GENERAL, f"sections[{idx}] has unknown type: {_show(stype)}")
        return None

    title = section.get("title")
    prefix = f'sections[{idx}] ({stype} "{title if isinstance(title, str) else ""}")'
    if title is None:
        check.add(stype, f'{prefix}: missing "title"')
    validator(section, prefix, check)
    return stype


def check_required_sections(present: set[str], check: UnitCheck,
                            required=REQUIRED_SECTION_TYPES):
    for req in required:
        if req not in present:
            check.add(CAT_MISSING_SECTION, f'Unit is missing a "{req}" section')


def validate_unit(data, file: str, required_sections=REQUIRED_SECTION_TYPES) -> UnitCheck:
    """Run the general-field and section validators on one parsed unit."""
    check = UnitCheck(file)
    sections = validate_general_fields(data, check)
    if sections is None:
        return check

    present = set()
    for idx, section in enumerate(sections):
        stype = validate_section(section, idx, check)
        if stype:
            present.add(stype)
    check_required_sections(present, check, required_sections)
    return check
