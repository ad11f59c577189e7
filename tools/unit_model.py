"""Document model for course unit audits.

Unit documents live at ``<content_root>/ch<N>/unit<M>.json``:

  {
    "id": "unit1",
    "title": "...", "intro": "...", "estimatedTime": "15 min",
    "sections": [{"type": "vocab", "title": "...", "items": [...]}, ...]
  }

This module holds the section tags, the required-field tables used by the
validators and the small immutable records shared by every audit stage.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

# ─── Section tags ───────────────────────────────────────────────────────────

VOCAB = "vocab"
DIALOGUE = "dialogue"
GRAMMAR = "grammar"
QUIZ = "quiz"
FLASHCARDS = "flashcards"
CULTURE = "culture"

SECTION_TYPES = (VOCAB, DIALOGUE, GRAMMAR, QUIZ, FLASHCARDS, CULTURE)

# Every unit must carry at least one of each; culture is optional.
REQUIRED_SECTION_TYPES = (FLASHCARDS, QUIZ, VOCAB, DIALOGUE, GRAMMAR)

# ─── Issue categories ───────────────────────────────────────────────────────

CAT_GENERAL = "general"
CAT_PARSE = "parse"
CAT_MISSING_SECTION = "missing-section"
CAT_FORBIDDEN = "forbidden-name"
CAT_EMPTY = "empty-string"
CAT_MISSING_FILE = "missing-file"
CAT_ORPHAN_FILE = "orphan-file"

# ─── Required fields ────────────────────────────────────────────────────────

UNIT_NONEMPTY_FIELDS = ("title", "intro", "estimatedTime")

VOCAB_ITEM_FIELDS = ("japanese", "reading", "romaji", "chinese")
DIALOGUE_LINE_FIELDS = ("speaker", "japanese", "chinese")
GRAMMAR_POINT_FIELDS = ("pattern", "meaning", "structure")
GRAMMAR_EXAMPLE_FIELDS = ("japanese", "chinese")
QUIZ_QUESTION_FIELDS = ("question", "explanation")
FLASHCARD_FIELDS = VOCAB_ITEM_FIELDS
LEGACY_FLASHCARD_FIELDS = ("front", "back")

QUIZ_OPTION_COUNT = 4

DEFAULT_FORBIDDEN_SUBSTRINGS = ("黑木", "黒木")

# Root segment of every scanner path ("root.sections[0].title").
ROOT_PATH = "root"
SECTIONS_PATH = ROOT_PATH + ".sections"


@dataclass(frozen=True)
class Issue:
    """One recorded finding. ``file`` is relative to the content root."""
    file: str
    category: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UnitFile:
    """A unit document discovered on disk."""
    chapter_id: int
    unit_id: str
    path: Path

    @property
    def key(self) -> tuple[int, str]:
        return (self.chapter_id, self.unit_id)


@dataclass(frozen=True)
class ManifestEntry:
    chapter_id: int
    unit_id: str

    @property
    def key(self) -> tuple[int, str]:
        return (self.chapter_id, self.unit_id)


def unit_label(chapter_id: int, unit_id: str) -> str:
    """'ch3/unit2' — the display form used in cross-reference lines."""
    return f"ch{chapter_id}/{unit_id}"


def unit_number(unit_id: str) -> int:
    """Numeric suffix of a unit id ('unit10' -> 10); -1 when there is none."""
    digits = unit_id[len("unit"):] if unit_id.startswith("unit") else ""
    return int(digits) if digits.isascii() and digits.isdigit() else -1
