"""Shared fixtures: a well-formed unit document and an on-disk course tree."""

import copy
import json

import pytest

WELL_FORMED_UNIT = {
    "id": "unit1",
    "title": "はじめまして",
    "intro": "第一课：自我介绍",
    "estimatedTime": "20 分钟",
    "sections": [
        {
            "type": "vocab",
            "title": "单词",
            "items": [
                {"japanese": "私", "reading": "わたし", "romaji": "watashi", "chinese": "我",
                 "example": "私は学生です。", "exampleChinese": "我是学生。"},
                {"japanese": "学生", "reading": "がくせい", "romaji": "gakusei", "chinese": "学生"},
            ],
        },
        {
            "type": "dialogue",
            "title": "会话",
            "scene": "在大学的教室里",
            "lines": [
                {"speaker": "田中", "japanese": "はじめまして。", "chinese": "初次见面。"},
                {"speaker": "李", "japanese": "よろしくお願いします。", "chinese": "请多关照。"},
            ],
        },
        {
            "type": "grammar",
            "title": "语法",
            "points": [
                {
                    "pattern": "AはBです",
                    "meaning": "A是B",
                    "structure": "名词 + は + 名词 + です",
                    "examples": [{"japanese": "私は学生です。", "chinese": "我是学生。"}],
                    "note": "は读作 wa",
                },
            ],
        },
        {
            "type": "flashcards",
            "title": "闪卡",
            "cards": [
                {"japanese": "私", "reading": "わたし", "romaji": "watashi", "chinese": "我"},
                {"japanese": "学生", "reading": "がくせい", "romaji": "gakusei", "chinese": "学生"},
            ],
        },
        {
            "type": "quiz",
            "title": "小测验",
            "questions": [
                {
                    "question": "「私」的读音是？",
                    "options": ["わたし", "あなた", "かれ", "かのじょ"],
                    "correct": 0,
                    "explanation": "私读作わたし。",
                },
            ],
        },
        {
            "type": "culture",
            "title": "文化",
            "content": "日本人初次见面时通常会鞠躬。",
            "tips": ["鞠躬的角度表示礼貌程度。"],
        },
    ],
}


def make_unit(**overrides) -> dict:
    """Deep copy of the well-formed unit with top-level overrides applied."""
    unit = copy.deepcopy(WELL_FORMED_UNIT)
    unit.update(overrides)
    return unit


def section_of(unit: dict, stype: str) -> dict:
    for section in unit["sections"]:
        if section.get("type") == stype:
            return section
    raise KeyError(stype)


def write_unit(root, chapter: int, unit_id: str, data) -> None:
    ch_dir = root / f"ch{chapter}"
    ch_dir.mkdir(parents=True, exist_ok=True)
    text = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)
    (ch_dir / f"{unit_id}.json").write_text(text, encoding="utf-8")


def manifest_ts(chapters: dict[int, list[str]]) -> str:
    """Render a chapters.ts-style manifest."""
    blocks = []
    for ch_id, units in chapters.items():
        unit_lines = "\n".join(f"      {{ id: '{u}', title: '{u}' }}," for u in units)
        blocks.append(
            f"  {{\n    id: {ch_id},\n    title: '第{ch_id}章',\n    units: [\n{unit_lines}\n    ],\n  }},"
        )
    return "export const chapters = [\n" + "\n".join(blocks) + "\n];\n"


@pytest.fixture
def unit():
    return make_unit()
