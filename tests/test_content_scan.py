"""Tests for tools/content_scan.py — forbidden-name and empty-string scanners."""

from conftest import make_unit, section_of
from tools.content_scan import find_empty_strings, find_forbidden_names, scan_unit, walk_strings
from tools.unit_model import CAT_EMPTY, CAT_FORBIDDEN


class TestWalkStrings:
    def test_paths_for_nested_values(self):
        data = {"a": [{"b": "x"}, "y"], "c": {"d": "z"}}
        assert list(walk_strings(data)) == [
            ("root.a[0].b", "x"),
            ("root.a[1]", "y"),
            ("root.c.d", "z"),
        ]

    def test_non_strings_ignored(self):
        data = {"n": None, "i": 3, "f": 1.5, "b": True, "l": [None, 0]}
        assert list(walk_strings(data)) == []

    def test_bare_string(self):
        assert list(walk_strings("hello")) == [("root", "hello")]

    def test_deep_nesting(self):
        data = [[[[{"k": ["deep"]}]]]]
        assert list(walk_strings(data)) == [("root[0][0][0][0].k[0]", "deep")]


class TestForbiddenNames:
    def test_simplified_variant(self):
        data = {"sections": [{"lines": [{"japanese": "黑木さんです"}]}]}
        assert find_forbidden_names(data) == [("root.sections[0].lines[0].japanese", "黑木")]

    def test_japanese_variant(self):
        data = {"title": "黒木先生"}
        assert find_forbidden_names(data) == [("root.title", "黒木")]

    def test_one_hit_per_string(self):
        data = {"x": "黑木と黒木"}
        assert find_forbidden_names(data) == [("root.x", "黑木")]

    def test_every_location_reported(self):
        data = {"title": "黑木", "sections": [{"content": "黒木"}, {"items": ["黑木"]}]}
        paths = [p for p, _ in find_forbidden_names(data)]
        assert paths == ["root.title", "root.sections[0].content", "root.sections[1].items[0]"]

    def test_literal_not_pattern(self):
        assert find_forbidden_names({"x": "a.c"}, forbidden=(".",)) == [("root.x", ".")]
        assert find_forbidden_names({"x": "abc"}, forbidden=("a.c",)) == []

    def test_keys_are_not_scanned(self):
        assert find_forbidden_names({"黑木": "ok"}) == []

    def test_clean_unit(self, unit):
        assert find_forbidden_names(unit) == []


class TestEmptyStrings:
    def test_finds_all_empties(self):
        data = {"title": "", "sections": [{"scene": ""}, {"items": ["", "x"]}]}
        assert find_empty_strings(data) == [
            "root.title", "root.sections[0].scene", "root.sections[1].items[0]",
        ]

    def test_whitespace_is_not_empty(self):
        assert find_empty_strings({"x": " "}) == []

    def test_null_is_not_empty(self):
        assert find_empty_strings({"x": None}) == []


class TestScanUnit:
    def test_clean_unit_has_no_issues(self, unit):
        assert scan_unit(unit, "ch1/unit1.json") == []

    def test_empty_scene_reported_under_sections(self, unit):
        section_of(unit, "dialogue")["scene"] = ""
        issues = scan_unit(unit, "ch1/unit1.json")
        assert len(issues) == 1
        assert issues[0].category == CAT_EMPTY
        assert issues[0].message == "Empty string at root.sections[1].scene"

    def test_empty_top_level_title_suppressed(self):
        assert scan_unit(make_unit(title=""), "u.json") == []

    def test_forbidden_issue_names_substring_and_path(self, unit):
        section_of(unit, "vocab")["items"][0]["japanese"] = "黑木"
        issues = scan_unit(unit, "u.json")
        assert len(issues) == 1
        assert issues[0].category == CAT_FORBIDDEN
        assert issues[0].message == 'Found forbidden name "黑木" at root.sections[0].items[0].japanese'

    def test_forbidden_in_top_level_reported(self):
        issues = scan_unit(make_unit(intro="黒木さんの話"), "u.json")
        assert [i.message for i in issues] == ['Found forbidden name "黒木" at root.intro']

    def test_custom_forbidden_list(self, unit):
        issues = scan_unit(unit, "u.json", forbidden=("学生",))
        assert issues
        assert all('"学生"' in i.message for i in issues)

    def test_idempotent(self, unit):
        section_of(unit, "quiz")["questions"][0]["explanation"] = ""
        section_of(unit, "culture")["content"] = "黑木"
        first = scan_unit(unit, "u.json")
        second = scan_unit(unit, "u.json")
        assert first == second
        assert len(first) == 2

    def test_scan_does_not_mutate(self, unit):
        before = make_unit()
        scan_unit(unit, "u.json")
        assert unit == before
