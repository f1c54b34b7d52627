"""Tests for versecut/classifiers/rules.py and patterns.py."""

import re

import pytest

from versecut.classifiers.patterns import LineRuleMatcher, RuleMatch
from versecut.classifiers.rules import (
    MISSPELLINGS,
    contains_structural_keyword,
    is_caps_token,
    is_keyword_only,
    is_suspicious,
    match_safe,
)


class TestLineRuleMatcher:
    RULES = [
        ("short_code", r"[VCB]\d{1,2}"),
        ("timestamp", r"\[\d{1,2}:\d{2}\]"),
    ]

    def test_returns_first_matching_rule(self):
        matcher = LineRuleMatcher(self.RULES)
        assert matcher.match("V3") == RuleMatch(name="short_code", pattern=r"[VCB]\d{1,2}")

    def test_whole_line_only(self):
        matcher = LineRuleMatcher(self.RULES)
        assert matcher.match("V3 again") is None
        assert matcher.match("see [01:23] here") is None

    def test_ignores_surrounding_whitespace(self):
        assert LineRuleMatcher(self.RULES).match("  [01:23]  ").name == "timestamp"

    def test_case_insensitive_by_default(self):
        assert LineRuleMatcher(self.RULES).matches("v3")

    def test_custom_flags(self):
        assert not LineRuleMatcher(self.RULES, flags=0).matches("v3")

    def test_empty_text(self):
        assert LineRuleMatcher(self.RULES).match("   ") is None

    def test_invalid_pattern_skipped(self, caplog):
        matcher = LineRuleMatcher([("broken", r"[unclosed"), ("ok", r"ok")])
        assert matcher.matches("ok")
        assert not matcher.matches("[unclosed")
        assert "Invalid regex" in caplog.text

    def test_precompiled_pattern(self):
        matcher = LineRuleMatcher([("exact", re.compile(r"Hook"))])
        assert matcher.matches("Hook")
        assert not matcher.matches("hook")


class TestMatchSafe:
    @pytest.mark.parametrize(
        "text,rule",
        [
            ("[Verse 1]", "bracketed_section"),
            ("[Verse 2: Artist A & Artist B]", "bracketed_section"),
            ("[Chorus]", "bracketed_section"),
            ("[Pre-Chorus]", "bracketed_section"),
            ("[Instrumental Break: 3:15]", "bracketed_section"),
            ("[Chorus x2]", "bracketed_section"),
            ("[Verse 1]: the beginning", "bracketed_section"),
            ("[Intro: DJ Khaled]", "bracketed_section"),
            ("V1", "short_code"),
            ("C2", "short_code"),
            ("B3", "short_code"),
            ("PC1", "short_code"),
            ("v3", "short_code"),
            ("[01:23]", "timestamp"),
            ("[01:23.45]", "timestamp"),
            ("3:15", "timestamp"),
            ("[II]", "roman_numeral"),
            ("[I]", "roman_numeral"),
            ("Section A", "section_marker"),
            ("Movement 1", "section_marker"),
            ("Act III", "section_marker"),
            ("#1", "numbered_marker"),
            ("Part II: K-Pop Section", "multi_part"),
            ("Part II", "multi_part"),
            ("CHORUS x3", "repeat_count"),
            ("BRIDGE (X2)", "repeat_count"),
            ("CHORUS (x2)", "repeat_count"),
            ("Chorus (2x)", "repeat_count"),
            ("VERSE 1", "numbered_section"),
            ("Verse 2:", "numbered_section"),
            ("VERSE THREE", "numbered_section"),
            ("Pre-Chorus 2", "numbered_section"),
        ],
    )
    def test_safe_headers(self, text, rule):
        match = match_safe(text)
        assert match is not None, text
        assert match.name == rule

    @pytest.mark.parametrize(
        "text",
        [
            "Chrous",
            "Briddge",
            "Brige",
            "Bridg",
            "Inro",
            "Intru",
            "Outtro",
            "Virse",
            "Vers",
            "Vrs",
            "Chrus",
            "Chrorus",
            "Chors",
            "CHORU5",
            "Hoook",
            "Refrainnn",
            "Pre-Chrous",
            "Virse 2",
            "Vers 3",
            "Chrous:",
        ],
    )
    def test_misspellings(self, text):
        match = match_safe(text)
        assert match is not None, text
        assert match.name == "misspelling"

    @pytest.mark.parametrize(
        "text",
        [
            "Walking down the street at night",
            "CHORUS",
            "Chorus",
            "INSTRUMENTAL",
            "Drop the bass and let it flow",
            "Like a bridge over troubled water",
            "Metro Boomin want some more",
            "DJ Mustard on the beat",
            "TM88",
            "Verse of my life",
            "Chorus of angels singing",
            "Part of me",
            "Act like you know",
            "Brige over the river",
            "[Producer Tag: Metro Boomin]",
            "(softly)",
            "",
            "   ",
        ],
    )
    def test_not_safe(self, text):
        assert match_safe(text) is None

    def test_misspellings_are_lowercase(self):
        assert all(word == word.lower() for word in MISSPELLINGS)


class TestSuspicious:
    @pytest.mark.parametrize(
        "text",
        [
            "CHORUS",
            "Chorus",
            "chorus:",
            "*Intro*",
            "~Chorus~",
            "<Verse>",
            "{Bridge}",
            "Pre chorus",
            "INSTRUMENTAL",
            "Drop",
            "THE END",
            "TM88",
            "(softly)",
            "[Guitar Solo]",
        ],
    )
    def test_suspicious(self, text):
        assert is_suspicious(text)

    @pytest.mark.parametrize(
        "text",
        [
            "Walking down the street",
            "Love is all we need",
            "Drop the bass",
            "I",
            "",
            "   ",
            "This line is far too long to be a caps token",
        ],
    )
    def test_not_suspicious(self, text):
        assert not is_suspicious(text)

    def test_keyword_only(self):
        assert is_keyword_only("*Outro*")
        assert is_keyword_only("Build up")
        assert not is_keyword_only("Outro now")

    def test_caps_token_length_bounds(self):
        assert not is_caps_token("A")
        assert is_caps_token("OK")
        assert not is_caps_token("A" * 21)
        assert not is_caps_token("Mixed Case")


class TestContainsStructuralKeyword:
    @pytest.mark.parametrize(
        "text",
        [
            "This instrumental melody is beautiful",
            "Drop the bass",
            "pre-chorus time",
            "Like a bridge over troubled water",
            "[Verse 1]",
        ],
    )
    def test_contains(self, text):
        assert contains_structural_keyword(text)

    @pytest.mark.parametrize(
        "text",
        ["introduce yourself", "breakdance all night", "they dropped it", "Let's go", ""],
    )
    def test_whole_words_only(self, text):
        assert not contains_structural_keyword(text)
