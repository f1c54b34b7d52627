"""Tests for versecut/contracts/classification.py."""

import dataclasses

import pytest

from versecut.contracts import (
    Classification,
    ClassificationMethod,
    Evidence,
    FeatureSet,
    Line,
    LineType,
)


def features(**overrides):
    values = dict(
        word_count=1,
        char_count=6,
        is_all_caps=True,
        has_brackets=False,
        has_parentheses=False,
        contains_structural_keyword=True,
        is_suspicious=True,
        has_exclamation=False,
        previous_empty=True,
        next_empty=False,
        position_in_group=0,
    )
    values.update(overrides)
    return FeatureSet(**values)


class TestLine:
    def test_from_raw_trims(self):
        line = Line.from_raw(4, "  [Chorus]\t")
        assert line.index == 4
        assert line.raw == "  [Chorus]\t"
        assert line.text == "[Chorus]"

    @pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
    def test_empty(self, raw):
        assert Line.from_raw(0, raw).is_empty

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Line.from_raw(0, "x").text = "y"


class TestClassification:
    @pytest.mark.parametrize(
        "line_type, keep",
        [
            (LineType.HEADER, False),
            (LineType.LYRIC, True),
            (LineType.EMPTY, True),
            (LineType.UNCERTAIN, True),
        ],
    )
    def test_keep_for_layout(self, line_type, keep):
        result = Classification(Line.from_raw(0, "x"), line_type, 0.5, ClassificationMethod.ML_CONTEXT)
        assert result.keep_for_layout is keep
        assert result.is_header is (line_type == LineType.HEADER)

    def test_text_is_raw(self):
        result = Classification(
            Line.from_raw(0, " la la "), LineType.LYRIC, 0.9, ClassificationMethod.ML_CONTEXT
        )
        assert result.text == " la la "

    def test_to_dict_safe_verdict(self):
        result = Classification(
            Line.from_raw(2, "[Verse 1]"),
            LineType.HEADER,
            1.0,
            ClassificationMethod.SAFE_RULE,
            evidence=Evidence(rule="bracketed_section"),
        )
        assert result.to_dict() == {
            "index": 2,
            "text": "[Verse 1]",
            "type": "header",
            "confidence": 1.0,
            "method": "rule-safe",
            "reprocessed": False,
            "evidence": {"rule": "bracketed_section"},
        }

    def test_to_dict_ml_verdict(self):
        evidence = Evidence(
            header_similarity=0.712345,
            lyric_similarity=0.5,
            raw_header_similarity=0.56987,
            raw_lyric_similarity=0.5,
            adjustments=("suspicious_header",),
            suspicious_bias=True,
        )
        result = Classification(
            Line.from_raw(0, "CHORUS"),
            LineType.HEADER,
            0.212345,
            ClassificationMethod.ML_CONTEXT,
            evidence=evidence,
            features=features(surrounding_confirmed_lyric_count=1),
            reprocessed=True,
        )
        data = result.to_dict()
        assert data["confidence"] == 0.2123
        assert data["reprocessed"] is True
        assert data["evidence"] == {
            "header_similarity": 0.7123,
            "lyric_similarity": 0.5,
            "raw_header_similarity": 0.5699,
            "raw_lyric_similarity": 0.5,
            "adjustments": ["suspicious_header"],
            "suspicious_bias": True,
        }
        assert data["features"]["surrounding_confirmed_lyric_count"] == 1
        assert data["features"]["is_suspicious"] is True

    def test_replace_builds_new_object(self):
        first = Classification(
            Line.from_raw(0, "x"), LineType.UNCERTAIN, 0.05, ClassificationMethod.ML_CONTEXT
        )
        second = dataclasses.replace(first, reprocessed=True)
        assert not first.reprocessed
        assert second.reprocessed


def test_enum_values():
    assert [t.value for t in LineType] == ["header", "lyric", "empty", "uncertain"]
    assert ClassificationMethod.HEURISTIC_EXCLAMATION.value == "heuristic-exclamation"
