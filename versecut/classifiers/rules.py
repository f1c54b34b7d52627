"""Header rule sets.

Two families with very different guarantees:

SAFE rules only fire on shapes that never occur as sung text ("[Verse 2]",
"V3", "CHORUS (x2)", "Part II: ...", whole-line misspellings such as
"Chrous"). A SAFE match is final: header, confidence 1.0.

SUSPICIOUS rules are looser ("INSTRUMENTAL", "THE END", "(softly)"). They
never classify anything; they only raise a flag that the ML stage and the
second pass take into account.

Both families look at the whole trimmed line. A line that merely mentions
structural vocabulary ("Drop the bass and let it flow") matches neither.
"""

from __future__ import annotations

import re

from versecut.classifiers.patterns import LineRuleMatcher, RuleMatch
from versecut.text_normalizer import is_all_caps, strip_edge_symbols

# Canonical structural vocabulary. Multi-word forms are matched with flexible
# separators by STRUCTURAL_KEYWORD_REGEX.
STRUCTURAL_KEYWORDS = frozenset(
    {
        "verse",
        "chorus",
        "pre-chorus",
        "post-chorus",
        "prechorus",
        "postchorus",
        "bridge",
        "intro",
        "outro",
        "hook",
        "refrain",
        "interlude",
        "breakdown",
        "instrumental",
        "drop",
        "beat",
        "solo",
        "break",
        "coda",
        "tag",
        "vamp",
        "skit",
        "rap",
        "prelude",
        "finale",
        "overture",
        "ending",
        "build-up",
        "buildup",
    }
)

STRUCTURAL_KEYWORD_REGEX = re.compile(
    r"\b(?:pre[\s-]?chorus|post[\s-]?chorus|build[\s-]?up|"
    + "|".join(
        sorted(
            (kw for kw in STRUCTURAL_KEYWORDS if "-" not in kw and not kw.endswith("chorus")),
            key=len,
            reverse=True,
        )
    )
    + r"|chorus)\b",
    re.IGNORECASE,
)

# Common misspellings of section names. Only ever compared against the entire
# line (optionally followed by a number or a colon), never searched for.
MISSPELLINGS = frozenset(
    {
        # chorus
        "chrous",
        "chorous",
        "chours",
        "chrus",
        "chrorus",
        "chors",
        "choru5",
        "cohrus",
        "chorsu",
        "chorus5",
        # pre/post chorus
        "pre-chrous",
        "prechrous",
        "pre chrous",
        "pre-chours",
        "post-chrous",
        "postchrous",
        # bridge
        "briddge",
        "brige",
        "bridg",
        "birdge",
        "brigde",
        "bidge",
        # intro / outro
        "inro",
        "intru",
        "intor",
        "itnro",
        "outtro",
        "outor",
        "ouro",
        # verse
        "virse",
        "vers",
        "vrs",
        "verce",
        "vesre",
        "verese",
        # other sections
        "hoook",
        "refrainnn",
        "refrian",
        "refrane",
        "interlued",
        "interlute",
        "breakdwon",
        "instrumentel",
        "instumental",
    }
)

_SECTION = (
    r"(?:pre[\s-]?chorus|post[\s-]?chorus|verse|chorus|bridge|intro|outro|hook|refrain|"
    r"interlude|breakdown|instrumental|coda|tag|vamp|skit|rap|solo|drop|break|prelude|"
    r"finale|overture|ending)"
)
# Sections that are routinely numbered ("Verse 2", "Chorus 3")
_NUMBERED_SECTION = r"(?:pre[\s-]?chorus|post[\s-]?chorus|verse|chorus|bridge|hook|refrain|interlude)"
_NUMBER = r"(?:\d{1,2}|[ivx]{1,4}|one|two|three|four|five|six)"
_QUALIFIER = r"(?:break|section|solo|part)"
_REPEAT = r"(?:\(\s*[x×]\s*\d{1,2}\s*\)|[x×]\s*\d{1,2}|\(\s*\d{1,2}\s*[x×]\s*\)|\d{1,2}\s*[x×])"

SAFE_RULES: list[tuple[str, str]] = [
    # [Verse 2], [Chorus: All], [Instrumental Break: 3:15], [Verse 1]: intro
    (
        "bracketed_section",
        rf"\[\s*(?:final\s+)?{_SECTION}(?:\s+{_QUALIFIER})?(?:\s+{_NUMBER})?"
        rf"(?:\s*{_REPEAT})?(?:\s*:\s*[^\]]*)?\s*\](?:\s*:.*)?",
    ),
    # V1, C2, B3, PC1
    ("short_code", r"(?:V|C|B|PC)\d{1,2}"),
    # [01:23], [01:23.45], 3:15
    ("timestamp", r"\[?\s*\d{1,2}:\d{2}(?:[.:]\d{1,3})?\s*\]?"),
    # [II], [IV]
    ("roman_numeral", r"\[\s*[ivx]{1,4}\s*\]"),
    # Section A, Movement 2, Act III
    ("section_marker", r"(?:section|movement|act|scene)\s+(?:[a-z]|\d{1,2}|[ivx]{1,4})"),
    # #1, #2
    ("numbered_marker", r"#\d{1,2}"),
    # Part II, Part 2: The Return
    ("multi_part", r"part\s+(?:\d{1,2}|[ivx]{1,4}|one|two|three|four)(?:\s*[:\-–]\s*.*)?"),
    # CHORUS (x2), Chorus x3, [Hook 2x]
    ("repeat_count", rf"\[?\s*{_SECTION}(?:\s+{_NUMBER})?\s*{_REPEAT}\s*\]?"),
    # Verse 2, VERSE THREE, Chorus 1:
    ("numbered_section", rf"{_NUMBERED_SECTION}\s*{_NUMBER}\s*:?"),
]

SUSPICIOUS_RULES: list[tuple[str, str]] = [
    # Whole line wrapped as a performance direction: [Guitar Solo], (softly), *ad-lib*
    ("wrapped_direction", r"\[.+\]|\(.+\)|\{.+\}|<.+>|\*.+\*"),
]

_SAFE_MATCHER = LineRuleMatcher(SAFE_RULES)
_SUSPICIOUS_MATCHER = LineRuleMatcher(SUSPICIOUS_RULES)

_TRAILING_NUMBER = re.compile(r"\s*\d{1,2}$")
_CAPS_TOKEN = re.compile(r"[A-Z0-9][A-Z0-9 '&\-]*")
_SPACES = re.compile(r"\s+")

CAPS_TOKEN_MIN_CHARS = 2
CAPS_TOKEN_MAX_CHARS = 20


def _match_misspelling(text: str) -> RuleMatch | None:
    candidate = _SPACES.sub(" ", text.strip().lower()).rstrip(":").strip()
    if candidate in MISSPELLINGS:
        return RuleMatch(name="misspelling", pattern=candidate)
    base = _TRAILING_NUMBER.sub("", candidate)
    if base and base in MISSPELLINGS:
        return RuleMatch(name="misspelling", pattern=base)
    return None


def match_safe(text: str) -> RuleMatch | None:
    """Return the SAFE rule matching the whole line, or None.

    Args:
        text: Line text (surrounding whitespace is ignored).

    Returns:
        The matched rule. A match means the line is a header with
        confidence 1.0, whatever its context.
    """
    if not text or not text.strip():
        return None
    return _SAFE_MATCHER.match(text) or _match_misspelling(text)


def is_keyword_only(text: str) -> bool:
    """True if the line is exactly one structural keyword.

    Decorations ("*Intro*", "~Chorus~", "<Verse>") and a trailing colon are
    ignored.
    """
    core = _SPACES.sub(" ", strip_edge_symbols(text).lower())
    if not core:
        return False
    if core in STRUCTURAL_KEYWORDS:
        return True
    # "pre chorus" / "post chorus" written with a space
    return core.replace(" ", "-") in STRUCTURAL_KEYWORDS


def is_caps_token(text: str) -> bool:
    """True for a short all-caps token such as "INSTRUMENTAL" or "THE END"."""
    stripped = text.strip()
    if not CAPS_TOKEN_MIN_CHARS <= len(stripped) <= CAPS_TOKEN_MAX_CHARS:
        return False
    return is_all_caps(stripped) and _CAPS_TOKEN.fullmatch(stripped) is not None


def is_suspicious(text: str) -> bool:
    """True if the line is an ambiguous header candidate.

    Suspicious lines are never classified by this check alone.
    """
    if not text or not text.strip():
        return False
    return is_keyword_only(text) or is_caps_token(text) or _SUSPICIOUS_MATCHER.matches(text)


def contains_structural_keyword(text: str) -> bool:
    """True if any structural term occurs in the line as a whole word."""
    return STRUCTURAL_KEYWORD_REGEX.search(text) is not None


__all__ = [
    "MISSPELLINGS",
    "SAFE_RULES",
    "STRUCTURAL_KEYWORDS",
    "SUSPICIOUS_RULES",
    "contains_structural_keyword",
    "is_caps_token",
    "is_keyword_only",
    "is_suspicious",
    "match_safe",
]
