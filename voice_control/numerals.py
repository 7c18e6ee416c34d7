"""
Rewrite spelled-out numbers in a transcript as digits.

Speech engines are inconsistent about numbers: "level seven", "level 7" and
"level to" (for "two") all show up for the same utterance. Everything
downstream only understands digit tokens, so we rewrite first.

Supported rewrites:
    "scouted four"        → "scouted 4"
    "thirteen refreshes"  → "13 refreshes"
    "copy to"             → "copy 2"        (homophone)
    "Level Seven"         → "Level 7"       (case-insensitive, casing of the rest kept)

Words are matched on word boundaries only ("someone" keeps its "one") and
the alternation is ordered longest-first, so "thirteen" is never read as
"three" plus leftovers. Output digits are not words, which makes the
rewrite idempotent.
"""

from __future__ import annotations

import re

# ─── Word Lookup Tables ──────────────────────────────────────────────

_NUMBER_WORDS: dict[str, int] = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
    "twenty": 20,
}

# What the recognizer writes when it hears a number but picks the wrong spelling
_HOMOPHONES: dict[str, int] = {
    "won": 1,
    "to": 2,
    "too": 2,
    "for": 4,
    "ate": 8,
}

NUMERAL_WORDS: dict[str, int] = {**_NUMBER_WORDS, **_HOMOPHONES}

_NUMERAL_RE = re.compile(
    r"\b("
    + "|".join(re.escape(w) for w in sorted(NUMERAL_WORDS, key=len, reverse=True))
    + r")\b",
    re.IGNORECASE,
)


# ─── Public API ──────────────────────────────────────────────────────


def normalize_numerals(text: str) -> str:
    """Replace every known number word in ``text`` with its digits.

    Args:
        text: Raw transcript text, any casing.

    Returns:
        The same text with number words and homophones rewritten.
    """
    return _NUMERAL_RE.sub(lambda m: str(NUMERAL_WORDS[m.group(1).lower()]), text)
