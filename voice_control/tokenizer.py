"""Split normalized transcript text into parser tokens."""

from __future__ import annotations

import re

# Speech engines attach sentence punctuation to words ("7," / "rare.")
_EDGE_PUNCTUATION = ".,!?;:\"'"

_INTEGER_RE = re.compile(r"[0-9]+")

# "2★" and "3*" arrive glued; the parser wants "2" "★"
_GLUED_UNIT_RE = re.compile(r"([0-9]+)([★*])")


def tokenize(text: str) -> list[str]:
    """Lower-case ``text`` and split it on runs of whitespace.

    Leading/trailing punctuation is trimmed from each token and tokens that
    end up empty are dropped. A number glued to a star ("2★") becomes two
    tokens. Blank input yields an empty list.
    """
    tokens = []
    for raw in text.strip().lower().split():
        token = raw.strip(_EDGE_PUNCTUATION)
        glued = _GLUED_UNIT_RE.fullmatch(token)
        if glued:
            tokens.extend(glued.groups())
        elif token:
            tokens.append(token)
    return tokens


def as_integer(token: str) -> int | None:
    """Return the value of an all-digit token, or None for anything else."""
    if _INTEGER_RE.fullmatch(token):
        return int(token)
    return None
