"""
Multi-pass chunk parser: the heart of voice control.

One utterance can carry several commands in any order ("pve on scouting 4
copy 2" and "copy 2 scouting 4 pve on" mean the same thing). The parser
walks the token list in fixed passes; every pass only looks at tokens no
earlier pass has claimed, and marks the tokens it uses. A token therefore
feeds at most one command, and ties are settled purely by pass order.

Passes:
    1. toggles         "ditto on", "no ditto"
    2. standalone flag "pve round", "what's my odds"
    3. keyword+number  "level 7", "4 copies", "scouted 3"
    4. categorical     "rare", "purple"             (one per parse)
    5. compound        "2 star", "3 stars"
    6. fixed phrase    "level up", "down a level", "start over"
    7. bare keyword    "reset"
    8. fallback        a lone "4" means level 4     (only if 1-7 found nothing)

The parser never raises: anything it can't place is skipped.
"""

from __future__ import annotations

import logging

from .models import Command
from .numerals import normalize_numerals
from .tokenizer import as_integer, tokenize
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

# How far a numeric keyword may reach for its number, in tokens
_NUMBER_REACH = 2


class ChunkParser:
    """Extract Commands from one tokenized utterance.

    Usage:
        commands = ChunkParser(tokenize("level 7 rare")).parse()
    """

    def __init__(self, tokens: list[str], vocabulary: Vocabulary = DEFAULT_VOCABULARY):
        self.tokens = list(tokens)
        self.consumed = [False] * len(self.tokens)
        self.vocabulary = vocabulary
        self.commands: list[Command] = []

    def parse(self) -> list[Command]:
        """Run every pass once and return the commands in pass order."""
        self._toggle_pass()
        self._standalone_flag_pass()
        self._keyword_number_pass()
        self._categorical_pass()
        self._compound_pass()
        self._fixed_phrase_pass()
        self._bare_keyword_pass()
        if not self.commands:
            self._fallback_pass()

        logger.debug(
            "Parsed %d command(s) from %r: %s",
            len(self.commands),
            " ".join(self.tokens),
            ", ".join(c.feedback for c in self.commands) or "none",
        )
        return list(self.commands)

    # ─── Token Bookkeeping ──────────────────────────────────────────

    def _free(self, index: int) -> bool:
        return 0 <= index < len(self.tokens) and not self.consumed[index]

    def _claim(self, *indices: int) -> None:
        for i in indices:
            self.consumed[i] = True

    def _emit(self, command: Command, *indices: int) -> None:
        self._claim(*indices)
        self.commands.append(command)

    def _free_integer(self, index: int) -> int | None:
        if not self._free(index):
            return None
        return as_integer(self.tokens[index])

    # ─── Pass 1: Toggles ────────────────────────────────────────────

    def _toggle_pass(self) -> None:
        vocab = self.vocabulary
        for spec in vocab.toggles:
            for i, token in enumerate(self.tokens):
                if token not in spec.keywords or not self._free(i):
                    continue
                # The word before the keyword outranks the word after it
                for j in (i - 1, i + 1):
                    if not self._free(j):
                        continue
                    if self.tokens[j] in vocab.on_words:
                        enabled = True
                    elif self.tokens[j] in vocab.off_words:
                        enabled = False
                    else:
                        continue
                    self._emit(
                        Command(kind=spec.kind, value=enabled, feedback=spec.feedback(enabled)),
                        i,
                        j,
                    )
                    break
                else:
                    continue
                break

    # ─── Pass 2: Standalone Flags ───────────────────────────────────

    def _standalone_flag_pass(self) -> None:
        for spec in self.vocabulary.flags:
            if any(c.kind == spec.kind for c in self.commands):
                continue
            for i, token in enumerate(self.tokens):
                if token != spec.keyword or not self._free(i):
                    continue
                indices = [i]
                for j in (i + 1, i - 1):
                    if self._free(j) and self.tokens[j] in spec.companions:
                        indices.append(j)
                        break
                self._emit(
                    Command(kind=spec.kind, value=spec.value, feedback=spec.feedback),
                    *indices,
                )
                break

        for phrase in self.vocabulary.triple_phrases:
            if any(c.kind == phrase.kind for c in self.commands):
                continue
            for i in range(len(self.tokens) - 2):
                window = range(i, i + 3)
                if all(
                    self._free(k) and self.tokens[k] in slot
                    for k, slot in zip(window, phrase.slots)
                ):
                    self._emit(Command(kind=phrase.kind, feedback=phrase.feedback), *window)
                    break

    # ─── Pass 3: Keyword + Number ───────────────────────────────────

    def _keyword_number_pass(self) -> None:
        for spec in self.vocabulary.numeric_fields:
            for i, token in enumerate(self.tokens):
                if token not in spec.keywords or not self._free(i):
                    continue

                found = self._find_number(i)
                if found is None:
                    continue
                j, value = found
                if not spec.accepts(value):
                    logger.debug("Discarding %s %d: outside valid range", spec.kind.value, value)
                    continue

                self._emit(
                    Command(kind=spec.kind, value=value, feedback=spec.feedback(value)),
                    i,
                    j,
                )
                break

    def _find_number(self, keyword_index: int) -> tuple[int, int] | None:
        """Nearest free integer after the keyword, else before it."""
        forward = range(keyword_index + 1, keyword_index + 1 + _NUMBER_REACH)
        backward = range(keyword_index - 1, keyword_index - 1 - _NUMBER_REACH, -1)
        for candidates in (forward, backward):
            for j in candidates:
                value = self._free_integer(j)
                if value is not None:
                    return j, value
        return None

    # ─── Pass 4: Categorical ────────────────────────────────────────

    def _categorical_pass(self) -> None:
        spec = self.vocabulary.categorical
        for i, token in enumerate(self.tokens):
            if self._free(i) and token in spec.values:
                value = spec.values[token]
                self._emit(Command(kind=spec.kind, value=value, feedback=spec.feedback(value)), i)
                return

    # ─── Pass 5: Two-Token Compound ─────────────────────────────────

    def _compound_pass(self) -> None:
        spec = self.vocabulary.compound
        for i in range(len(self.tokens) - 1):
            number = self._free_integer(i)
            if number not in spec.numbers:
                continue
            if self._free(i + 1) and self.tokens[i + 1] in spec.unit_words:
                value, feedback = spec.numbers[number]
                self._emit(Command(kind=spec.kind, value=value, feedback=feedback), i, i + 1)
                return

    # ─── Pass 6: Fixed Phrases ──────────────────────────────────────

    def _fixed_phrase_pass(self) -> None:
        for phrase in self.vocabulary.phrases:
            if any(c.kind == phrase.kind for c in self.commands):
                continue
            width = len(phrase.words)
            for i in range(len(self.tokens) - width + 1):
                window = range(i, i + width)
                if tuple(self.tokens[i:i + width]) != phrase.words:
                    continue
                # A phrase may not reuse words another command already owns
                if not all(self._free(k) for k in window):
                    continue
                self._emit(
                    Command(kind=phrase.kind, value=phrase.value, feedback=phrase.feedback),
                    *window,
                )
                break

    # ─── Pass 7: Bare Keywords ──────────────────────────────────────

    def _bare_keyword_pass(self) -> None:
        for spec in self.vocabulary.bare_keywords:
            if any(c.kind == spec.kind for c in self.commands):
                continue
            for i, token in enumerate(self.tokens):
                if self._free(i) and token in spec.keywords:
                    self._emit(Command(kind=spec.kind, feedback=spec.feedback), i)
                    break

    # ─── Pass 8: Fallback ───────────────────────────────────────────

    def _fallback_pass(self) -> None:
        spec = self.vocabulary.fallback
        for i in range(len(self.tokens)):
            value = self._free_integer(i)
            if value is not None and spec.validate(value):
                self._emit(
                    Command(kind=spec.kind, value=value, feedback=spec.template.format(n=value)),
                    i,
                )
                return


# ─── Convenience ────────────────────────────────────────────────────


def parse_command(text: str, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> list[Command]:
    """Normalize, tokenize and parse ``text`` in one call."""
    return ChunkParser(tokenize(normalize_numerals(text)), vocabulary).parse()
