"""
Keyword tables for the chunk parser.

The parser's algorithm is fixed; what it recognizes lives here. Adding a
synonym means extending a table, never touching a pass. All tables are
frozen and shared read-only by every parse.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from .models import CommandKind


# ─── Validation Predicates ──────────────────────────────────────────


def in_range(minimum: int, maximum: int) -> Callable[[int], bool]:
    """Predicate accepting integers in ``[minimum, maximum]``."""

    def _check(value: int) -> bool:
        return minimum <= value <= maximum

    return _check


# ─── Table Entry Types ──────────────────────────────────────────────


@dataclass(frozen=True)
class ToggleSpec:
    """A boolean switch flipped by an adjacent on-word or off-word."""

    kind: CommandKind
    keywords: frozenset[str]
    label: str  # "Ditto" → "Ditto on" / "Ditto off"

    def feedback(self, enabled: bool) -> str:
        return f"{self.label} {'on' if enabled else 'off'}"


@dataclass(frozen=True)
class NumericFieldSpec:
    """A keyword that takes a nearby integer as its value."""

    kind: CommandKind
    keywords: frozenset[str]
    template: str  # e.g. "Level {n}"
    validate: Optional[Callable[[int], bool]] = None

    def accepts(self, value: int) -> bool:
        return self.validate is None or self.validate(value)

    def feedback(self, value: int) -> str:
        return self.template.format(n=value)


@dataclass(frozen=True)
class CategoricalSpec:
    """Single words that each select one value of a categorical input."""

    kind: CommandKind
    values: Mapping[str, str]  # surface word → canonical value

    def feedback(self, value: str) -> str:
        return value


@dataclass(frozen=True)
class CompoundSpec:
    """An adjacent (small integer, unit word) pair, e.g. "2 star"."""

    kind: CommandKind
    numbers: Mapping[int, tuple[str, str]]  # integer → (value, feedback)
    unit_words: frozenset[str]


@dataclass(frozen=True)
class FlagSpec:
    """A keyword that sets a flag on its own, optionally with a companion word."""

    kind: CommandKind
    keyword: str
    companions: frozenset[str]
    value: bool
    feedback: str


@dataclass(frozen=True)
class TriplePhraseSpec:
    """Three consecutive tokens, each drawn from its own word set."""

    kind: CommandKind
    slots: tuple[frozenset[str], frozenset[str], frozenset[str]]
    feedback: str


@dataclass(frozen=True)
class PhraseSpec:
    """A whole multi-word phrase with a fixed meaning."""

    kind: CommandKind
    words: tuple[str, ...]
    value: Optional[int]
    feedback: str


@dataclass(frozen=True)
class BareKeywordSpec:
    """A keyword that is a complete command by itself."""

    kind: CommandKind
    keywords: frozenset[str]
    feedback: str


@dataclass(frozen=True)
class FallbackSpec:
    """Field that receives a lone number when nothing else matched."""

    kind: CommandKind
    template: str
    validate: Callable[[int], bool]


# ─── Shared Word Sets ───────────────────────────────────────────────

ON_WORDS: frozenset[str] = frozenset({
    "on", "yes", "add", "enable", "enabled", "include", "with", "plus",
})

OFF_WORDS: frozenset[str] = frozenset({
    "off", "no", "remove", "disable", "disabled", "exclude", "without",
})


# ─── Default PAC Calculator Vocabulary ──────────────────────────────

TOGGLES: tuple[ToggleSpec, ...] = (
    ToggleSpec(CommandKind.DITTO, frozenset({"ditto"}), "Ditto"),
    ToggleSpec(CommandKind.PVE, frozenset({"pve"}), "PvE"),
)

FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec(
        kind=CommandKind.PVE,
        keyword="pve",
        companions=frozenset({"round", "stage", "battle"}),
        value=True,
        feedback="PvE round",
    ),
)

_ODDS_WORDS: frozenset[str] = frozenset({
    "odds", "chances", "chance", "probability", "probabilities", "percent", "percentage",
})

# One QUERY per parse: the first phrase that matches wins.
TRIPLE_PHRASES: tuple[TriplePhraseSpec, ...] = (
    # "what's my odds", "read the chances", "tell your probability"
    TriplePhraseSpec(
        kind=CommandKind.QUERY,
        slots=(
            frozenset({"what", "what's", "whats", "show", "tell", "read", "give"}),
            frozenset({"the", "my", "me", "your"}),
            _ODDS_WORDS,
        ),
        feedback="Reading odds",
    ),
    # "what are the odds", "what is my chance", "show me the percent"
    TriplePhraseSpec(
        kind=CommandKind.QUERY,
        slots=(
            frozenset({"are", "is", "me"}),
            frozenset({"the", "my", "your"}),
            _ODDS_WORDS,
        ),
        feedback="Reading odds",
    ),
)

# Order matters: an earlier field claims a shared number first.
NUMERIC_FIELDS: tuple[NumericFieldSpec, ...] = (
    NumericFieldSpec(
        CommandKind.LEVEL,
        frozenset({"level", "lvl", "lv"}),
        "Level {n}",
        in_range(1, 9),
    ),
    NumericFieldSpec(
        CommandKind.COPIES,
        frozenset({"copy", "copies", "own", "owned", "have", "got", "holding"}),
        "Own {n}",
        in_range(0, 9),
    ),
    NumericFieldSpec(
        CommandKind.SCOUTING,
        frozenset({
            "scout", "scouted", "scouting", "seen", "taken",
            "opponent", "opponents", "enemy", "enemies",
        }),
        "Scouted {n}",
        in_range(0, 20),
    ),
    NumericFieldSpec(
        CommandKind.BENCH,
        frozenset({"bench", "benched"}),
        "Bench {n}",
        in_range(0, 8),
    ),
    NumericFieldSpec(
        CommandKind.REFRESHES,
        frozenset({
            "refresh", "refreshes", "roll", "rolls", "reroll", "rerolls",
            "check", "checks", "times",
        }),
        "{n} refreshes",
        in_range(1, 99),
    ),
)

RARITY = CategoricalSpec(
    CommandKind.RARITY,
    MappingProxyType({
        "common": "common",
        "uncommon": "uncommon",
        "uc": "uncommon",
        "green": "uncommon",
        "rare": "rare",
        "blue": "rare",
        "epic": "epic",
        "purple": "epic",
        "ultra": "ultra",
        "legendary": "ultra",
        "red": "ultra",
    }),
)

EVOLUTION = CompoundSpec(
    CommandKind.EVOLUTION,
    MappingProxyType({
        2: ("two_star", "2★"),
        3: ("three_star", "3★"),
    }),
    frozenset({"star", "stars", "★", "*"}),
)

# At most one command per kind; earlier entries win.
PHRASES: tuple[PhraseSpec, ...] = (
    PhraseSpec(CommandKind.LEVEL_STEP, ("level", "up"), 1, "Level up"),
    PhraseSpec(CommandKind.LEVEL_STEP, ("up", "a", "level"), 1, "Level up"),
    PhraseSpec(CommandKind.LEVEL_STEP, ("level", "down"), -1, "Level down"),
    PhraseSpec(CommandKind.LEVEL_STEP, ("down", "a", "level"), -1, "Level down"),
    PhraseSpec(CommandKind.RESET, ("start", "over"), None, "Cleared"),
)

BARE_KEYWORDS: tuple[BareKeywordSpec, ...] = (
    BareKeywordSpec(CommandKind.RESET, frozenset({"reset", "clear", "restart"}), "Cleared"),
)

FALLBACK = FallbackSpec(CommandKind.LEVEL, "Level {n}", in_range(1, 9))


@dataclass(frozen=True)
class Vocabulary:
    """Every table the parser reads, bundled so an engine can swap them as one."""

    toggles: tuple[ToggleSpec, ...] = TOGGLES
    on_words: frozenset[str] = ON_WORDS
    off_words: frozenset[str] = OFF_WORDS
    flags: tuple[FlagSpec, ...] = FLAGS
    triple_phrases: tuple[TriplePhraseSpec, ...] = TRIPLE_PHRASES
    numeric_fields: tuple[NumericFieldSpec, ...] = NUMERIC_FIELDS
    categorical: CategoricalSpec = RARITY
    compound: CompoundSpec = EVOLUTION
    phrases: tuple[PhraseSpec, ...] = PHRASES
    bare_keywords: tuple[BareKeywordSpec, ...] = BARE_KEYWORDS
    fallback: FallbackSpec = FALLBACK


DEFAULT_VOCABULARY = Vocabulary()
