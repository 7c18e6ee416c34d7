"""
Test suite for the interpretation core: numerals, tokenizer, chunk parser.

Everything here is pure and deterministic: no audio, no host, no clock.

Run: pytest tests/ -v
"""

from __future__ import annotations

from collections import Counter

import pytest

from voice_control.models import Command, CommandKind
from voice_control.numerals import normalize_numerals
from voice_control.parser import ChunkParser, parse_command
from voice_control.tokenizer import as_integer, tokenize
from voice_control.vocabulary import BARE_KEYWORDS, BareKeywordSpec, Vocabulary


def _pairs(commands: list[Command]) -> list[tuple[CommandKind, object]]:
    return [(c.kind, c.value) for c in commands]


class _ExclusiveParser(ChunkParser):
    """Fails the test if any pass claims a token that is already claimed."""

    def _claim(self, *indices: int) -> None:
        for i in indices:
            assert not self.consumed[i], f"token {i} ({self.tokens[i]!r}) claimed twice"
        super()._claim(*indices)


# ═══════════════════════════════════════════════════════════════════════
# NUMERAL NORMALIZER
# ═══════════════════════════════════════════════════════════════════════


class TestNormalizeNumerals:
    def test_single_word(self):
        assert normalize_numerals("scouted four") == "scouted 4"

    def test_thirteen_is_not_three(self):
        assert normalize_numerals("thirteen") == "13"
        assert normalize_numerals("thirteen refreshes") == "13 refreshes"

    def test_longer_words_win(self):
        assert normalize_numerals("fourteen sixteen seventeen") == "14 16 17"

    def test_case_insensitive_rest_untouched(self):
        assert normalize_numerals("Level Seven") == "Level 7"

    def test_zero_and_twenty(self):
        assert normalize_numerals("zero twenty") == "0 20"

    def test_homophones(self):
        assert normalize_numerals("copy to") == "copy 2"
        assert normalize_numerals("me too") == "me 2"
        assert normalize_numerals("I won") == "I 1"

    def test_whole_words_only(self):
        assert normalize_numerals("someone often tone") == "someone often tone"
        assert normalize_numerals("tomorrow") == "tomorrow"

    def test_punctuation_passes_through(self):
        assert normalize_numerals("four, five.") == "4, 5."

    def test_empty(self):
        assert normalize_numerals("") == ""

    @pytest.mark.parametrize(
        "text",
        [
            "level seven rare have three",
            "thirteen to two",
            "pve on scouting 4 copy 2",
            "",
            "Nothing numeric here",
        ],
    )
    def test_idempotent(self, text):
        once = normalize_numerals(text)
        assert normalize_numerals(once) == once


# ═══════════════════════════════════════════════════════════════════════
# TOKENIZER
# ═══════════════════════════════════════════════════════════════════════


class TestTokenizer:
    def test_lowercases_and_splits_whitespace_runs(self):
        assert tokenize("  Level 7 \t RARE\n") == ["level", "7", "rare"]

    def test_strips_edge_punctuation(self):
        assert tokenize("Level 7, rare.") == ["level", "7", "rare"]

    def test_inner_apostrophe_kept(self):
        assert tokenize("What's my odds?") == ["what's", "my", "odds"]

    def test_empty_and_blank(self):
        assert tokenize("") == []
        assert tokenize("   \t\n ") == []

    def test_punctuation_only_token_dropped(self):
        assert tokenize("level , 7") == ["level", "7"]

    def test_as_integer(self):
        assert as_integer("7") == 7
        assert as_integer("12") == 12
        assert as_integer("7a") is None
        assert as_integer("²") is None
        assert as_integer("") is None


# ═══════════════════════════════════════════════════════════════════════
# KEYWORD + NUMBER PASS
# ═══════════════════════════════════════════════════════════════════════


class TestKeywordNumber:
    def test_level_seven(self):
        assert parse_command("level 7") == [
            Command(kind=CommandKind.LEVEL, value=7, feedback="Level 7")
        ]

    def test_level_twelve_fails_validation(self):
        assert parse_command("level 12") == []

    def test_invalid_match_consumes_nothing(self):
        parser = ChunkParser(tokenize("level 12"))
        assert parser.parse() == []
        assert parser.consumed == [False, False]

    def test_rejected_number_stays_available(self):
        # Out of range for level, fine for scouting
        assert _pairs(parse_command("scouted 12 level")) == [(CommandKind.SCOUTING, 12)]

    def test_backward_search(self):
        assert _pairs(parse_command("4 copies")) == [(CommandKind.COPIES, 4)]

    def test_forward_wins_over_backward(self):
        assert _pairs(parse_command("3 copies 5")) == [(CommandKind.COPIES, 5)]

    def test_reach_is_two_tokens(self):
        commands = parse_command("copies a b 5")
        assert CommandKind.COPIES not in {c.kind for c in commands}

    def test_spelled_out_numbers(self):
        assert _pairs(parse_command("level seven rare have three")) == [
            (CommandKind.LEVEL, 7),
            (CommandKind.COPIES, 3),
            (CommandKind.RARITY, "rare"),
        ]

    def test_homophone_number(self):
        assert _pairs(parse_command("copy to")) == [(CommandKind.COPIES, 2)]

    def test_earlier_field_claims_shared_number(self):
        # "have" could reach 7 too, but level is resolved first
        assert _pairs(parse_command("i have level 7")) == [(CommandKind.LEVEL, 7)]

    def test_bench_and_refreshes(self):
        assert _pairs(parse_command("bench 5 twelve refreshes")) == [
            (CommandKind.BENCH, 5),
            (CommandKind.REFRESHES, 12),
        ]

    @pytest.mark.parametrize("text", ["5 times", "check 5", "5 checks", "reroll 5"])
    def test_refresh_synonyms(self, text):
        assert parse_command(text) == [
            Command(kind=CommandKind.REFRESHES, value=5, feedback="5 refreshes")
        ]

    def test_feedback_text(self):
        commands = parse_command("scouted 4 copies 2 bench 3 roll 20")
        assert [c.feedback for c in commands] == [
            "Own 2",
            "Scouted 4",
            "Bench 3",
            "20 refreshes",
        ]


# ═══════════════════════════════════════════════════════════════════════
# TOGGLES & STANDALONE FLAGS
# ═══════════════════════════════════════════════════════════════════════


class TestToggles:
    @pytest.mark.parametrize(
        "text,enabled",
        [
            ("ditto on", True),
            ("add ditto", True),
            ("with ditto", True),
            ("ditto off", False),
            ("no ditto", False),
            ("remove ditto", False),
        ],
    )
    def test_ditto(self, text, enabled):
        assert _pairs(parse_command(text)) == [(CommandKind.DITTO, enabled)]

    def test_preceding_word_checked_first(self):
        assert _pairs(parse_command("no ditto on")) == [(CommandKind.DITTO, False)]

    def test_two_toggles(self):
        commands = parse_command("ditto on pve off")
        assert _pairs(commands) == [(CommandKind.DITTO, True), (CommandKind.PVE, False)]
        assert [c.feedback for c in commands] == ["Ditto on", "PvE off"]

    def test_keyword_without_switch_word(self):
        assert parse_command("ditto maybe") == []


class TestStandaloneFlags:
    def test_pve_round(self):
        assert parse_command("pve round") == [
            Command(kind=CommandKind.PVE, value=True, feedback="PvE round")
        ]

    def test_companion_before_keyword(self):
        parser = ChunkParser(tokenize("stage pve"))
        assert _pairs(parser.parse()) == [(CommandKind.PVE, True)]
        assert parser.consumed == [True, True]

    def test_bare_pve(self):
        assert _pairs(parse_command("pve")) == [(CommandKind.PVE, True)]

    def test_toggle_takes_precedence(self):
        assert _pairs(parse_command("pve off")) == [(CommandKind.PVE, False)]

    def test_odds_phrase(self):
        assert parse_command("what's my odds") == [
            Command(kind=CommandKind.QUERY, feedback="Reading odds")
        ]

    def test_odds_phrase_anywhere(self):
        assert _pairs(parse_command("level 3 read the odds")) == [
            (CommandKind.QUERY, None),
            (CommandKind.LEVEL, 3),
        ]

    def test_incomplete_phrase(self):
        assert parse_command("what the") == []

    @pytest.mark.parametrize(
        "text",
        [
            "what are the odds",
            "what is my chance",
            "show me the percent",
            "tell your probability",
        ],
    )
    def test_odds_phrase_variants(self, text):
        assert _pairs(parse_command(text)) == [(CommandKind.QUERY, None)]

    def test_one_query_per_parse(self):
        assert _pairs(parse_command("what's my odds what are the odds")) == [
            (CommandKind.QUERY, None)
        ]


# ═══════════════════════════════════════════════════════════════════════
# CATEGORICAL, COMPOUND, PHRASE, BARE KEYWORD
# ═══════════════════════════════════════════════════════════════════════


class TestRarity:
    @pytest.mark.parametrize(
        "word,rarity",
        [
            ("common", "common"),
            ("uc", "uncommon"),
            ("green", "uncommon"),
            ("blue", "rare"),
            ("purple", "epic"),
            ("legendary", "ultra"),
            ("red", "ultra"),
        ],
    )
    def test_synonyms(self, word, rarity):
        assert _pairs(parse_command(word)) == [(CommandKind.RARITY, rarity)]

    def test_only_first_rarity_counts(self):
        assert _pairs(parse_command("rare epic")) == [(CommandKind.RARITY, "rare")]

    def test_feedback(self):
        assert parse_command("epic")[0].feedback == "epic"


class TestEvolution:
    def test_two_star(self):
        assert parse_command("2 star") == [
            Command(kind=CommandKind.EVOLUTION, value="two_star", feedback="2★")
        ]

    def test_spelled_three_stars(self):
        assert _pairs(parse_command("three stars")) == [(CommandKind.EVOLUTION, "three_star")]

    def test_other_integers_are_not_stages(self):
        # 4 isn't an evolution stage, so the lone number falls back to level
        assert _pairs(parse_command("4 star")) == [(CommandKind.LEVEL, 4)]

    def test_number_claimed_earlier_is_not_reused(self):
        assert _pairs(parse_command("copy 2 star")) == [(CommandKind.COPIES, 2)]

    @pytest.mark.parametrize(
        "text,stage",
        [
            ("2★", "two_star"),
            ("3★", "three_star"),
            ("2*", "two_star"),
            ("3*", "three_star"),
            ("two *", "two_star"),
        ],
    )
    def test_star_symbols(self, text, stage):
        assert _pairs(parse_command(text)) == [(CommandKind.EVOLUTION, stage)]

    def test_glued_star_is_split(self):
        assert tokenize("Epic 3★.") == ["epic", "3", "★"]


class TestStepPhrases:
    def test_level_up(self):
        assert parse_command("level up") == [
            Command(kind=CommandKind.LEVEL_STEP, value=1, feedback="Level up")
        ]

    def test_down_a_level(self):
        assert _pairs(parse_command("go down a level")) == [(CommandKind.LEVEL_STEP, -1)]

    def test_phrase_cannot_reuse_claimed_words(self):
        assert _pairs(parse_command("level up 4")) == [(CommandKind.LEVEL, 4)]

    def test_one_step_per_parse(self):
        assert _pairs(parse_command("level up level up")) == [(CommandKind.LEVEL_STEP, 1)]

    def test_start_over(self):
        assert parse_command("start over") == [
            Command(kind=CommandKind.RESET, feedback="Cleared")
        ]

    def test_step_and_reset_phrases_together(self):
        assert _pairs(parse_command("level up start over")) == [
            (CommandKind.LEVEL_STEP, 1),
            (CommandKind.RESET, None),
        ]

    def test_one_reset_per_parse(self):
        assert _pairs(parse_command("start over reset")) == [(CommandKind.RESET, None)]


class TestBareKeywords:
    @pytest.mark.parametrize("word", ["reset", "clear", "restart"])
    def test_reset(self, word):
        assert parse_command(word) == [Command(kind=CommandKind.RESET, feedback="Cleared")]

    def test_tables_extend_without_new_code(self):
        vocab = Vocabulary(
            bare_keywords=BARE_KEYWORDS
            + (BareKeywordSpec(CommandKind.QUERY, frozenset({"odds"}), "Reading odds"),),
        )
        assert _pairs(parse_command("odds", vocab)) == [(CommandKind.QUERY, None)]


# ═══════════════════════════════════════════════════════════════════════
# FALLBACK
# ═══════════════════════════════════════════════════════════════════════


class TestFallback:
    def test_lone_number_is_level(self):
        assert parse_command("4") == [Command(kind=CommandKind.LEVEL, value=4, feedback="Level 4")]

    def test_spelled_lone_number(self):
        assert _pairs(parse_command("six")) == [(CommandKind.LEVEL, 6)]

    def test_not_used_when_something_matched(self):
        assert _pairs(parse_command("scouted 4")) == [(CommandKind.SCOUTING, 4)]

    def test_first_in_range_wins(self):
        assert _pairs(parse_command("12 5 3")) == [(CommandKind.LEVEL, 5)]

    def test_out_of_range_only(self):
        assert parse_command("0") == []
        assert parse_command("15") == []


# ═══════════════════════════════════════════════════════════════════════
# WHOLE-PARSE PROPERTIES
# ═══════════════════════════════════════════════════════════════════════


class TestParseProperties:
    def test_order_independence(self):
        a = parse_command("pve on scouting 4 copy 2")
        b = parse_command("copy 2 scouting 4 pve on")
        assert Counter(_pairs(a)) == Counter(_pairs(b))
        assert Counter(_pairs(a)) == Counter(
            [(CommandKind.PVE, True), (CommandKind.SCOUTING, 4), (CommandKind.COPIES, 2)]
        )

    def test_output_follows_pass_order(self):
        kinds = [c.kind for c in parse_command("reset rare level 3 ditto on")]
        assert kinds == [
            CommandKind.DITTO,
            CommandKind.LEVEL,
            CommandKind.RARITY,
            CommandKind.RESET,
        ]

    @pytest.mark.parametrize(
        "text",
        [
            "pve on scouting 4 copy 2",
            "level 7 rare have 3 scouted 2 bench 4 2 star ditto on pve round 12 refreshes",
            "level up 4",
            "no ditto on pve on",
            "what's my odds level up reset",
            "copy 2 star 2 star",
            "4",
        ],
    )
    def test_consumption_exclusivity(self, text):
        tokens = tokenize(normalize_numerals(text))
        _ExclusiveParser(tokens).parse()

    def test_empty_input(self):
        assert parse_command("") == []
        assert parse_command("   ") == []

    @pytest.mark.parametrize("text", ["banana", "!!!", "level", "the the the", "9999999999999"])
    def test_garbage_never_raises(self, text):
        assert isinstance(parse_command(text), list)

    def test_everything_at_once(self):
        text = "level 7 rare have 3 scouted 2 bench 4 2 star ditto on pve round 12 refreshes"
        assert Counter(_pairs(parse_command(text))) == Counter([
            (CommandKind.DITTO, True),
            (CommandKind.PVE, True),
            (CommandKind.LEVEL, 7),
            (CommandKind.COPIES, 3),
            (CommandKind.SCOUTING, 2),
            (CommandKind.BENCH, 4),
            (CommandKind.REFRESHES, 12),
            (CommandKind.RARITY, "rare"),
            (CommandKind.EVOLUTION, "two_star"),
        ])
