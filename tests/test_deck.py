from mu.card import Command, Pdf
from mu.deck import Deck, parse_list, to_score_array, DEFAULT_TAG
from mu.errors import ParsingError, ParsingErrorKind
from mu.settings import TagSettings, DEFAULT_LEARNING_INTERVALS

from datetime import timedelta
import pytest

SAMPLE_DECK = r"""

[settings]
    max new queue: 20
    max new daily: 5

[tag default]
    learning intervals: 30m, 1d, 3d
    learning interval progressions: -2, 1, 1, 2, 2
    relearning intervals: 30m, 1d
    relearning interval progressions: -2, 1, 1, 1, 1
    starting ease: 2.5
ease increase: -0.20, -0.15, 0, 0.05, 0.15
    interval modifier: 1
    score modifiers: 1, 0.7, 1, 1.2, 1.4
    priority modifiers: 1.5, 1.2, 1, 0.8, 0.5
    max interval: 2M
    desired retention rate: 0.85

[tag Definition]
    learning intervals: 30m, 1d, 3d
    learning interval progressions: -2, 1, 1, 2, 2
    relearning intervals: 30m, 1d
    relearning interval progressions: -2, 1, 1, 1, 1
    starting ease: 2.5
    ease increase: -0.20, -0.15, 0, 0.05, 0.15
    interval modifier: 1
    score modifiers: 1, 0.7, 1, 1.2, 1.4
    priority modifiers: 1.5, 1.2, 1, 0.8, 0.5
    max interval: 4y
    desired retention rate: 0.85

[tag Theorem]
    INHERIT: Definition

[tag Exercise]
# Comment here
    ease increase: -0.20, -0.15, 0, 0.05, 0.15
    interval modifier: 1
    score modifiers: 1, 0.7, 1, 1.2, 1.4
    desired retention rate: 0.85

[card 123]
tags: Definition, Week 2
priority: 5
"""


def parse_error(source: str) -> ParsingError:
    with pytest.raises(ParsingError) as excinfo:
        Deck.parse(source)
    return excinfo.value


class TestDeck:
    def test_parse(self):
        deck = Deck.parse(SAMPLE_DECK)

        assert deck.settings.max_new_queue == 20
        assert deck.settings.max_new_daily == 5

        assert deck.tag_settings[DEFAULT_TAG].max_interval == timedelta(weeks=8)
        assert deck.tag_settings["Theorem"].max_interval == timedelta(weeks=4 * 48)
        assert deck.tag_settings["Theorem"] == deck.tag_settings["Definition"]
        assert deck.tag_settings["Theorem"] is not deck.tag_settings["Definition"]

        assert deck.cards["123"].tags == ["Definition", "Week 2"]
        assert deck.cards["123"].priority == 4

    def test_parse_values(self):
        deck = Deck.parse(SAMPLE_DECK)
        settings = deck.tag_settings["Definition"]

        assert settings.learning_intervals == (
            timedelta(minutes=30),
            timedelta(days=1),
            timedelta(days=3),
        )
        assert settings.learning_interval_progressions == (-2, 1, 1, 2, 2)
        assert settings.ease_increase == (-0.2, -0.15, 0.0, 0.05, 0.15)
        assert settings.priority_modifiers == (1.5, 1.2, 1.0, 0.8, 0.5)
        assert settings.desired_retention_rate == pytest.approx(0.85)

    def test_tag_sections_start_from_default(self):
        deck = Deck.parse(SAMPLE_DECK)
        exercise = deck.tag_settings["Exercise"]

        # not set in [tag Exercise], so taken from [tag default]
        assert exercise.max_interval == timedelta(weeks=8)
        assert exercise.learning_intervals == deck.default_tag_settings().learning_intervals
        assert exercise.relearning_interval_progressions == (-2, 1, 1, 1, 1)

    def test_no_settings(self):
        deck = Deck.parse(
            """
[card 123]
tags: Definition, Week 2
priority: 5
pdf: fibration.pdf



[card 124]
tags: Definition
priority: 5
pdf: derived_couple.pdf

[card 125]
tags: Definition
priority: 5
pdf: triad.pdf
max interval: 500d

[card 127]
tags: Definition
priority: 5
pdf: spectral_sequence.pdf
        """
        )

        assert list(deck.cards) == ["123", "124", "125", "127"]
        assert list(deck.tag_settings) == [DEFAULT_TAG]
        assert deck.default_tag_settings() == TagSettings()
        assert deck.settings.max_new_queue == 20
        assert deck.settings.max_new_daily == 10
        assert deck.cards["125"].max_interval == timedelta(days=500)
        assert deck.cards["124"].max_interval == timedelta.max

    def test_card_views(self):
        deck = Deck.parse(
            """
[card a]
pdf: one.pdf, two.pdf
sh: echo "$CARD_ID"

[card b]
tags: x
"""
        )

        assert deck.cards["a"].view == [
            Pdf("one.pdf"),
            Pdf("two.pdf"),
            Command('echo "$CARD_ID"'),
        ]
        assert [str(view) for view in deck.cards["a"].view] == [
            "one.pdf",
            "two.pdf",
            "[command]",
        ]
        # cards without views default to the PDF named after them
        assert deck.cards["b"].view == [Pdf("b.pdf")]
        assert deck.cards["b"].priority == 2

    def test_empty_deck(self):
        err = parse_error("")
        assert err.kind == ParsingErrorKind.EmptyDeck

        err = parse_error(
            """
[settings]
max new queue: 20
"""
        )
        assert err.kind == ParsingErrorKind.EmptyDeck
        assert err.line == 3

    def test_error_double_section(self):
        err = parse_error(
            """

[tag A]
[tag A]
[card a]
        """
        )
        assert err.kind == ParsingErrorKind.DuplicateSection
        # detected when the second section is committed
        assert err.line == 4

    def test_error_double_card(self):
        err = parse_error(
            """
[card a123]
tags: Definition, Week 2
priority: 5
pdf: module.pdf



[card a123]
tags: Definition
priority: 5
pdf: ring.pdf
        """
        )
        assert err.kind == ParsingErrorKind.DuplicateCard

    def test_default_tag_redefinition(self):
        deck = Deck.parse(
            """
[tag default]
max interval: 1M

[tag default]
max interval: 2M

[card a]
"""
        )

        assert deck.default_tag_settings().max_interval == timedelta(weeks=8)

    @pytest.mark.parametrize(
        "source",
        [
            "[settings]\nmax new queue: 20\nmax new daily: 5\nmin new daily: 5\n",
            "[tag default]\nlearning speed: 3\n",
            "[card afhe]\ntags: Definition, Week 2\npriorityy: 5\n",
            "[card afhe]\nfile: module.pdf\n",
        ],
    )
    def test_error_unknown_key(self, source):
        err = parse_error(source)
        assert err.kind == ParsingErrorKind.UnknownKey

    def test_error_unknown_units(self):
        err = parse_error(
            r"""

[settings]
    max new queue: 20
    max new daily: 5

[tag default]
    learning intervals: 30m, 1a, 3d
    learning interval progressions: -2, 1, 1, 2, 2
        """
        )
        assert err.kind == ParsingErrorKind.UnknownUnit
        assert err.line == 7
        assert "at line 7" in str(err)

    def test_error_duration_too_large(self):
        err = parse_error("[tag default]\nmax interval: 1d\nmax interval: 100000000y\n[card a]\n")
        assert err.kind == ParsingErrorKind.ParseInt
        assert err.line == 2
        assert isinstance(err.__cause__, OverflowError)

    def test_error_unknown_section(self):
        err = parse_error("[deck]\n")
        assert err.kind == ParsingErrorKind.UnknownSection
        assert err.line == 0

    @pytest.mark.parametrize("line", ["tags Definition", "tags:", "tags:    "])
    def test_error_malformed_pair(self, line):
        err = parse_error(f"[card a]\n{line}\n")
        assert err.kind == ParsingErrorKind.MalformedPair
        assert err.line == 1

    def test_error_wrong_arity(self):
        err = parse_error("[tag default]\nscore modifiers: 1, 0.7, 1, 1.2\n")
        assert err.kind == ParsingErrorKind.WrongArity

        err = parse_error("[tag default]\nease increase: 0, 0, 0, 0, 0, 0\n")
        assert err.kind == ParsingErrorKind.WrongArity

    def test_error_inherit_unknown(self):
        err = parse_error("[tag Theorem]\nINHERIT: Definition\n[card a]\n")
        assert err.kind == ParsingErrorKind.UnknownInheritTarget
        assert err.line == 1

    def test_inherit_default(self):
        deck = Deck.parse(
            """
[tag A]
max interval: 1y

[tag B]
INHERIT: A

[tag C]
INHERIT: default

[card a]
"""
        )

        assert deck.tag_settings["B"].max_interval == timedelta(weeks=48)
        assert deck.tag_settings["C"].max_interval == TagSettings().max_interval

    def test_error_parse_numbers(self):
        err = parse_error("[settings]\nmax new queue: twenty\n")
        assert err.kind == ParsingErrorKind.ParseInt
        assert isinstance(err.__cause__, ValueError)

        err = parse_error("[settings]\nmax new daily: -1\n")
        assert err.kind == ParsingErrorKind.ParseInt

        err = parse_error("[tag default]\nstarting ease: high\n")
        assert err.kind == ParsingErrorKind.ParseFloat
        assert isinstance(err.__cause__, ValueError)

    @pytest.mark.parametrize("priority", ["0", "6", "-3"])
    def test_error_invalid_priority(self, priority):
        err = parse_error(f"[card a]\npriority: {priority}\n")
        assert err.kind == ParsingErrorKind.InvalidPriority

    def test_error_key_outside_section(self):
        err = parse_error("# a deck\nmax new queue: 20\n[card a]\n")
        assert err.kind == ParsingErrorKind.KeyOutsideSection
        assert err.line == 1

    def test_first_error_wins(self):
        err = parse_error("[card a]\nfoo: bar\n[nonsense]\n")
        assert err.kind == ParsingErrorKind.UnknownKey
        assert err.line == 1

    def test_resolve_tag_settings(self):
        deck = Deck.parse(SAMPLE_DECK)

        assert deck.resolve_tag_settings(["Week 2", "Exercise", "Definition"]) is (
            deck.tag_settings["Exercise"]
        )
        assert deck.resolve_tag_settings(["Definition", "Exercise"]) is (
            deck.tag_settings["Definition"]
        )
        assert deck.resolve_tag_settings(["Week 2"]) is deck.default_tag_settings()
        assert deck.resolve_tag_settings([]) is deck.default_tag_settings()

    def test_to_score_array(self):
        assert to_score_array(parse_list("1, 2,3 ,4,  5", int)) == (1, 2, 3, 4, 5)

        for source in ("1", "1, 2, 3, 4", "1, 2, 3, 4, 5, 6"):
            with pytest.raises(ParsingError) as excinfo:
                to_score_array(parse_list(source, int))
            assert excinfo.value.kind == ParsingErrorKind.WrongArity

    def test_default_settings(self):
        deck = Deck()

        assert deck.default_tag_settings().learning_intervals == DEFAULT_LEARNING_INTERVALS
        assert deck.cards == {}
