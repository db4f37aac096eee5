"""
mu.deck
-------

This module defines the Deck class and the parser of the deck file format.

A deck file is a sequence of sections, each opened by a `[title]` line and followed by
`key: value` lines. Blank lines and lines starting with `#` are ignored:

    [settings]
    max new queue: 20
    max new daily: 5

    [tag default]
    learning intervals: 30m, 1d, 3d
    max interval: 2M

    [tag Theorem]
    INHERIT: Definition
    max interval: 4y

    [card 123]
    tags: Definition, Week 2
    priority: 5

Classes:
    Deck: A collection of flashcards along with their settings.
"""

from __future__ import annotations
from collections.abc import Callable, Sequence
from copy import copy
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
import logging
from typing import Any, TypeVar
from typing_extensions import Self

from mu.card import Card, Command, Pdf
from mu.duration import parse_duration
from mu.errors import ParsingError, ParsingErrorKind
from mu.score import PRIORITIES, SCORES
from mu.settings import GlobalSettings, TagSettings

logger = logging.getLogger(__name__)

# the tag whose settings apply to cards without any configured tag
DEFAULT_TAG = ""

T = TypeVar("T")


@dataclass
class Deck:
    """
    A collection of flashcards, without any data about learning state.

    Attributes:
        settings: The global settings.
        tag_settings: The settings of the various tags. Always contains the default
            settings under the tag `""`.
        cards: The content of the cards by id, in the order they were declared.
    """

    settings: GlobalSettings = field(default_factory=GlobalSettings)
    tag_settings: dict[str, TagSettings] = field(
        default_factory=lambda: {DEFAULT_TAG: TagSettings()}
    )
    cards: dict[str, Card] = field(default_factory=dict)

    @classmethod
    def parse(cls, source: str) -> Self:
        """
        Parses a deck from the deck file format.

        Parsing stops at the first error. Line numbers in errors are 0-based; errors that
        are only detectable at the end of the input carry the number of lines.

        Args:
            source: The content of the deck file.

        Returns:
            Deck: The parsed deck.

        Raises:
            ParsingError: If the source is malformed or contains no cards.
        """

        builder = _DeckBuilder(cls())
        lines = source.splitlines()

        for line_num, line in enumerate(lines):
            try:
                builder.parse_line(line)
            except ParsingError as err:
                err.line = line_num
                raise

        try:
            builder.flush()
        except ParsingError as err:
            err.line = len(lines)
            raise

        if not builder.deck.cards:
            raise ParsingError(ParsingErrorKind.EmptyDeck, line=len(lines))

        return builder.deck

    def default_tag_settings(self) -> TagSettings:
        return self.tag_settings[DEFAULT_TAG]

    def resolve_tag_settings(self, tags: Sequence[str]) -> TagSettings:
        """
        Gets the settings that apply to a card with the given tags.

        The first tag with settings wins; if no tag has settings, the default settings apply.
        """

        for tag in tags:
            if tag in self.tag_settings:
                return self.tag_settings[tag]

        return self.default_tag_settings()


def key_value(line: str) -> tuple[str, str]:
    """
    Splits a `<key>: <value>` line. Whitespace around the colon is trimmed.
    """

    key, colon, value = line.partition(":")
    if not colon:
        raise ParsingError(
            ParsingErrorKind.MalformedPair,
            "not a proper key-value pair (no colon present)",
        )

    value = value.strip()
    if not value:
        raise ParsingError(ParsingErrorKind.MalformedPair, "no value specified")

    return key.strip(), value


def parse_int(source: str) -> int:
    try:
        return int(source)
    except ValueError as err:
        raise ParsingError(
            ParsingErrorKind.ParseInt, f"failed to parse integer ({err})"
        ) from err


def parse_uint(source: str) -> int:
    number = parse_int(source)
    if number < 0:
        raise ParsingError(
            ParsingErrorKind.ParseInt,
            f"failed to parse integer (negative value {number})",
        )
    return number


def parse_float(source: str) -> float:
    try:
        return float(source)
    except ValueError as err:
        raise ParsingError(
            ParsingErrorKind.ParseFloat, f"failed to parse float ({err})"
        ) from err


def parse_list(source: str, parser: Callable[[str], T]) -> list[T]:
    """
    Parses a comma-separated list, trimming each item before handing it to `parser`.
    """

    return [parser(item.strip()) for item in source.split(",")]


def to_score_array(items: Sequence[T]) -> tuple[T, ...]:
    """
    Checks that a list has exactly one entry per score.
    """

    if len(items) != SCORES:
        raise ParsingError(
            ParsingErrorKind.WrongArity,
            f"wrong number of items in the list (expected {SCORES}, got {len(items)})",
        )
    return tuple(items)


def _durations(source: str) -> tuple[timedelta, ...]:
    return tuple(parse_list(source, parse_duration))


def _int_array(source: str) -> tuple[int, ...]:
    return to_score_array(parse_list(source, parse_int))


def _float_array(source: str) -> tuple[float, ...]:
    return to_score_array(parse_list(source, parse_float))


# keys of tag sections, with the attribute they set and the parser of their value
TAG_SETTINGS_KEYS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "learning intervals": ("learning_intervals", _durations),
    "learning interval progressions": ("learning_interval_progressions", _int_array),
    "relearning intervals": ("relearning_intervals", _durations),
    "relearning interval progressions": (
        "relearning_interval_progressions",
        _int_array,
    ),
    "max interval": ("max_interval", parse_duration),
    "min interval increase": ("min_interval_increase", parse_duration),
    "starting ease": ("starting_ease", parse_float),
    "min ease": ("min_ease", parse_float),
    "max ease": ("max_ease", parse_float),
    "ease increase": ("ease_increase", _float_array),
    "interval modifier": ("interval_modifier", parse_float),
    "score modifiers": ("score_modifiers", _float_array),
    "priority modifiers": ("priority_modifiers", _float_array),
    "score weight": ("score_weight", parse_float),
    "familiarity delta": ("familiarity_delta", parse_float),
    "max familiarity": ("max_familiarity", parse_float),
    "min familiarity": ("min_familiarity", parse_float),
    "desired retention rate": ("desired_retention_rate", parse_float),
}

GLOBAL_SETTINGS_KEYS: dict[str, tuple[str, Callable[[str], Any]]] = {
    "max new queue": ("max_new_queue", parse_uint),
    "max new daily": ("max_new_daily", parse_uint),
}


class _Section(Enum):
    GlobalSettings = "settings"
    TagSettings = "tag"
    Card = "card"


def _tag_name(name: str) -> str:
    return DEFAULT_TAG if name == "default" else name


class _DeckBuilder:
    """
    Builds a deck line by line.

    The section being parsed is accumulated in the builder and only committed to the deck
    by `flush()`, which must be called at every section boundary and at the end of input.
    """

    def __init__(self, deck: Deck) -> None:
        self.deck = deck
        self._section: _Section | None = None
        self._name = ""
        self._tag_settings = TagSettings()
        self._card = Card(card_id="")

    def flush(self) -> None:
        section, self._section = self._section, None

        match section:
            case _Section.TagSettings:
                if self._name != DEFAULT_TAG and self._name in self.deck.tag_settings:
                    raise ParsingError(
                        ParsingErrorKind.DuplicateSection,
                        f"configuring tag '{self._name}' multiple times (previous section)",
                    )
                self.deck.tag_settings[self._name] = self._tag_settings
                logger.debug("committed settings of tag %r", self._name)

            case _Section.Card:
                if self._name in self.deck.cards:
                    raise ParsingError(
                        ParsingErrorKind.DuplicateCard,
                        f"the card ID '{self._name}' appears multiple times",
                    )
                # cards without any view default to the PDF named after their id
                if not self._card.view:
                    self._card.view.append(Pdf(f"{self._name}.pdf"))
                self.deck.cards[self._name] = self._card

            case _Section.GlobalSettings | None:
                # global settings are written directly to the deck
                pass

    def parse_line(self, line: str) -> None:
        line = line.strip()
        if not line or line.startswith("#"):
            return

        if line.startswith("[") and line.endswith("]"):
            self.flush()
            self._open_section(line[1:-1].strip())
            return

        key, value = key_value(line)

        match self._section:
            case _Section.GlobalSettings:
                self._set(self.deck.settings, GLOBAL_SETTINGS_KEYS, key, value)
            case _Section.TagSettings:
                self._parse_tag_settings(key, value)
            case _Section.Card:
                self._parse_card(key, value)
            case None:
                raise ParsingError(ParsingErrorKind.KeyOutsideSection)

    def _open_section(self, title: str) -> None:
        if title == "settings":
            self._section = _Section.GlobalSettings
        elif title == "tag default":
            self._section = _Section.TagSettings
            self._name = DEFAULT_TAG
        elif title.startswith("tag "):
            self._section = _Section.TagSettings
            self._name = _tag_name(title[len("tag ") :].lstrip())
        elif title.startswith("card "):
            self._section = _Section.Card
            self._name = title[len("card ") :].lstrip()
        else:
            raise ParsingError(
                ParsingErrorKind.UnknownSection, f"unknown section '{title}'"
            )

        match self._section:
            case _Section.TagSettings:
                # tag settings start out as the default settings
                self._tag_settings = copy(self.deck.default_tag_settings())
            case _Section.Card:
                self._card = Card(card_id=self._name)

    def _set(
        self,
        target: Any,
        keys: dict[str, tuple[str, Callable[[str], Any]]],
        key: str,
        value: str,
    ) -> None:
        if key not in keys:
            raise ParsingError(ParsingErrorKind.UnknownKey, f"unknown key '{key}'")
        attribute, parser = keys[key]
        setattr(target, attribute, parser(value))

    def _parse_tag_settings(self, key: str, value: str) -> None:
        if key == "INHERIT":
            parent = self.deck.tag_settings.get(_tag_name(value))
            if parent is None:
                raise ParsingError(
                    ParsingErrorKind.UnknownInheritTarget,
                    f"cannot inherit nonexistent settings '{value}'",
                )
            self._tag_settings = copy(parent)
            return

        self._set(self._tag_settings, TAG_SETTINGS_KEYS, key, value)

    def _parse_card(self, key: str, value: str) -> None:
        card = self._card

        match key:
            case "pdf":
                card.view.extend(Pdf(path) for path in parse_list(value, str))
            case "sh":
                card.view.append(Command(value))
            case "tags":
                card.tags.extend(parse_list(value, str))
            case "max interval":
                card.max_interval = parse_duration(value)
            case "priority":
                priority = parse_int(value) - 1
                if not 0 <= priority < PRIORITIES:
                    raise ParsingError(ParsingErrorKind.InvalidPriority)
                card.priority = priority
            case _:
                raise ParsingError(ParsingErrorKind.UnknownKey, f"unknown key '{key}'")


__all__ = ["Deck", "DEFAULT_TAG", "parse_list", "to_score_array"]
