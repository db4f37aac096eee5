"""
mu.card
-------

This module defines the user-specified content of a card.

Classes:
    Pdf: A document presentation target.
    Command: A shell command presentation target.
    Card: The content of a flashcard.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import timedelta

# 2 should be around the average priority
DEFAULT_PRIORITY = 2


@dataclass(frozen=True)
class Pdf:
    """
    A document to be opened when the card is viewed.
    """

    path: str

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class Command:
    """
    A `sh` command to be executed when the card is viewed.
    """

    command: str

    def __str__(self) -> str:
        return "[command]"


View = Pdf | Command


@dataclass
class Card:
    """
    Represents the user-specified content of a flashcard.

    The learning state of the card is kept separately, in a `Metacard`.

    Attributes:
        card_id: The id of the card, as specified in the deck.
        view: The ways the card is presented, in order.
        tags: The tags of the card. The order matters when resolving tag settings.
        priority: The card's priority, 0-4.
        max_interval: An upper bound for the card's interval. Unbounded by default.
    """

    card_id: str
    view: list[View] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    priority: int = DEFAULT_PRIORITY
    max_interval: timedelta = timedelta.max


__all__ = ["Card", "Pdf", "Command", "View"]
