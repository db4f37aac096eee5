"""
py-mu
-----

Py-mu is a spaced repetition scheduler for decks of flashcards written in a plain-text format.

It parses decks, keeps track of the learning state of every card with an adaptive SM-2 style
algorithm, and decides which card to review next.
"""

from mu.card import Card, Command, Pdf
from mu.deck import Deck
from mu.duration import format_duration, parse_duration
from mu.errors import ParsingError, ParsingErrorKind
from mu.metacard import Metacard
from mu.review_log import Review
from mu.schedule import Schedule
from mu.scheduler import Scheduler
from mu.score import Score, SCORES, PRIORITIES
from mu.settings import GlobalSettings, TagSettings
from mu.state import CardState, Learning, Learnt, New, Relearning
from mu.statistics import Statistics

__all__ = [
    "Card",
    "CardState",
    "Command",
    "Deck",
    "GlobalSettings",
    "Learning",
    "Learnt",
    "Metacard",
    "New",
    "ParsingError",
    "ParsingErrorKind",
    "Pdf",
    "PRIORITIES",
    "Relearning",
    "Review",
    "Schedule",
    "Scheduler",
    "Score",
    "SCORES",
    "Statistics",
    "TagSettings",
    "format_duration",
    "parse_duration",
]
