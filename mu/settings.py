"""
mu.settings
-----------

This module defines the user-configurable settings as well as their default values.

Classes:
    GlobalSettings: Settings that apply to the whole deck.
    TagSettings: Settings that apply to the cards of a tag.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta

DEFAULT_MAX_NEW_QUEUE = 20
DEFAULT_MAX_NEW_DAILY = 10

DEFAULT_LEARNING_INTERVALS = (
    timedelta(days=1),
    timedelta(days=2),
    timedelta(days=3),
)
DEFAULT_LEARNING_INTERVAL_PROGRESSIONS = (-2, 1, 1, 2, 2)
DEFAULT_RELEARNING_INTERVALS = (
    timedelta(minutes=30),
    timedelta(days=1),
)
DEFAULT_RELEARNING_INTERVAL_PROGRESSIONS = (-999, 1, 1, 1, 2)
DEFAULT_MAX_INTERVAL = timedelta(days=50)
DEFAULT_MIN_INTERVAL_INCREASE = timedelta(days=1)
DEFAULT_STARTING_EASE = 2.5
DEFAULT_MAX_EASE = 3.5
DEFAULT_MIN_EASE = 1.3
DEFAULT_EASE_INCREASE = (-0.2, -0.15, 0.0, 0.05, 0.15)
DEFAULT_SCORE_MODIFIERS = (1.0, 0.7, 1.0, 1.2, 1.4)
DEFAULT_PRIORITY_MODIFIERS = (3.0, 2.0, 1.0, 0.5, 0.3)


@dataclass
class GlobalSettings:
    """
    Settings that apply to the whole deck.

    Attributes:
        max_new_queue: The maximal length of the queue of to-be-introduced cards.
        max_new_daily: The maximal number of unlearnt cards that can be introduced on a day.
    """

    max_new_queue: int = DEFAULT_MAX_NEW_QUEUE
    max_new_daily: int = DEFAULT_MAX_NEW_DAILY


@dataclass
class TagSettings:
    """
    Settings that apply to the cards of a tag.

    Every list with one entry per score is indexed by `Score`, and `priority_modifiers` is
    indexed by card priority.

    Attributes:
        learning_intervals: The intervals a new card cycles through before it is learnt.
            The last entry is the first interval of the learnt card.
        learning_interval_progressions: How many learning intervals each score advances
            the card by. Saturates at either end, so e.g. -1000 goes to the first interval.
        relearning_intervals: Acts like `learning_intervals`, for cards that were failed.
        relearning_interval_progressions: Acts like `learning_interval_progressions`, for
            cards that were failed.
        max_interval: Calculated intervals of learnt cards are saturated to this duration.
        min_interval_increase: The smallest increase a learnt card's interval may get.
        starting_ease: The initial ease of a card.
        max_ease: The maximal value of the ease.
        min_ease: The minimal value of the ease.
        ease_increase: The change in ease for each score.
        interval_modifier: A factor every new interval of a learnt card is multiplied by.
        score_modifiers: Factors for new intervals depending on the score. The first
            entry has no effect, as failing makes the card go into relearning.
        priority_modifiers: Factors for new intervals depending on the card's priority.
        score_weight: The weight of a new score in the adaptive retention rate.
        familiarity_delta: The change in familiarity after each review.
        max_familiarity: The maximal value of familiarity.
        min_familiarity: The minimal value of familiarity.
        desired_retention_rate: The retention rate that familiarity adapts towards.
    """

    learning_intervals: tuple[timedelta, ...] = DEFAULT_LEARNING_INTERVALS
    learning_interval_progressions: tuple[int, ...] = (
        DEFAULT_LEARNING_INTERVAL_PROGRESSIONS
    )
    relearning_intervals: tuple[timedelta, ...] = DEFAULT_RELEARNING_INTERVALS
    relearning_interval_progressions: tuple[int, ...] = (
        DEFAULT_RELEARNING_INTERVAL_PROGRESSIONS
    )
    max_interval: timedelta = DEFAULT_MAX_INTERVAL
    min_interval_increase: timedelta = DEFAULT_MIN_INTERVAL_INCREASE
    starting_ease: float = DEFAULT_STARTING_EASE
    max_ease: float = DEFAULT_MAX_EASE
    min_ease: float = DEFAULT_MIN_EASE
    ease_increase: tuple[float, ...] = DEFAULT_EASE_INCREASE
    interval_modifier: float = 1.0
    score_modifiers: tuple[float, ...] = DEFAULT_SCORE_MODIFIERS
    priority_modifiers: tuple[float, ...] = DEFAULT_PRIORITY_MODIFIERS
    score_weight: float = 0.05
    familiarity_delta: float = 0.1
    max_familiarity: float = 2.0
    min_familiarity: float = 0.4
    desired_retention_rate: float = 0.82

    def learning_interval_index(self, n: int) -> int:
        """
        Index of the `n`'th learning interval, saturating on out-of-bounds.
        """

        return _clamp_index(n, len(self.learning_intervals))

    def relearning_interval_index(self, n: int) -> int:
        """
        Index of the `n`'th relearning interval, saturating on out-of-bounds.
        """

        return _clamp_index(n, len(self.relearning_intervals))


def _clamp_index(n: int, length: int) -> int:
    return min(max(n, 0), length - 1)


__all__ = ["GlobalSettings", "TagSettings"]
