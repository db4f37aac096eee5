"""
mu.metacard
-----------

This module defines the Metacard class along with the interval and ease calculations that
drive a card through its learning states.

The calculations are based on the SM-2 algorithm: learnt cards have their interval multiplied
by an ease factor, which in turn adapts to the scores given in reviews. Cards that are new or
being (re)learnt instead step through the fixed interval tables of their tag settings.

Classes:
    Metacard: The learning state of a flashcard.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import json
import logging
import math
from typing import TypedDict
from typing_extensions import Self

from mu.review_log import Review, ReviewDict
from mu.score import Score, SCORES
from mu.settings import TagSettings
from mu.state import (
    CardState,
    Learning,
    Learnt,
    New,
    Relearning,
    StateDict,
    state_from_dict,
    state_to_dict,
)

logger = logging.getLogger(__name__)


class MetacardDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Metacard object.
    """

    id: str
    state: StateDict
    current_interval: int
    due: str
    history: list[ReviewDict]
    ease: float


def new_ease(ease: float, settings: TagSettings, score: Score) -> float:
    """
    Calculates the ease after a review of a learnt card, saturated to the allowed range.
    """

    ease = ease + settings.ease_increase[score]

    if ease < settings.min_ease:
        return settings.min_ease
    if ease > settings.max_ease:
        return settings.max_ease
    return ease


def learnt_interval(
    *,
    settings: TagSettings,
    score: Score,
    current_interval: timedelta,
    ease: float,
    priority: int,
    familiarity: float,
    max_interval: timedelta,
) -> timedelta:
    """
    Calculates the next interval of a learnt card after a successful review.

    Args:
        settings: The card's tag settings.
        score: The score of the review. Must not be `Score.Fail`.
        current_interval: The interval being ended.
        ease: The card's ease before the review.
        priority: The card's priority.
        familiarity: The average familiarity of the card's tags.
        max_interval: An upper bound for the resulting interval.

    Returns:
        timedelta: The next interval.

    Raises:
        ValueError: If `score` is `Score.Fail`.
    """

    if score == Score.Fail:
        raise ValueError("failed reviews of learnt cards go to relearning instead")

    raw_minutes = (
        (current_interval // timedelta(minutes=1))
        * new_ease(ease, settings, score)
        * familiarity
        * settings.interval_modifier
        * settings.score_modifiers[score]
        * settings.priority_modifiers[priority]
    )

    # compared in minutes, so that huge products never overflow timedelta
    if not math.isfinite(raw_minutes) or int(raw_minutes) * 60 > (
        settings.max_interval.total_seconds()
    ):
        next_interval = settings.max_interval
    else:
        next_interval = timedelta(minutes=int(raw_minutes))
        if next_interval - current_interval < settings.min_interval_increase:
            next_interval = current_interval + settings.min_interval_increase

    return min(max_interval, next_interval)


# the latest representable due time, used when an interval reaches past it
LATEST_DUE = datetime.max.replace(tzinfo=timezone.utc)


def due_after(review_datetime: datetime, interval: timedelta) -> datetime:
    """
    Calculates when a card reviewed at `review_datetime` is due again, saturating at
    `LATEST_DUE` instead of overflowing.
    """

    try:
        return review_datetime + interval
    except OverflowError:
        return LATEST_DUE


def _step(
    intervals: tuple[timedelta, ...],
    index: int,
    max_interval: timedelta,
) -> tuple[bool, timedelta]:
    # whether `index` finishes the table, and the capped interval at `index`
    return index == len(intervals) - 1, min(max_interval, intervals[index])


def transition(
    state: CardState,
    score: Score,
    settings: TagSettings,
    *,
    current_interval: timedelta,
    ease: float,
    priority: int,
    familiarity: float,
    max_interval: timedelta,
) -> tuple[CardState, timedelta]:
    """
    Calculates the state and interval a card goes to when reviewed with a given score.

    This does not touch the ease; see `new_ease`.

    Returns:
        tuple[CardState, timedelta]: The next state and the next interval.
    """

    match state:
        case New():
            index = settings.learning_interval_index(
                settings.learning_interval_progressions[score] - 1
            )
            _, next_interval = _step(settings.learning_intervals, index, max_interval)
            return Learning(0), next_interval

        case Learning(step):
            index = settings.learning_interval_index(
                step + settings.learning_interval_progressions[score]
            )
            last, next_interval = _step(
                settings.learning_intervals, index, max_interval
            )
            return (Learnt() if last else Learning(index)), next_interval

        case Relearning(step):
            index = settings.relearning_interval_index(
                step + settings.relearning_interval_progressions[score]
            )
            last, next_interval = _step(
                settings.relearning_intervals, index, max_interval
            )
            return (Learnt() if last else Relearning(index)), next_interval

        case Learnt() if score == Score.Fail:
            return Relearning(0), settings.relearning_intervals[0]

        case Learnt():
            return Learnt(), learnt_interval(
                settings=settings,
                score=score,
                current_interval=current_interval,
                ease=ease,
                priority=priority,
                familiarity=familiarity,
                max_interval=max_interval,
            )

    raise TypeError(f"not a card state: {state!r}")


@dataclass
class Metacard:
    """
    Represents the learning state of a flashcard.

    The content of the card is kept separately, in a `Card` with the same id.

    Attributes:
        card_id: The id of the card.
        state: The card's current learning state.
        current_interval: The card's current interval.
        due: The date and time when the card is due next.
        history: The card's reviews in chronological order.
        ease: The card's ease.
    """

    card_id: str
    state: CardState
    current_interval: timedelta
    due: datetime
    history: list[Review] = field(default_factory=list)
    ease: float = 0.0

    @classmethod
    def new(cls, card_id: str, settings: TagSettings, created: datetime) -> Self:
        """
        Creates the metacard of a card that has never been reviewed.
        """

        return cls(
            card_id=card_id,
            state=New(),
            current_interval=timedelta(0),
            due=created,
            history=[],
            ease=settings.starting_ease,
        )

    def next_state(
        self,
        settings: TagSettings,
        score: Score,
        priority: int,
        familiarity: float,
        max_interval: timedelta,
    ) -> tuple[CardState, timedelta]:
        """
        Calculates the state and interval this card would go to, without changing it.
        """

        return transition(
            self.state,
            score,
            settings,
            current_interval=self.current_interval,
            ease=self.ease,
            priority=priority,
            familiarity=familiarity,
            max_interval=max_interval,
        )

    def new_intervals(
        self,
        settings: TagSettings,
        priority: int,
        familiarity: float,
        max_interval: timedelta,
    ) -> list[timedelta]:
        """
        Calculates the interval the card would get for each score, ordered by score.

        These are meant to be shown to the user before they pick a score.
        """

        return [
            self.next_state(settings, Score(score), priority, familiarity, max_interval)[1]
            for score in range(SCORES)
        ]

    def review(
        self,
        settings: TagSettings,
        score: Score,
        priority: int,
        familiarity: float,
        max_interval: timedelta,
        review_datetime: datetime | None = None,
    ) -> Review:
        """
        Updates the card after a review with the given score.

        Args:
            settings: The card's tag settings.
            score: The chosen score.
            priority: The card's priority.
            familiarity: The average familiarity of the card's tags.
            max_interval: An upper bound for the new interval.
            review_datetime: The date and time of the review.

        Returns:
            Review: The review that was appended to the card's history.

        Raises:
            ValueError: If `review_datetime` is not timezone-aware.
        """

        if review_datetime is None:
            review_datetime = datetime.now(timezone.utc)
        elif review_datetime.tzinfo is None:
            raise ValueError("datetime must be timezone-aware")

        state, interval = self.next_state(
            settings, score, priority, familiarity, max_interval
        )
        due = due_after(review_datetime, interval)
        ease = (
            new_ease(self.ease, settings, score)
            if isinstance(self.state, Learnt)
            else self.ease
        )

        review = Review(
            time=review_datetime,
            due=self.due,
            score=score,
            ended_interval=self.current_interval,
            state_before=self.state,
            ease_before=self.ease,
        )

        logger.debug(
            "card %r reviewed %s: %r -> %r, interval %s",
            self.card_id,
            score,
            self.state,
            state,
            interval,
        )

        self.history.append(review)
        self.state = state
        self.current_interval = interval
        self.due = due
        self.ease = ease

        return review

    def to_dict(self) -> MetacardDict:
        """
        Returns a JSON-serializable dictionary representation of the Metacard object.
        """

        return {
            "id": self.card_id,
            "state": state_to_dict(self.state),
            "current_interval": int(self.current_interval.total_seconds()),
            "due": self.due.isoformat(),
            "history": [review.to_dict() for review in self.history],
            "ease": self.ease,
        }

    @classmethod
    def from_dict(cls, source_dict: MetacardDict) -> Self:
        """
        Creates a Metacard object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing Metacard object.

        Returns:
            A Metacard object created from the provided dictionary.
        """

        return cls(
            card_id=str(source_dict["id"]),
            state=state_from_dict(source_dict["state"]),
            current_interval=timedelta(seconds=source_dict["current_interval"]),
            due=datetime.fromisoformat(source_dict["due"]),
            history=[Review.from_dict(review) for review in source_dict["history"]],
            ease=float(source_dict["ease"]),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the Metacard object.
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a Metacard object from a JSON-serialized string.
        """

        source_dict: MetacardDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["Metacard", "transition", "learnt_interval", "new_ease", "due_after"]
