"""
mu.review_log
-------------

This module defines the Review class.

Classes:
    Review: Represents a single review in the history of a card.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypedDict
import json
from typing_extensions import Self

from mu.score import Score
from mu.state import CardState, StateDict, state_from_dict, state_to_dict


class ReviewDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Review object.
    """

    time: str
    due: str
    score: int
    ended_interval: int
    state_before: StateDict
    ease_before: float


@dataclass
class Review:
    """
    Represents a single review of a card.

    Reviews are appended to a card's history and never modified afterwards.

    Attributes:
        time: The date and time of the review.
        due: The date and time the card was due at.
        score: The score given to the card during the review.
        ended_interval: The interval that was ended by the review.
        state_before: The state of the card before the review.
        ease_before: The ease of the card before the review.
    """

    time: datetime
    due: datetime
    score: Score
    ended_interval: timedelta
    state_before: CardState
    ease_before: float

    def to_dict(self) -> ReviewDict:
        """
        Returns a JSON-serializable dictionary representation of the Review object.
        """

        return {
            "time": self.time.isoformat(),
            "due": self.due.isoformat(),
            "score": int(self.score),
            "ended_interval": int(self.ended_interval.total_seconds()),
            "state_before": state_to_dict(self.state_before),
            "ease_before": self.ease_before,
        }

    @classmethod
    def from_dict(cls, source_dict: ReviewDict) -> Self:
        """
        Creates a Review object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing Review object.

        Returns:
            A Review object created from the provided dictionary.
        """

        return cls(
            time=datetime.fromisoformat(source_dict["time"]),
            due=datetime.fromisoformat(source_dict["due"]),
            score=Score(int(source_dict["score"])),
            ended_interval=timedelta(seconds=source_dict["ended_interval"]),
            state_before=state_from_dict(source_dict["state_before"]),
            ease_before=float(source_dict["ease_before"]),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the Review object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a Review object from a JSON-serialized string.
        """

        source_dict: ReviewDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["Review"]
