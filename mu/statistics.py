"""
mu.statistics
-------------

This module defines the Statistics class, which tracks the review performance of a group of
cards and adapts the group's familiarity to it.

Classes:
    Statistics: Review statistics about a group of cards.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
import json
import math
from typing import TypedDict
from typing_extensions import Self

from mu.score import Score
from mu.settings import TagSettings

# the values the adaptive retention rate moves towards for each score
OUTCOME_VALUES = {
    Score.Fail: 0.0,
    Score.Hard: 0.95,
    Score.Okay: 1.0,
    Score.Good: 1.02,
    Score.Easy: 1.05,
}


class StatisticsDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Statistics object.
    """

    reviews: list[int]
    activity: dict[str, int]
    adaptive_retention_rate: float
    familiarity: float


@dataclass
class Statistics:
    """
    Review statistics about a group of cards.

    Attributes:
        reviews: The scores of the reviews in chronological order.
        activity: The number of reviews on each (UTC) day.
        adaptive_retention_rate: An average of the scores weighted after recency. This is
            approximately between 0 and 1, but exceeds 1 when reviews go better than expected.
            Starts at 1.0 with the bare constructor, and at the desired retention rate with
            `Statistics.new`.
        familiarity: High-level ease for the group of cards. Intervals of the group's cards
            are multiplied by it.
    """

    reviews: list[Score] = field(default_factory=list)
    activity: dict[date, int] = field(default_factory=dict)
    adaptive_retention_rate: float = 1.0
    familiarity: float = 1.0

    @classmethod
    def new(cls, settings: TagSettings) -> Self:
        """
        Creates empty statistics, starting at the desired retention rate.
        """

        return cls(
            reviews=[],
            activity={},
            adaptive_retention_rate=settings.desired_retention_rate,
            familiarity=1.0,
        )

    def retention_rate(self) -> float:
        """
        The fraction of reviews that were not failed.

        Returns NaN if there are no reviews yet.
        """

        if not self.reviews:
            return math.nan

        passed = sum(1 for score in self.reviews if score != Score.Fail)
        return passed / len(self.reviews)

    def review(
        self,
        score: Score,
        settings: TagSettings,
        review_datetime: datetime | None = None,
    ) -> None:
        """
        Records a review and adapts the familiarity.

        Args:
            score: The score of the review.
            settings: The tag settings of the reviewed card.
            review_datetime: The date and time of the review.
        """

        if review_datetime is None:
            review_datetime = datetime.now(timezone.utc)

        self.reviews.append(score)

        day = review_datetime.astimezone(timezone.utc).date()
        self.activity[day] = self.activity.get(day, 0) + 1

        self.adaptive_retention_rate = (
            1.0 - settings.score_weight
        ) * self.adaptive_retention_rate + settings.score_weight * OUTCOME_VALUES[
            score
        ]

        if self.adaptive_retention_rate >= settings.desired_retention_rate:
            self.familiarity = min(
                self.familiarity + settings.familiarity_delta,
                settings.max_familiarity,
            )
        else:
            self.familiarity = max(
                self.familiarity - settings.familiarity_delta,
                settings.min_familiarity,
            )

    def to_dict(self) -> StatisticsDict:
        """
        Returns a JSON-serializable dictionary representation of the Statistics object.
        """

        return {
            "reviews": [int(score) for score in self.reviews],
            "activity": {day.isoformat(): count for day, count in self.activity.items()},
            "adaptive_retention_rate": self.adaptive_retention_rate,
            "familiarity": self.familiarity,
        }

    @classmethod
    def from_dict(cls, source_dict: StatisticsDict) -> Self:
        """
        Creates a Statistics object from an existing dictionary.
        """

        return cls(
            reviews=[Score(int(score)) for score in source_dict["reviews"]],
            activity={
                date.fromisoformat(day): int(count)
                for day, count in source_dict["activity"].items()
            },
            adaptive_retention_rate=float(source_dict["adaptive_retention_rate"]),
            familiarity=float(source_dict["familiarity"]),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        source_dict: StatisticsDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["Statistics"]
