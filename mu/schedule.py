"""
mu.schedule
-----------

This module defines the Schedule class, the persistently stored state of the scheduler.

Classes:
    Schedule: The learning states and statistics of a deck's cards.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
import json
from typing import TypedDict
from typing_extensions import Self
import yaml

from mu.metacard import Metacard, MetacardDict
from mu.settings import TagSettings
from mu.statistics import Statistics, StatisticsDict


class ScheduleDict(TypedDict):
    """
    JSON-serializable dictionary representation of a Schedule object.
    """

    metacards: list[MetacardDict]
    statistics: StatisticsDict
    tag_statistics: dict[str, StatisticsDict]
    updated: str | None


@dataclass
class Schedule:
    """
    The persistently stored state of the scheduler.

    A schedule holds one metacard per card that has ever been in the deck. It does not hold
    the content of the cards; metacards whose card has been removed from the deck are kept,
    so the card resumes where it left off if it is added back.

    Attributes:
        metacards: The learning states of the cards.
        statistics: Statistics about all reviews. The bare constructor starts them from
            neutral `Statistics()`, with an adaptive retention rate of 1.0; `Schedule.new`
            starts them from the desired retention rate of the default tag settings.
        tag_statistics: Statistics about the reviews of each tag.
        updated: When the new queue was last filled, or None if it never was.
    """

    metacards: list[Metacard] = field(default_factory=list)
    statistics: Statistics = field(default_factory=Statistics)
    tag_statistics: dict[str, Statistics] = field(default_factory=dict)
    updated: datetime | None = None

    @classmethod
    def new(cls, settings: TagSettings) -> Self:
        """
        Creates an empty schedule.

        Args:
            settings: The default tag settings of the deck.
        """

        return cls(
            metacards=[],
            statistics=Statistics.new(settings),
            tag_statistics={},
            updated=None,
        )

    def to_dict(self) -> ScheduleDict:
        """
        Returns a JSON-serializable dictionary representation of the Schedule object.
        """

        return {
            "metacards": [metacard.to_dict() for metacard in self.metacards],
            "statistics": self.statistics.to_dict(),
            "tag_statistics": {
                tag: statistics.to_dict()
                for tag, statistics in self.tag_statistics.items()
            },
            "updated": self.updated.isoformat() if self.updated else None,
        }

    @classmethod
    def from_dict(cls, source_dict: ScheduleDict) -> Self:
        """
        Creates a Schedule object from an existing dictionary.

        Args:
            source_dict: A dictionary representing an existing Schedule object.

        Returns:
            A Schedule object created from the provided dictionary.
        """

        return cls(
            metacards=[
                Metacard.from_dict(metacard) for metacard in source_dict["metacards"]
            ],
            statistics=Statistics.from_dict(source_dict["statistics"]),
            tag_statistics={
                tag: Statistics.from_dict(statistics)
                for tag, statistics in source_dict["tag_statistics"].items()
            },
            updated=(
                datetime.fromisoformat(source_dict["updated"])
                if source_dict["updated"]
                else None
            ),
        )

    def to_json(self, indent: int | str | None = None) -> str:
        """
        Returns a JSON-serialized string of the Schedule object.

        Args:
            indent: Equivalent argument to the indent in json.dumps()
        """

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, source_json: str) -> Self:
        """
        Creates a Schedule object from a JSON-serialized string.
        """

        source_dict: ScheduleDict = json.loads(source_json)
        return cls.from_dict(source_dict=source_dict)

    def to_yaml(self) -> str:
        """
        Returns a YAML-serialized string of the Schedule object.
        """

        return yaml.safe_dump(self.to_dict(), sort_keys=False)

    @classmethod
    def from_yaml(cls, source_yaml: str) -> Self:
        """
        Creates a Schedule object from a YAML-serialized string.

        Raises:
            yaml.YAMLError: If the string is not valid YAML.
        """

        source_dict: ScheduleDict = yaml.safe_load(source_yaml)
        return cls.from_dict(source_dict=source_dict)


__all__ = ["Schedule"]
