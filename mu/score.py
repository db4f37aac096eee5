from enum import IntEnum

# the number of scores a review can be given
SCORES = 5

# the number of priority levels a card can have
PRIORITIES = 5


class Score(IntEnum):
    """
    Enum representing the five possible scores when reviewing a card.
    """

    Fail = 0
    Hard = 1
    Okay = 2
    Good = 3
    Easy = 4

    def __str__(self) -> str:
        return self.name.lower()


__all__ = ["Score", "SCORES", "PRIORITIES"]
