"""
mu.scheduler
------------

This module defines the Scheduler class, which decides which card is to be reviewed next.

Classes:
    Scheduler: The card scheduler.
"""

from __future__ import annotations
from collections import deque
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta, timezone
from heapq import heappop, heappush
import logging
from random import Random

from mu.card import Card
from mu.deck import Deck
from mu.metacard import Metacard, due_after
from mu.schedule import Schedule
from mu.score import Score
from mu.settings import TagSettings
from mu.state import New
from mu.statistics import Statistics

logger = logging.getLogger(__name__)

# how far into the future a postponed card is moved
POSTPONEMENT = timedelta(days=1)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _utc_date(moment: datetime) -> date:
    return moment.astimezone(timezone.utc).date()


class Scheduler:
    """
    The card scheduler.

    The scheduler combines the content of a deck with the learning state stored in a
    schedule. It keeps the cards whose review time has been scheduled in a queue ordered by
    due time, and introduces never-reviewed cards at a limited daily rate. The two are
    interleaved when picking the next card to review.

    The schedule is mutated in place; callers persist it (see `Scheduler.schedule`) after
    each review or postponement.

    Attributes:
        _deck: The content of the cards.
        _schedule: The persistently stored part of the scheduler. Every metacard referenced
            by the queues has a card in `_deck`.
        _clock: Returns the current date and time.
        _rng: Source of randomness for interleaving new and due cards.
        _queue: A heap of (due, metacard index) pairs of the scheduled cards.
        _new_cards: New cards that have not been admitted to the new queue yet.
        _new_queue: New cards that have been admitted for review.
        _due: The number of cards in `_queue` that are due.
        _current: The metacard index of the card being reviewed.
    """

    def __init__(
        self,
        deck: Deck,
        schedule: Schedule,
        *,
        clock: Callable[[], datetime] | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Creates a scheduler from a deck and a schedule.

        Metacards of cards that are no longer in the deck are kept in the schedule but not
        scheduled. Cards of the deck that have no metacard get a new one.

        Args:
            deck: The content of the cards. Must contain at least one card.
            schedule: The stored learning state.
            clock: Returns the current, timezone-aware date and time. Defaults to the UTC
                system clock.
            rng: Source of randomness for picking cards.

        Raises:
            ValueError: If the deck contains no cards.
        """

        if not deck.cards:
            raise ValueError("cannot schedule an empty deck")

        self._deck = deck
        self._schedule = schedule
        self._clock = clock if clock is not None else _now
        self._rng = rng if rng is not None else Random()

        self._queue: list[tuple[datetime, int]] = []
        self._new_cards: deque[int] = deque()
        self._new_queue: list[int] = []
        self._due = 0

        self._reconcile()

        self.update()
        # make sure there is something to review on a fresh deck
        if not self._new_queue and not self._queue:
            self._new_queue.append(self._new_cards.popleft())

        self._pick_card()

    def _reconcile(self) -> None:
        # ids of the cards that have been scheduled or put among the new cards
        queued: set[str] = set()
        orphans = 0

        for index, metacard in enumerate(self._schedule.metacards):
            if metacard.card_id not in self._deck.cards:
                # the card was removed from the deck; keep its data in case it returns
                orphans += 1
                continue

            if metacard.card_id in queued:
                logger.warning(
                    "ignoring duplicate metacard for card %r", metacard.card_id
                )
                continue

            if isinstance(metacard.state, New):
                self._new_cards.append(index)
            else:
                heappush(self._queue, (metacard.due, index))

            queued.add(metacard.card_id)

        now = self._clock()
        added = 0
        for card_id, card in self._deck.cards.items():
            if card_id in queued:
                continue

            settings = self._deck.resolve_tag_settings(card.tags)
            self._schedule.metacards.append(Metacard.new(card_id, settings, now))
            self._new_cards.append(len(self._schedule.metacards) - 1)
            added += 1

        logger.debug(
            "reconciled schedule: %d scheduled, %d new (%d added), %d orphaned",
            len(self._queue),
            len(self._new_cards),
            added,
            orphans,
        )

    def update(self) -> None:
        """
        Recounts the due cards and, once per calendar day, admits new cards for review.

        At most `max_new_daily` cards are admitted per day, and the new queue never grows
        beyond `max_new_queue` cards.
        """

        now = self._clock()
        self._due = sum(1 for due, _ in self._queue if due < now)

        updated = self._schedule.updated
        if updated is not None and (_utc_date(now) - _utc_date(updated)).days < 1:
            return

        self._schedule.updated = now

        settings = self._deck.settings
        limit = min(
            len(self._new_queue) + settings.max_new_daily, settings.max_new_queue
        )
        admitted = 0
        while len(self._new_queue) < limit and self._new_cards:
            self._new_queue.append(self._new_cards.popleft())
            admitted += 1

        logger.debug(
            "admitted %d new cards, %d new cards left", admitted, len(self._new_cards)
        )

    def _gen_ratio(self, numerator: int, denominator: int) -> bool:
        # true with probability numerator / denominator
        return self._rng.randrange(denominator) < numerator

    def _pick_card(self) -> None:
        """
        Takes the next card out of the queues and makes it the current card.

        The current card must have been put back into the queue before this is called,
        otherwise it is lost until the scheduler is recreated.
        """

        if not self._new_queue:
            new = False
        elif self._due == 0:
            new = True
        # the ratio spaces the new cards out as evenly as possible among the due cards
        elif len(self._new_queue) <= self._due:
            new = self._gen_ratio(len(self._new_queue), self._due)
        else:
            new = not self._gen_ratio(self._due, len(self._new_queue))

        if new:
            self._current = self._new_queue.pop()
        else:
            _, self._current = heappop(self._queue)
            if self._due > 0:
                self._due -= 1

    def _reschedule(self, now: datetime) -> None:
        due = self.current_metacard.due
        heappush(self._queue, (due, self._current))
        if due <= now:
            self._due += 1

    def _average_familiarity(self, tags: Sequence[str]) -> float:
        total = self._schedule.statistics.familiarity
        count = 1
        for tag in tags:
            statistics = self._schedule.tag_statistics.get(tag)
            if statistics is not None:
                total += statistics.familiarity
                count += 1

        return total / count

    @staticmethod
    def _max_interval(card: Card, settings: TagSettings) -> timedelta:
        return min(card.max_interval, settings.max_interval)

    def review(self, score: Score) -> None:
        """
        Reviews the current card with the given score and moves on to the next card.

        Args:
            score: The score chosen for the current card.
        """

        now = self._clock()
        card = self.current_card
        metacard = self.current_metacard
        settings = self._deck.resolve_tag_settings(card.tags)

        familiarity = self._average_familiarity(card.tags)

        metacard.review(
            settings,
            score,
            card.priority,
            familiarity,
            self._max_interval(card, settings),
            now,
        )

        self._schedule.statistics.review(score, settings, now)
        for tag in card.tags:
            statistics = self._schedule.tag_statistics.get(tag)
            if statistics is None:
                statistics = Statistics.new(settings)
                self._schedule.tag_statistics[tag] = statistics
            statistics.review(score, settings, now)

        self._reschedule(now)
        self._pick_card()
        self.update()

    def postpone(self) -> None:
        """
        Postpones the current card by a day and moves on to the next card.

        This is not a review: the card's interval, ease and history as well as the statistics
        are left untouched.
        """

        now = self._clock()
        metacard = self.current_metacard
        metacard.due = due_after(now, POSTPONEMENT)
        logger.debug("postponed card %r to %s", metacard.card_id, metacard.due)

        self._reschedule(now)
        self._pick_card()
        self.update()

    @property
    def current_metacard(self) -> Metacard:
        return self._schedule.metacards[self._current]

    @property
    def current_card(self) -> Card:
        # never fails, as only metacards with cards are ever queued
        return self._deck.cards[self.current_metacard.card_id]

    def current_card_new_intervals(self) -> list[timedelta]:
        """
        Gets the intervals the current card would get for each score, ordered by score.

        These are meant to be shown to the user before they pick a score.
        """

        card = self.current_card
        settings = self._deck.resolve_tag_settings(card.tags)

        return self.current_metacard.new_intervals(
            settings,
            card.priority,
            self._average_familiarity(card.tags),
            self._max_interval(card, settings),
        )

    def due_cards(self) -> int:
        """
        The number of due cards.
        """

        return self._due

    def queued_cards(self) -> int:
        """
        The number of cards to be reviewed, both due and new.
        """

        return self._due + len(self._new_queue)

    def new_cards(self) -> int:
        """
        The number of new cards admitted for review.
        """

        return len(self._new_queue)

    @property
    def deck(self) -> Deck:
        return self._deck

    @property
    def schedule(self) -> Schedule:
        return self._schedule


__all__ = ["Scheduler"]
