"""
mu.state
--------

This module defines the learning states a card can be in.

A state is one of `New`, `Learning(step)`, `Relearning(step)` or `Learnt`, where `step` is
an index into the learning or relearning intervals of the card's tag settings.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, TypedDict


class StateDict(TypedDict):
    """
    JSON-serializable dictionary representation of a card state.
    """

    kind: str
    step: int | None


@dataclass(frozen=True)
class New:
    """
    A new, unreviewed card.
    """


@dataclass(frozen=True)
class Learning:
    """
    A card being learnt, at the given learning step.
    """

    step: int


@dataclass(frozen=True)
class Relearning:
    """
    A failed card being relearnt, at the given relearning step.
    """

    step: int


@dataclass(frozen=True)
class Learnt:
    """
    A card that has been learnt.
    """


CardState = New | Learning | Relearning | Learnt


def state_to_dict(state: CardState) -> StateDict:
    match state:
        case New():
            return {"kind": "new", "step": None}
        case Learning(step):
            return {"kind": "learning", "step": step}
        case Relearning(step):
            return {"kind": "relearning", "step": step}
        case Learnt():
            return {"kind": "learnt", "step": None}

    raise TypeError(f"not a card state: {state!r}")


def state_from_dict(source_dict: dict[str, Any]) -> CardState:
    match source_dict["kind"]:
        case "new":
            return New()
        case "learning":
            return Learning(int(source_dict["step"]))
        case "relearning":
            return Relearning(int(source_dict["step"]))
        case "learnt":
            return Learnt()

    raise ValueError(f"unknown card state: {source_dict['kind']!r}")


__all__ = [
    "CardState",
    "New",
    "Learning",
    "Relearning",
    "Learnt",
    "state_to_dict",
    "state_from_dict",
]
