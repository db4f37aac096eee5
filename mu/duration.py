"""
mu.duration
-----------

This module parses and formats the duration literals used in deck files.

A duration literal is an integer immediately followed by a unit:

- `m`: minutes
- `d`: days
- `w`: weeks
- `M`: months (4 weeks)
- `y`: years (48 weeks)
"""

from __future__ import annotations
from datetime import timedelta

from mu.errors import ParsingError, ParsingErrorKind

WEEKS_PER_MONTH = 4
WEEKS_PER_YEAR = 4 * 12

UNITS = {
    "m": timedelta(minutes=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
    "M": timedelta(weeks=WEEKS_PER_MONTH),
    "y": timedelta(weeks=WEEKS_PER_YEAR),
}


def parse_duration(source: str) -> timedelta:
    """
    Parses a duration literal such as `30m` or `2M`.

    Args:
        source: The trimmed duration literal.

    Returns:
        timedelta: The parsed duration.

    Raises:
        ParsingError: If the number part is not an integer, the unit is unknown or the
            duration is too large to represent.
            The error carries no line number; the deck parser fills it in.
    """

    if not source:
        raise ParsingError(ParsingErrorKind.ParseInt, "duration empty")

    number_part, unit = source[:-1], source[-1]

    try:
        number = int(number_part)
    except ValueError as err:
        raise ParsingError(
            ParsingErrorKind.ParseInt, f"failed to parse integer ({err})"
        ) from err

    if unit not in UNITS:
        raise ParsingError(ParsingErrorKind.UnknownUnit, f"unknown unit '{unit}'")

    try:
        return number * UNITS[unit]
    except OverflowError as err:
        raise ParsingError(
            ParsingErrorKind.ParseInt, f"duration too large ({err})"
        ) from err


def format_duration(duration: timedelta) -> str:
    """
    Formats a duration using the deck units, e.g. `1y 2M 3w 4d 5h 6m`.

    Zero-valued parts are left out and a zero duration is written as `0`.
    """

    if not duration:
        return "0"

    minutes = int(duration.total_seconds()) // 60

    parts = []
    for suffix, size in (
        ("y", WEEKS_PER_YEAR * 7 * 24 * 60),
        ("M", WEEKS_PER_MONTH * 7 * 24 * 60),
        ("w", 7 * 24 * 60),
        ("d", 24 * 60),
        ("h", 60),
        ("m", 1),
    ):
        amount, minutes = divmod(minutes, size)
        if amount != 0:
            parts.append(f"{amount}{suffix}")

    return " ".join(parts) if parts else "0"


__all__ = ["parse_duration", "format_duration"]
