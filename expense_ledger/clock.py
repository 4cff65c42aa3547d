"""
Clock abstraction.

Anything that needs "today" takes a Clock, so date-window logic
can be exercised against a fixed calendar date.
"""

from datetime import date
from typing import Protocol


class Clock(Protocol):
    """Source of the current calendar date in process-local time."""

    def today(self) -> date:
        ...


class SystemClock:
    """Today's date from the host's local calendar (not UTC-normalised)."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """A clock stuck on one date. Mostly for tests and replays."""

    def __init__(self, day: date):
        self._day = day

    def today(self) -> date:
        return self._day

    def set(self, day: date) -> None:
        self._day = day


def today_iso(clock: Clock) -> str:
    """Today's date from `clock` as YYYY-MM-DD."""
    return clock.today().isoformat()
