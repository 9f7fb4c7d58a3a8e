"""Injectable source of "today"."""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def today(self) -> date:
        ...


class SystemClock:
    """Reads the local calendar date."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Always reports the same date until set() moves it."""

    def __init__(self, current: date):
        self.current = current

    def today(self) -> date:
        return self.current

    def set(self, current: date) -> None:
        self.current = current
