from __future__ import annotations

from datetime import date
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date: ...


class SystemClock:
    """Local calendar day from the host clock."""

    def today(self) -> date:
        return date.today()


system_clock = SystemClock()


def get_clock() -> Clock:
    return system_clock
