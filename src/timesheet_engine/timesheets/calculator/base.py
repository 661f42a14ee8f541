from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...events.model import TimeEvent
from ..model import DailyHours


class HoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for daily worked hours)."""

    @abstractmethod
    def calculate(self, events: Iterable[TimeEvent]) -> DailyHours:
        raise NotImplementedError
